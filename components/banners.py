"""
Banner components: the current matchup and the last error.
"""
from __future__ import annotations

from typing import Optional

import streamlit as st

from domain.models import TeamRecord


def matchup_banner(my_team: TeamRecord, opponent: TeamRecord) -> None:
    st.markdown(
        f"<div class='context-banner'><strong>Matchup:</strong> {my_team} "
        f"<em>vs</em> {opponent}</div>",
        unsafe_allow_html=True,
    )


def error_banner(error: Optional[str]) -> None:
    if error:
        st.error(error)
