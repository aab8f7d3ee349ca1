"""
Per-browser-session access to the AppSession.

Streamlit reruns every page script top to bottom; the AppSession lives in
st.session_state so that teams, reports and the match clock survive reruns.
"""
from __future__ import annotations

import streamlit as st

from services.session import AppSession

_SESSION_KEY = "tactix_session"


def get_session() -> AppSession:
    session = st.session_state.get(_SESSION_KEY)
    if session is None:
        session = AppSession().open()
        st.session_state[_SESSION_KEY] = session
    return session


def reset_session() -> None:
    session = st.session_state.pop(_SESSION_KEY, None)
    if session is not None:
        session.close()
