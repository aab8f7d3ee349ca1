"""
Input controls: the team editor with screenshot scan, and the sidebar
language switch. All writes go through the AppSession.
"""
from __future__ import annotations

import base64
from typing import Optional

import streamlit as st

from domain.formations import FormationCode
from domain.models import MAX_RATING, MIN_RATING, Language, Outcome, TeamSide, Venue
from services.session import AppSession

_FORM_OPTIONS = [Outcome.WIN, Outcome.DRAW, Outcome.LOSS]
_LANGUAGE_LABELS = {Language.EN: "English", Language.TR: "Türkçe"}


def encode_upload(upload) -> str:
    """Uploaded file -> base64 string without a data-URL prefix."""
    return base64.b64encode(upload.getvalue()).decode("ascii")


def _scan_uploader(session: AppSession, side: TeamSide) -> None:
    upload = st.file_uploader(
        "Scan OSM screenshot",
        type=["png", "jpg", "jpeg", "webp"],
        key=f"scan_{side.value}",
        help="Name, formation, rating and form are read from the image; anything unreadable keeps its current value.",
    )
    if upload is not None and st.button("Scan", key=f"scan_btn_{side.value}", use_container_width=True):
        with st.spinner("Vision Scout is reading the screenshot..."):
            merged = session.scan_team(side, encode_upload(upload), upload.type or "image/jpeg")
        if merged is not None:
            st.success(f"Updated: {merged}")
            st.rerun()


def team_editor(session: AppSession, side: TeamSide, title: Optional[str] = None) -> None:
    record = session.teams.get(side)
    st.subheader(title or ("My Team" if side == TeamSide.SELF else "Opponent"))
    _scan_uploader(session, side)

    formations = list(FormationCode)
    with st.form(key=f"team_form_{side.value}"):
        name = st.text_input("Team name", value=record.name)
        c1, c2 = st.columns(2)
        with c1:
            formation = st.selectbox(
                "Formation",
                options=formations,
                format_func=lambda x: x.value,
                index=formations.index(record.formation),
            )
        with c2:
            rating = st.number_input(
                "Average rating",
                min_value=MIN_RATING,
                max_value=MAX_RATING,
                value=record.averageRating,
                step=1,
            )
        venue = st.radio(
            "Venue",
            options=[Venue.HOME, Venue.AWAY],
            format_func=lambda x: x.value,
            index=[Venue.HOME, Venue.AWAY].index(record.venue),
            horizontal=True,
        )
        st.caption("Recent form (oldest to latest)")
        form_cols = st.columns(3)
        form = []
        for i, col in enumerate(form_cols):
            with col:
                form.append(
                    st.selectbox(
                        f"Match {i + 1}",
                        options=_FORM_OPTIONS,
                        format_func=lambda x: x.value,
                        index=_FORM_OPTIONS.index(record.recentForm[i]),
                        key=f"form_{side.value}_{i}",
                    )
                )
        if st.form_submit_button("Save", use_container_width=True):
            saved = session.update_team(
                side,
                name=name.strip(),
                formation=formation,
                averageRating=int(rating),
                venue=venue,
                recentForm=form,
            )
            if saved is not None:
                st.success("Saved.")
                st.rerun()


def sidebar_language(session: AppSession) -> Language:
    st.sidebar.markdown("---")
    current = _LANGUAGE_LABELS[session.language]
    other = _LANGUAGE_LABELS[Language.TR if session.language == Language.EN else Language.EN]
    st.sidebar.caption(f"Output language: {current}")
    if st.sidebar.button(f"Switch to {other}", use_container_width=True):
        session.toggle_language()
        st.rerun()
    return session.language
