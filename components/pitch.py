"""
Tactical field: an SVG pitch with the eleven players of a formation.
"""
from __future__ import annotations

import streamlit as st

from domain.formations import FormationCode, pitch_positions

_PITCH_SIZE = 100.0


def field_svg(code: FormationCode, color: str = "#1f77b4", width: int = 320) -> str:
    """SVG markup for one formation; the goalkeeper sits at the bottom."""
    dots = []
    for x, y in pitch_positions(code, _PITCH_SIZE):
        dots.append(
            f"<circle cx='{x}' cy='{_PITCH_SIZE - y:.2f}' r='3.2' fill='{color}' stroke='white' stroke-width='0.6'/>"
        )
    return (
        f"<svg viewBox='0 0 100 100' width='{width}' height='{width}' xmlns='http://www.w3.org/2000/svg'>"
        "<rect x='0' y='0' width='100' height='100' fill='#2e7d32' rx='2'/>"
        "<rect x='2' y='2' width='96' height='96' fill='none' stroke='white' stroke-width='0.5'/>"
        "<line x1='2' y1='50' x2='98' y2='50' stroke='white' stroke-width='0.5'/>"
        "<circle cx='50' cy='50' r='9' fill='none' stroke='white' stroke-width='0.5'/>"
        "<rect x='30' y='84' width='40' height='14' fill='none' stroke='white' stroke-width='0.5'/>"
        "<rect x='30' y='2' width='40' height='14' fill='none' stroke='white' stroke-width='0.5'/>"
        + "".join(dots)
        + "</svg>"
    )


def tactical_field(code: FormationCode, caption: str = "", color: str = "#1f77b4") -> None:
    st.markdown(field_svg(code, color), unsafe_allow_html=True)
    st.caption(caption or code.value)
