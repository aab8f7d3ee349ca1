"""
Simulation room: intro screen, live scoreboard with the commentary window,
and the final screen. The clock runs inside the script via asyncio.run and
redraws placeholders on every simulated minute.
"""
from __future__ import annotations

import asyncio
from typing import List

import streamlit as st

from components.cards import simulation_summary
from domain.match_clock import MatchClockEngine
from domain.models import ClockState, CommentaryEntry, CommentaryKind
from services.session import AppSession

_KIND_ICONS = {
    CommentaryKind.GOAL: "⚽",
    CommentaryKind.CHANCE: "🧤",
    CommentaryKind.CARD: "🟨",
    CommentaryKind.NORMAL: "•",
}


class StreamlitAudioSink:
    """AudioSink that autoplays WAV bytes in a fixed placeholder."""

    def __init__(self, placeholder=None) -> None:
        self.placeholder = placeholder

    def play(self, wav_bytes: bytes) -> None:
        if self.placeholder is None:
            return
        self.placeholder.audio(wav_bytes, format="audio/wav", autoplay=True)


def commentary_markdown(entries: List[CommentaryEntry]) -> str:
    if not entries:
        return "_Waiting for the action..._"
    lines = []
    for e in entries:
        text = f"**{e.text}**" if e.kind == CommentaryKind.GOAL else e.text
        lines.append(f"{_KIND_ICONS[e.kind]} `{e.minute}'` {text}")
    return "\n\n".join(lines)


def _scoreboard(placeholder, session: AppSession, clock: MatchClockEngine) -> None:
    my, opp = session.teams.my_team, session.teams.opponent
    with placeholder.container():
        c1, c2, c3 = st.columns([3, 2, 3])
        c1.markdown(f"### {my.name}")
        c2.markdown(f"## {clock.home_score} - {clock.away_score}")
        c3.markdown(f"### {opp.name}")
        st.progress(min(clock.progress, 1.0), text=f"{clock.minute}'")


def _intro(session: AppSession) -> bool:
    result = session.simulation
    st.subheader("Pre-match projection")
    simulation_summary(result)
    st.caption(f"Projected score: {result.prediction.score}")
    return st.button("KICK OFF", type="primary", use_container_width=True)


def _final(session: AppSession, clock: MatchClockEngine) -> None:
    st.subheader("Full Time")
    st.markdown(commentary_markdown(clock.feed.recent()))
    c1, c2 = st.columns(2)
    with c1:
        if st.button("Replay", use_container_width=True):
            clock.load(session.simulation.prediction.score)
            st.rerun()
    with c2:
        if st.button("Close simulation", use_container_width=True):
            session.close_simulation()
            st.rerun()


def simulation_room(session: AppSession) -> None:
    clock = session.clock
    if session.simulation is None or clock.state is None:
        st.info("Run a simulation from the Report page to open the room.")
        return

    audio_slot = st.empty()
    if isinstance(session.audio.sink, StreamlitAudioSink):
        session.audio.sink.placeholder = audio_slot
    else:
        session.audio.sink = StreamlitAudioSink(audio_slot)

    if clock.state == ClockState.INTRO:
        if not _intro(session):
            return
        clock.start()

    board = st.empty()
    feed = st.empty()
    _scoreboard(board, session, clock)

    if clock.state == ClockState.LIVE:
        def render(engine: MatchClockEngine, _entries: List[CommentaryEntry]) -> None:
            _scoreboard(board, session, engine)
            feed.markdown(commentary_markdown(engine.feed.recent()))

        feed.markdown(commentary_markdown(clock.feed.recent()))
        if asyncio.run(clock.run(on_update=render)):
            st.rerun()
        return

    _final(session, clock)
