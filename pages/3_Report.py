import streamlit as st

from components.banners import error_banner, matchup_banner
from components.cards import report_card
from components.controls import sidebar_language
from components.state import get_session

st.set_page_config(page_title="Report", page_icon="📋", layout="wide")
st.title("📋 Tactical Report")

session = get_session()
sidebar_language(session)
matchup_banner(session.teams.my_team, session.teams.opponent)

notes = st.text_area("Notes for the analyst (optional)", placeholder="e.g. my striker is injured")
c1, c2 = st.columns([1, 1])
with c1:
    if st.button("Analyze matchup", type="primary", use_container_width=True):
        with st.spinner("TACTIX is thinking..."):
            session.analyze(notes)
with c2:
    if st.button("Simulate this plan", use_container_width=True, disabled=session.report is None):
        with st.spinner("Simulation Engine running..."):
            if session.simulate() is not None:
                st.switch_page("pages/5_Simulation_Room.py")

error_banner(session.error)
if session.report is None:
    st.info("No report yet. Set up both teams, then analyze.")
else:
    report_card(session.report)
