import streamlit as st

from components.banners import error_banner
from components.cards import tutorial_view
from components.controls import sidebar_language
from components.state import get_session

st.set_page_config(page_title="Coach", page_icon="🧑‍🏫")
st.title("🧑‍🏫 Coach Alpha")

session = get_session()
sidebar_language(session)

if session.report is None:
    st.info("Run an analysis on the Report page first.")
    st.stop()

if st.button("Build my step-by-step guide", type="primary"):
    with st.spinner("Coach Alpha is preparing your guide..."):
        session.coaching_guide()

error_banner(session.error)
if session.tutorial is not None:
    tutorial_view(session.tutorial)
