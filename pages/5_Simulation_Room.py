import streamlit as st

from components.banners import error_banner, matchup_banner
from components.simulation_room import simulation_room
from components.state import get_session

st.set_page_config(page_title="Simulation Room", page_icon="🏟️", layout="wide")
st.title("🏟️ Simulation Room")

session = get_session()
matchup_banner(session.teams.my_team, session.teams.opponent)
error_banner(session.error)
simulation_room(session)
