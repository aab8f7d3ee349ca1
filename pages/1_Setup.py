import streamlit as st

from components.banners import error_banner, matchup_banner
from components.controls import sidebar_language, team_editor
from components.pitch import tactical_field
from components.state import get_session
from domain.models import TeamSide

st.set_page_config(page_title="Setup", page_icon="🛠️", layout="wide")
st.title("🛠️ Match Setup")

session = get_session()
sidebar_language(session)
matchup_banner(session.teams.my_team, session.teams.opponent)
error_banner(session.error)

c1, c2 = st.columns(2)
with c1:
    team_editor(session, TeamSide.SELF)
    tactical_field(session.teams.my_team.formation, color="#1f77b4")
with c2:
    team_editor(session, TeamSide.OPPONENT)
    tactical_field(session.teams.opponent.formation, color="#d62728")
