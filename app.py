"""
TACTIX OSM Assistant - Main Application Entry Point

This is a thin bootstrapper that configures Streamlit, logging and routes to
pages. All business logic is contained in the domain/ and services/ modules.
"""

import logging

import streamlit as st

from services.config import get_settings

logging.basicConfig(
    level=getattr(logging, get_settings().LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# Configure Streamlit page
st.set_page_config(
    page_title="⚽ TACTIX OSM Assistant",
    page_icon="⚽",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS for better styling
st.markdown("""
<style>
    .main > div {
        padding-top: 2rem;
    }
    .recommendation-card {
        border: 1px solid #e0e0e0;
        border-radius: 8px;
        padding: 1rem;
        margin: 1rem 0;
        background-color: #fafafa;
    }
    .context-banner {
        background-color: #e8f4f8;
        border-left: 4px solid #1f77b4;
        padding: 0.5rem 1rem;
        margin: 1rem 0;
        border-radius: 4px;
    }
</style>
""", unsafe_allow_html=True)


def main():
    """Main application entry point"""
    st.title("⚽ TACTIX OSM Assistant")
    st.markdown("### Prepare your next Online Soccer Manager match from the sidebar pages.")
    st.info("""
    🛠️ **Setup** - Enter or scan both teams.

    📚 **Knowledge Base** - Upload tactical documents to sharpen the analysis.

    📋 **Report** - Get the tactical battle plan for the matchup.

    🧑‍🏫 **Coach** - Step-by-step instructions to apply the plan in OSM.

    🏟️ **Simulation Room** - Watch a simulated match of your plan.
    """)
    if not get_settings().GEMINI_API_KEY:
        st.warning("GEMINI_API_KEY is not set. Team editing works, remote analysis will fail.")

    with st.expander("📁 Project Structure", expanded=False):
        st.code("""
tactix/
├─ app.py                    # Main entry point
├─ pages/                    # Streamlit pages
├─ components/               # UI components
├─ domain/                   # Pure logic: models, scheduler, match clock
├─ services/                 # Storage, Gemini client, audio, voice, session
├─ data/                     # Persisted team records
└─ tests/                    # Unit tests
        """, language="text")


if __name__ == "__main__":
    main()
