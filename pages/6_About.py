import streamlit as st

st.set_page_config(page_title="About", page_icon="ℹ️")

st.title("ℹ️ About TACTIX OSM Assistant")

st.markdown(
    """
A match-preparation assistant for Online Soccer Manager.

- Team records are edited by hand or read from screenshots, and saved locally under `data/`.
- Analysis, coaching guides, document extraction and simulations come from Google Gemini;
  set `GEMINI_API_KEY` in the environment or a `.env` file.
- The simulation room replays the predicted score minute by minute with commentary,
  a referee whistle and crowd noise.
- Output language can be switched between English and Turkish from the sidebar.

Domain logic lives in `domain/` and is tested without Streamlit.
    """
)
