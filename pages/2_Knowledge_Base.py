import streamlit as st

from components.banners import error_banner
from components.cards import insight_card
from components.controls import encode_upload, sidebar_language
from components.state import get_session

st.set_page_config(page_title="Knowledge Base", page_icon="📚")
st.title("📚 Knowledge Base")

session = get_session()
sidebar_language(session)
error_banner(session.error)

st.caption("Upload tactical guides or player sheets. Extracted rules are added to every analysis.")
upload = st.file_uploader("Document image", type=["png", "jpg", "jpeg", "webp"])
if upload is not None and st.button("Process document", type="primary"):
    with st.spinner("DocMaster is reading..."):
        insight = session.add_document(encode_upload(upload), upload.name, upload.type or "image/jpeg")
    if insight is not None:
        st.success(f"Added {insight.filename}")
        st.rerun()

if len(session.knowledge) == 0:
    st.info("No documents yet.")
for insight in session.knowledge:
    insight_card(insight, on_remove=session.remove_document)

if session.settings.PERSIST_KNOWLEDGE_BASE:
    st.caption("Documents are saved between sessions.")
else:
    st.caption("Documents are kept for this session only.")
