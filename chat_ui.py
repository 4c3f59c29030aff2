"""
chat_ui.py — SiteScan Assistant panel (sidebar, mounted on every page)
"""

import html

import streamlit as st

import catalog
import llm
import notes
from assistant import Conversation
from errors import StoreError, describe_exception
from ui_tools import get_cache, get_conn


def _snapshot():
    conn, cache = get_conn(), get_cache()
    try:
        return catalog.list_artifacts(conn, cache), notes.list_notes(conn, cache)
    except StoreError as e:
        describe_exception(e)
        return [], []


def render_panel(theme):
    conversation = Conversation(st.session_state, key="chat")

    with st.sidebar:
        st.markdown(f"<h3 style='color:{theme.color}'>💬 SiteScan Assistant</h3>", unsafe_allow_html=True)
        if not conversation.messages:
            st.caption("Ask me anything! I can help you with questions about your artifacts and notes.")
        for message in conversation.messages:
            css = "chat-user" if message.role == "user" else "chat-assistant"
            st.markdown(f"<div class='{css}'>{html.escape(message.content)}</div>", unsafe_allow_html=True)

        with st.form("chat_form", clear_on_submit=True, border=False):
            question = st.text_input("Question", placeholder="Ask about your data...",
                                     label_visibility="collapsed", disabled=conversation.loading)
            sent = st.form_submit_button("Send", disabled=conversation.loading, use_container_width=True)

        if sent and question.strip():
            artifacts, field_notes = _snapshot()
            with st.spinner("Thinking..."):
                conversation.ask(question, artifacts, field_notes, llm.invoke)
            st.rerun()
