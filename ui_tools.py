"""
ui_tools.py — Shared Streamlit UI utilities
---------------------------------------------

* Theme: the accent color handed explicitly to every screen
* Page CSS derived from the theme
* Per-session store connection and query cache
* Notice rendering (toasts / inline alerts)
"""

from dataclasses import dataclass

import streamlit as st

import db
from auth import CONN_KEY
from cache import QueryCache
from models import Notice
from settings import DB_PATH, THEME_COLOR


@dataclass(frozen=True)
class Theme:
    color: str = THEME_COLOR
    accent: str = "#5DB075"
    text: str = "#1B4D3E"
    muted: str = "#F0F7F4"


def page_css(theme: Theme) -> str:
    return f"""
<link href="https://fonts.googleapis.com/css2?family=Merriweather:wght@300;400;700&family=Inter:wght@300;400;600&display=swap" rel="stylesheet">
<style>
:root {{ --theme: {theme.color}; --accent: {theme.accent}; --muted: {theme.muted}; --text: {theme.text}; --card-radius: 12px; }}
html, body, [data-testid='stAppViewContainer'] {{
    background: linear-gradient(180deg, #f6faf6 0%, #f2f6f2 100%);
    font-family: Inter, system-ui, -apple-system, 'Segoe UI', Roboto, 'Helvetica Neue', Arial;
    color: var(--text);
}}
h1, h2, h3 {{ font-family: Merriweather, serif; color: var(--text); }}
.top-nav {{ background: linear-gradient(90deg, var(--text), var(--theme)); color: #fff; padding: 12px 20px;
    border-radius: var(--card-radius); display: flex; align-items: center; gap: 18px; box-shadow: 0 2px 8px rgba(0,0,0,0.06); }}
.top-nav .brand {{ font-family: Merriweather, serif; font-weight: 700; font-size: 20px; }}
.hero {{ text-align: center; margin-bottom: 18px; }}
.hero p {{ color: var(--theme); }}
.card {{ background: #fff; border-radius: var(--card-radius); padding: 18px; box-shadow: 0 12px 28px rgba(17,24,39,0.06); margin-bottom: 14px; }}
.meta {{ background: var(--muted); border-radius: 8px; padding: 12px; margin-bottom: 10px; }}
.meta .label {{ font-size: 12px; color: var(--theme); }}
.meta .value {{ font-weight: 600; color: var(--text); }}
.small-muted {{ color: #96a89d; font-size: 12px; }}
.badge {{ color: #fff; padding: 2px 8px; border-radius: 8px; font-size: 12px; font-weight: 600; }}
.stButton>button[kind='primary'] {{ background: var(--accent) !important; border: none !important; border-radius: 10px !important; }}
.chat-user {{ background: var(--accent); color: #fff; border-radius: 14px; padding: 8px 12px; margin: 6px 0 6px 20%; white-space: pre-wrap; }}
.chat-assistant {{ background: var(--muted); color: var(--text); border-radius: 14px; padding: 8px 12px; margin: 6px 20% 6px 0; white-space: pre-wrap; }}
@media (max-width: 900px) {{ .top-nav {{ padding: 10px; }} }}
</style>
"""


def get_conn():
    if CONN_KEY not in st.session_state:
        st.session_state[CONN_KEY] = db.get_conn(DB_PATH)
    return st.session_state[CONN_KEY]


def get_cache() -> QueryCache:
    return QueryCache(st.session_state)


def show_notice(notice, inline=False):
    """Render a Notice; inline alerts stay on the page, toasts fade out."""
    if notice is None:
        return
    if inline:
        {"success": st.success, "info": st.info, "warning": st.warning, "error": st.error}[notice.level](notice.message)
        return
    icons = {"success": "✅", "info": "ℹ️", "warning": "⚠️", "error": "❌"}
    st.toast(notice.message, icon=icons[notice.level])


def flash(notice: Notice):
    """Queue a notice to show after the next rerun."""
    st.session_state.setdefault("flash", []).append(notice)


def show_flashes():
    for notice in st.session_state.pop("flash", []):
        show_notice(notice)
