import functools
import os

import streamlit as st
from streamlit.errors import StreamlitAPIException

from projecthub.charts import PROJECT_STATUS_COLORS, TASK_STATUS_COLORS

THEME_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "assets", "custom_theme.css")


def status_css() -> str:
    """One ``.ph-status-<TOKEN>`` rule per status, coloured like the charts."""
    rules = {}
    for palette in (PROJECT_STATUS_COLORS, TASK_STATUS_COLORS):
        for member, colour in palette.items():
            rules.setdefault(member.value, f".ph-status-{member.value} {{ background:{colour}; }}")
    return "\n".join(rules.values())


@functools.lru_cache(maxsize=1)
def load_css() -> str:
    with open(THEME_FILE, "r", encoding="utf-8") as f:
        return f.read() + "\n" + status_css()


def set_theme(
    page_title: str = "ProjectHub",
    page_icon: str = "📋",
    layout: str = "wide",
    initial_sidebar_state: str = "expanded",
):
    """Configure the page and inject the shared CSS plus status badge colours."""
    try:
        st.set_page_config(
            page_title=page_title,
            page_icon=page_icon,
            layout=layout,
            initial_sidebar_state=initial_sidebar_state,
        )
    except StreamlitAPIException:
        # Already configured for this run.
        pass

    try:
        css = load_css()
    except FileNotFoundError:
        st.error(f"Theme file not found at {THEME_FILE}. Please check the file path.")
        return
    st.markdown(f"<style>{css}</style>", unsafe_allow_html=True)
