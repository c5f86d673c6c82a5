"""Sidebar navigation menu."""
import streamlit as st

from core.constants import (
    MENU_CUSTOMERS,
    MENU_DASHBOARD,
    MENU_INVENTORY,
    MENU_REPORTS,
    MENU_SALES,
    MENU_SETTINGS,
)

MENU = [
    MENU_DASHBOARD,
    MENU_INVENTORY,
    MENU_SALES,
    MENU_CUSTOMERS,
    MENU_REPORTS,
    MENU_SETTINGS,
]


def render_sidebar_menu(store_name: str = "") -> str:
    """Render the sidebar navigation menu and return the selected page."""
    st.sidebar.title(store_name or "Gestão da Loja")
    if (
        "menu_selection" not in st.session_state
        or st.session_state.menu_selection not in MENU
    ):
        st.session_state.menu_selection = MENU[0]
    selected = st.sidebar.radio("Menu", MENU, key="menu_selection")
    st.sidebar.markdown("---")
    if st.sidebar.button("\U0001F504 Recarregar dados", key="reload_data"):
        # Drop every screen's cached queries; each refetches on next access.
        for key in [k for k in st.session_state.keys() if str(k).startswith("queries:")]:
            del st.session_state[key]
        st.rerun()
    return selected
