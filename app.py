"""Store Dashboard - Main Application Entry Point."""
import streamlit as st

from core.config import configure_logging
from core.constants import (
    MENU_CUSTOMERS,
    MENU_DASHBOARD,
    MENU_INVENTORY,
    MENU_REPORTS,
    MENU_SALES,
    MENU_SETTINGS,
)
from core.db_init import init_db
from core.gateway import Gateway
from core.queries import screen_context
from core.services import SETTINGS, register_queries
from ui.components import show_flash
from ui.sidebar import render_sidebar_menu

# Import page render functions
from page_modules import customers, dashboard, inventory, reports, sales, settings

configure_logging()

# Page configuration
st.set_page_config(
    page_title="Gestão da Loja",
    page_icon="\U0001F6CD️",
    layout="wide",
)


# Initialize database connection (cached to avoid reconnecting on every interaction)
@st.cache_resource
def get_gateway() -> Gateway:
    return Gateway(init_db())


gateway = get_gateway()

store_settings = register_queries(screen_context(st.session_state, "settings"), gateway).get(SETTINGS)
store_name = store_settings.data.get("store_name", "") if store_settings.ok else ""

# Render sidebar menu
menu = render_sidebar_menu(store_name)
show_flash()

# Page routing: menu label -> (screen key, render function)
pages = {
    MENU_DASHBOARD: ("dashboard", dashboard.render),
    MENU_INVENTORY: ("inventory", inventory.render),
    MENU_SALES: ("sales", sales.render),
    MENU_CUSTOMERS: ("customers", customers.render),
    MENU_REPORTS: ("reports", reports.render),
    MENU_SETTINGS: ("settings", settings.render),
}

if menu not in pages:
    menu = MENU_DASHBOARD
screen, render_page = pages[menu]
queries = register_queries(screen_context(st.session_state, screen), gateway)
# Entering a screen refetches its data; reruns within the screen reuse it.
if st.session_state.get("last_screen") != screen:
    queries.clear()
    st.session_state["last_screen"] = screen
render_page(gateway, queries)
