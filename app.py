from __future__ import annotations

import streamlit as st

from core.app_state import VIEW_DASHBOARD, VIEW_DATA, VIEW_ENTRY, VIEW_LEDGER, VIEW_STORES
from core.config import get_settings
from core.ui import get_app_state

st.set_page_config(page_title="Chip Sales Dashboard", page_icon="💅", layout="wide")

settings = get_settings()
app_state = get_app_state(settings)

PAGES = [
    (VIEW_ENTRY, "pages/1_📝_Sale_Entry.py", "Sale Entry", "📝"),
    (VIEW_LEDGER, "pages/2_📋_Sales_Ledger.py", "Sales Ledger", "📋"),
    (VIEW_STORES, "pages/3_🏬_Stores.py", "Stores", "🏬"),
    (VIEW_DASHBOARD, "pages/4_📊_Dashboard.py", "Dashboard", "📊"),
    (VIEW_DATA, "pages/5_🧪_Data_Management.py", "Data Management", "🧪"),
]

# The last view used becomes the landing page.
pages = [
    st.Page(path, title=title, icon=icon, default=(view == app_state.active_view))
    for view, path, title, icon in PAGES
]

with st.sidebar:
    st.caption(f"Data directory: `{settings.data_dir}`")

st.navigation(pages).run()
