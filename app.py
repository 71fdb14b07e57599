import streamlit as st
from database import Database
import views
import config

# Page Configuration
st.set_page_config(
    page_title=config.APP_TITLE,
    page_icon="📦",
    layout="wide",
    initial_sidebar_state="expanded"
)

# --- SESSION STATE MANAGEMENT ---
# Every browser session owns its own in-memory collection, seeded on first load
if 'db' not in st.session_state: st.session_state.db = Database()
if 'page' not in st.session_state: st.session_state.page = 1

db = st.session_state.db


def reset_session():
    st.session_state.clear()


# --- MAIN APP LAYOUT ---
st.sidebar.title("📦 Asset Manager")
st.sidebar.markdown(f"""
    <div style="background-color: #262730; border: 1px solid #444; border-radius: 5px; padding: 5px 10px; margin-bottom: 20px; text-align: center;">
        <span style="color: #888; font-size: 0.8em;">VERSION</span><br>
        <span style="color: #fff; font-weight: bold;">{config.APP_VERSION}</span>
    </div>
    """, unsafe_allow_html=True)

st.sidebar.info(f"Assets in session: **{db.count()}**\nMode: **{db.consistency_mode.title()}**")
st.sidebar.divider()

choice = st.sidebar.radio("Navigation", ["Dashboard", "Add Asset", "Bulk Operations"])
st.sidebar.markdown("---")
st.sidebar.button("↺ Reset to Sample Data", type="secondary", on_click=reset_session)

if choice == "Dashboard": views.show_dashboard(db)
elif choice == "Add Asset": views.show_add_asset(db)
elif choice == "Bulk Operations": views.show_bulk_operations(db)
