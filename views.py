import streamlit as st
import pandas as pd
import plotly.express as px
from dataclasses import replace
from datetime import datetime

import config
from bulk_ops import ImportFileError, export_view, import_assets, template_csv
from commands import Assign, Create, Delete, Unassign, UpdateFields, UpdateLocation, UpdateStatus, apply
from database import AssetStatus, AssetType, Location, STATUS_CHOICES
from query import DateRange, QueryParams, run_query

FILTER_KEYS = ["f_type", "f_brand", "f_config", "f_location", "f_dates"]

STATUS_COLORS = {
    AssetStatus.ASSIGNED.value: "#f59e0b",
    AssetStatus.AVAILABLE.value: "#22c55e",
    AssetStatus.SCRAP_DAMAGE.value: "#ef4444",
    AssetStatus.SCRAP.value: "#ef4444",
    AssetStatus.DAMAGE.value: "#ef4444",
    AssetStatus.SOLD.value: "#3b82f6",
    AssetStatus.OTHERS.value: "#9ca3af",
}


# --- HELPER: DATE FORMAT ---
def format_date(value):
    if value is None or pd.isna(value):
        return "N/A"
    return value.strftime("%b %d, %Y")


# --- HELPER: FILTER STATE ---
def reset_page():
    st.session_state.page = 1


def clear_filters():
    for key in FILTER_KEYS:
        st.session_state.pop(key, None)
    reset_page()


def current_params():
    """Build query parameters from the widgets' session state."""
    dates = st.session_state.get("f_dates") or ()
    date_range = DateRange(dates[0], dates[1]) if len(dates) == 2 else None
    return QueryParams(
        search=st.session_state.get("search", ""),
        asset_type=st.session_state.get("f_type", config.FILTER_ALL),
        brand=st.session_state.get("f_brand", config.FILTER_ALL),
        configuration=st.session_state.get("f_config", config.FILTER_ALL),
        location=st.session_state.get("f_location", config.FILTER_ALL),
        date_range=date_range,
        page=st.session_state.get("page", 1),
        page_size=config.PAGE_SIZE
    )


def run_command(db, command, success_msg):
    result = apply(db, command)
    if result.applied:
        st.toast(success_msg)
        # Fresh table key drops the stale row selection
        st.session_state.table_version = st.session_state.get("table_version", 0) + 1
        st.rerun()
    else:
        st.error("Nothing changed: the asset no longer exists or the input was rejected.")


# --- COMPONENT: ASSET ACTIONS POPUP ---
@st.dialog("Asset Actions")
def show_asset_dialog(asset, db):
    st.header(asset['Asset Name'])
    st.caption(f"{asset['Asset ID']} | Serial: {asset['Serial Number']} | {asset['Brand']} {asset['Model'] or ''}")

    col1, col2 = st.columns(2)
    with col1:
        st.write(f"**Type:** {asset['Asset Type']}")
        st.write(f"**Configuration:** {asset['Configuration'] or '-'}")
        st.write(f"**Location:** {asset['Asset Location']}")
    with col2:
        st.markdown(f"**Status:** :{'orange' if asset['Status'] == 'Assigned' else 'green'}[{asset['Status']}]")
        st.write(f"**Assigned To:** {asset['Employee Name'] or 'Unassigned'}")
        st.write(f"**Date:** {format_date(asset['Assigned Date'])}")

    t_custody, t_status, t_edit, t_delete = st.tabs(["👤 Custody", "🏷️ Status & Location", "✏️ Edit", "🗑️ Delete"])

    with t_custody:
        if asset['Employee Name']:
            if st.button("📥 Return Asset", key=f"ret_{asset['ID']}", type="primary"):
                run_command(db, Unassign(asset['ID']), "Asset returned")
        else:
            c1, c2 = st.columns(2)
            name = c1.text_input("Employee Name *", key=f"an_{asset['ID']}")
            emp_id = c2.text_input("Employee ID *" if config.REQUIRE_EMPLOYEE_ID else "Employee ID", key=f"ai_{asset['ID']}")
            ready = bool(name.strip()) and (bool(emp_id.strip()) or not config.REQUIRE_EMPLOYEE_ID)
            if st.button("📤 Assign", key=f"as_{asset['ID']}", type="primary", disabled=not ready):
                run_command(db, Assign(asset['ID'], name, emp_id), f"Assigned to {name.strip()}")

    with t_status:
        statuses = [s.value for s in STATUS_CHOICES]
        if asset['Status'] not in statuses:
            statuses.append(asset['Status'])
        new_status = st.selectbox("Status", statuses, index=statuses.index(asset['Status']), key=f"st_{asset['ID']}")
        if st.button("Update Status", key=f"bst_{asset['ID']}"):
            run_command(db, UpdateStatus(asset['ID'], new_status), f"Status set to {new_status}")

        locations = [loc.value for loc in Location]
        new_loc = st.selectbox("Asset Location", locations, index=locations.index(asset['Asset Location']), key=f"lo_{asset['ID']}")
        if st.button("Update Location", key=f"blo_{asset['ID']}"):
            run_command(db, UpdateLocation(asset['ID'], new_loc), f"Moved to {new_loc}")

    with t_edit:
        types = [t.value for t in AssetType]
        with st.form(f"edit_{asset['ID']}"):
            tag = st.text_input("Asset ID", value=asset['Asset ID'])
            name = st.text_input("Asset Name", value=asset['Asset Name'])
            a_type = st.selectbox("Asset Type", types, index=types.index(asset['Asset Type']))
            brand = st.text_input("Brand", value=asset['Brand'])
            model = st.text_input("Model", value=asset['Model'] or "")
            conf = st.text_area("Configuration", value=asset['Configuration'] or "")
            serial = st.text_input("Serial Number", value=asset['Serial Number'])
            if st.form_submit_button("💾 Save Changes"):
                changes = {
                    "Asset ID": tag, "Asset Name": name, "Asset Type": a_type, "Brand": brand,
                    "Model": model, "Configuration": conf, "Serial Number": serial
                }
                run_command(db, UpdateFields(asset['ID'], changes), "Asset updated")

    with t_delete:
        st.warning("Deleting an asset is permanent.")
        confirmed = st.checkbox("Are you sure you want to delete this asset?", key=f"cd_{asset['ID']}")
        if st.button("🗑️ Delete Asset", key=f"del_{asset['ID']}", disabled=not confirmed):
            run_command(db, Delete(asset['ID']), "Asset deleted")


# --- VIEW 1: DASHBOARD ---
def show_filters(db):
    choices = db.get_distinct_values()

    def labelled(prefix):
        return lambda v: f"All {prefix}" if v == config.FILTER_ALL else v

    c_head, c_clear = st.columns([6, 1])
    c_head.subheader("Filters")
    c_clear.button("Clear All", on_click=clear_filters)

    f1, f2, f3, f4, f5 = st.columns(5)
    f1.selectbox("Asset Type", [config.FILTER_ALL] + choices["Asset Type"], key="f_type", format_func=labelled("Types"), on_change=reset_page)
    f2.selectbox("Brand", [config.FILTER_ALL] + choices["Brand"], key="f_brand", format_func=labelled("Brands"), on_change=reset_page)
    f3.selectbox("Configuration", [config.FILTER_ALL] + choices["Configuration"], key="f_config", format_func=labelled("Configurations"), on_change=reset_page)
    f4.selectbox("Asset Location", [config.FILTER_ALL] + choices["Asset Location"], key="f_location", format_func=labelled("Locations"), on_change=reset_page)
    f5.date_input("Allocation Date Range", value=[], key="f_dates", on_change=reset_page)


def show_summary(result, date_range):
    agg = result.aggregates
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total Inventory", agg.total)
    c2.metric("Allocated", agg.assigned)
    c3.metric("Available Stock", agg.available)
    c4.metric("Scrap/Damage", agg.scrap)
    if date_range is not None and date_range.is_complete:
        st.caption(f"Allocated between {format_date(date_range.start)} and {format_date(date_range.end)}: **{agg.allocated_in_range}**")


def show_dashboard(db):
    st.title("📊 " + config.APP_TITLE)
    st.caption("Track and manage your organization's assets efficiently")

    show_filters(db)
    st.markdown("---")

    c_search, c_exp = st.columns([3, 1])
    c_search.text_input("🔍 Search", placeholder="Search assets...", key="search", on_change=reset_page)

    params = current_params()
    result = run_query(db, params)
    if result.page != params.page:
        params = replace(params, page=result.page)
        result = run_query(db, params)
    st.session_state.page = result.page

    show_summary(result, params.date_range)

    c_exp.download_button(
        "⬇ Export CSV", data=export_view(db, params), file_name=config.EXPORT_FILENAME, mime="text/csv"
    )

    t1, t2 = st.tabs([f"📋 Asset Inventory ({result.total_count} items)", "📈 Status Breakdown"])

    with t1:
        if not result.rows:
            st.info("No Assets Found. No assets match your current filters or search criteria.")
        else:
            df = pd.DataFrame(result.rows)
            df["Employee Name"] = df["Employee Name"].fillna("Unassigned")
            df["Assigned Date"] = df["Assigned Date"].map(format_date)

            event = st.dataframe(
                df, on_select="rerun", selection_mode="single-row", use_container_width=True, hide_index=True,
                key=f"table_{st.session_state.get('table_version', 0)}",
                column_config={"ID": None}
            )

            first = (result.page - 1) * config.PAGE_SIZE + 1
            last = min(result.page * config.PAGE_SIZE, result.total_count)
            p1, p2, p3 = st.columns([1, 8, 1])
            if result.page > 1:
                if p1.button("◀ Prev"): st.session_state.page -= 1; st.rerun()
            if result.page < result.total_pages:
                if p3.button("Next ▶"): st.session_state.page += 1; st.rerun()
            p2.caption(f"Showing {first} to {last} of {result.total_count} assets (page {result.page} of {max(result.total_pages, 1)})")

            rows = event.selection.rows
            if rows:
                show_asset_dialog(result.rows[rows[0]], db)

    with t2:
        counts = result.aggregates.status_counts
        if counts:
            df_status = pd.DataFrame({"Status": list(counts.keys()), "Count": list(counts.values())})
            fig = px.pie(df_status, names="Status", values="Count", hole=0.4, color="Status", color_discrete_map=STATUS_COLORS)
            st.plotly_chart(fig, use_container_width=True)
        else:
            st.info("No data available.")


# --- VIEW 2: ADD ASSET ---
def show_add_asset(db):
    st.title("➕ Add New Asset")
    st.caption("Fields marked with * are required.")

    with st.form("add_asset", clear_on_submit=True):
        c1, c2 = st.columns(2)
        with c1:
            name = st.text_input("Asset Name *", placeholder="e.g., MacBook Pro 16 inch")
            a_type = st.selectbox("Asset Type *", [t.value for t in AssetType], index=None, placeholder="Select asset type")
            brand = st.text_input("Brand *", placeholder="e.g., Apple, Dell, HP")
        with c2:
            model = st.text_input("Model", placeholder="e.g., MacBook Pro M2")
            serial = st.text_input("Serial Number *", placeholder="e.g., MBP16-2023-001")
        conf = st.text_area("Configuration", placeholder="e.g., 16GB RAM, 512GB SSD")
        submitted = st.form_submit_button("Add Asset", type="primary", use_container_width=True)

    if submitted:
        errors = []
        if not name.strip(): errors.append("Asset Name")
        if not a_type: errors.append("Asset Type")
        if not brand.strip(): errors.append("Brand")
        if not serial.strip(): errors.append("Serial Number")

        if errors: st.error(f"Missing Required Fields: {', '.join(errors)}")
        else:
            draft = {
                "Asset Name": name, "Asset Type": a_type, "Brand": brand,
                "Model": model, "Configuration": conf, "Serial Number": serial
            }
            result = apply(db, Create(draft))
            if result.applied: st.success(f"Asset {config.ASSET_TAG_PREFIX}{result.asset_id:03d} successfully added!")
            else: st.error("Operation Failed: the asset could not be saved.")


# --- VIEW 3: BULK OPERATIONS ---
def show_bulk_operations(db):
    st.title("📂 Bulk Asset Operations")
    tab1, tab2 = st.tabs(["⬆ Upload", "⬇ Download"])

    with tab1:
        st.info(f"Upload a CSV file with columns: {', '.join(config.TEMPLATE_COLUMNS)}")
        up = st.file_uploader("Drop a file here or browse", type=[e.lstrip('.') for e in config.IMPORT_EXTENSIONS])
        if up and st.button("Import", type="primary"):
            try:
                report = import_assets(db, up, up.name)
            except ImportFileError as e:
                st.error(f"Error: {e}")
            else:
                st.success(f"Imported {len(report.created_ids)} Assets")
                if report.skipped:
                    st.warning("\n".join(f"Row {line}: {reason}" for line, reason in report.skipped))

    with tab2:
        c1, c2 = st.columns(2)
        with c1:
            st.subheader("Template")
            st.caption("Sample file with the expected columns.")
            st.download_button("⬇ Download Template", data=template_csv(), file_name=config.TEMPLATE_FILENAME, mime="text/csv")
        with c2:
            st.subheader("Current View")
            st.caption(f"Assets matching the dashboard filters, exported {datetime.now().strftime('%Y-%m-%d %H:%M')}.")
            st.download_button("⬇ Download Data", data=export_view(db, current_params()), file_name=config.EXPORT_FILENAME, mime="text/csv")
