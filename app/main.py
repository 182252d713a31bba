"""
Streamlit Frontend for Digital Drawer

Settings screen with backup and restore.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Explicit confirmation before anything is overwritten
3. Clear error messages in simple language
4. No hidden actions

The UI is a thin layer: every decision is made by the orchestrator.
"""

import asyncio

import streamlit as st

from digital_drawer.audit import create_correlation_id
from digital_drawer.config import get_settings, validate_all_settings
from digital_drawer.orchestrator import (
    BackupExportFlow,
    BackupRestoreFlow,
    create_app_components,
)
from digital_drawer.services.premium import PremiumService


st.set_page_config(
    page_title="Digital Drawer",
    page_icon="🗄️",
    layout="centered",
)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    export_flow, restore_flow, premium = create_app_components()
    run_async(premium.init())
    return export_flow, restore_flow, premium


def main():
    """Main application entry point."""
    export_flow, restore_flow, premium = get_components()

    st.title("⚙️ Settings")

    render_backup_section(export_flow)
    st.markdown("---")
    render_restore_section(restore_flow)
    st.markdown("---")
    render_status_section(premium)


def render_backup_section(export_flow: BackupExportFlow):
    """Export all data as a JSON file."""
    st.markdown("### 💾 Back up data")
    st.markdown("Export all homes, records and finances as a JSON file.")

    if st.button("Create backup", type="primary"):
        with st.spinner("Collecting your data..."):
            st.session_state.backup_file = run_async(
                export_flow.build_backup(correlation_id=create_correlation_id())
            )

    if st.session_state.get("backup_file"):
        filename, text = st.session_state.backup_file
        st.download_button(
            "⬇️ Save or share backup",
            data=text.encode("utf-8"),
            file_name=filename,
            mime="application/json",
        )


def render_restore_section(restore_flow: BackupRestoreFlow):
    """Restore data from a JSON backup, after explicit confirmation."""
    st.markdown("### ♻️ Restore backup")
    st.warning("Restoring overwrites your current data.")

    max_mb = get_settings().backup.max_file_size_mb
    uploaded_file = st.file_uploader(
        f"Choose a backup file (max {max_mb} MB)",
        type=["json"],
    )
    if uploaded_file is None:
        return

    data = uploaded_file.getvalue()
    result, summary = run_async(restore_flow.preview(data))

    if not result.accepted:
        st.error(f"Invalid backup file: {result.reason}")
        return

    st.markdown("**This backup contains:**")
    for line in summary.describe():
        st.markdown(f"- {line}")

    confirmed = st.checkbox("I understand my current data will be overwritten")
    if st.button("Restore", type="primary", disabled=not confirmed):
        with st.spinner("Restoring..."):
            report = run_async(
                restore_flow.restore_from_upload(
                    data,
                    filename=uploaded_file.name,
                    correlation_id=create_correlation_id(),
                )
            )
        if report.success:
            st.success(report.message)
        else:
            st.error(report.message)


def render_status_section(premium: PremiumService):
    """Show configuration and premium status."""
    st.markdown("### Status")

    status = validate_all_settings()
    for key in ("app", "backup", "storage", "premium"):
        if status.get(key, False):
            st.success(f"✅ {key} settings loaded")
        else:
            st.error(f"❌ {key} settings - {status.get(f'{key}_error', 'invalid')}")

    if premium.is_premium:
        st.info("⭐ Premium active")
    else:
        st.info(f"Premium: {premium.status.value}")


if __name__ == "__main__":
    main()
