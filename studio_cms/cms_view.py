"""
Content management screen.

Lists the sections of the selected page, opens the section editor for
create and edit, and performs the activate, deactivate and delete actions.
Read failures fall back to empty data; write failures are shown to the
user and leave the form open.
"""

import streamlit as st
import logging
from typing import Any, Dict, List

from .cms_client import CMSClient, sections_for_page, select_active_section
from .config_loader import get_config_value
from .diff_utils import calculate_changes, format_change
from .document_store import empty_document
from .editor_registry import EditorRegistry
from .error_handler import ErrorHandler, ErrorType
from .exceptions import GatewayError
from .field_renderer import FieldRenderer
from .field_schema import PageCatalog, PageSchema, SectionSchema
from .institute_view import InstituteView
from .models import PersistedSection
from .session_manager import SessionManager
from .submission_handler import SubmissionHandler
from .ui_feedback import Notify, show_loading

logger = logging.getLogger(__name__)

INSTITUTE_PAGE_ID = "contact"


def fetch_data(client: CMSClient) -> None:
    """
    Load all sections and the institute details into the session.

    Failures leave empty data behind and are logged as warnings so the
    editor still opens.
    """
    try:
        grouped = client.list_sections(include_inactive=True, grouped=True)
        sections = {
            key: [record.model_dump() for record in records]
            for key, records in grouped.items()
        }
    except GatewayError as e:
        logger.warning(f"Could not load content sections, showing none: {e}")
        sections = {}

    try:
        info = client.get_institute_info()
        institute = info.model_dump() if info else None
    except GatewayError as e:
        logger.warning(f"Could not load institute info, showing none: {e}")
        institute = None

    SessionManager.set_sections(sections)
    SessionManager.set_institute_info(institute)


def page_section_counts(catalog: PageCatalog, sections: Dict[str, List[Dict[str, Any]]]) -> Dict[str, int]:
    """Number of stored records per page."""
    return {
        page.id: sum(len(sections.get(key, [])) for key in page.section_keys)
        for page in catalog
    }


class CMSView:
    """Content management screen."""

    @staticmethod
    def render(catalog: PageCatalog, client: CMSClient, registry: EditorRegistry) -> None:
        if not SessionManager.sections_loaded():
            with show_loading("Loading content..."):
                fetch_data(client)

        CMSView._render_sidebar(catalog)

        page = catalog.get_page(SessionManager.get_selected_page()) or catalog.pages[0]

        if SessionManager.is_form_open():
            section_key = SessionManager.get_editing_section_key()
            section = catalog.get_section(section_key)
            if section is None:
                logger.error(f"Open form refers to unknown section {section_key}")
                SessionManager.close_form()
                st.rerun()
                return
            page = catalog.page_for_section(section_key)
            CMSView._render_page_header(page)
            CMSView._render_form(catalog, section, client, registry)
            return

        CMSView._render_page_header(page)

        if page.id == INSTITUTE_PAGE_ID:
            InstituteView.render(client)

        CMSView._render_section_list(page, client)

    @staticmethod
    def _render_page_header(page: PageSchema) -> None:
        st.header(f"{page.icon} {page.name}")
        st.caption(f"Route: {page.route}")

    @staticmethod
    def _render_sidebar(catalog: PageCatalog) -> None:
        counts = page_section_counts(catalog, SessionManager.get_sections())
        selected = SessionManager.get_selected_page()

        with st.sidebar:
            st.subheader(get_config_value('ui', 'sidebar_title', 'Pages'))
            for page in catalog:
                st.button(
                    f"{page.icon} {page.name} ({counts.get(page.id, 0)})",
                    key=f"page_{page.id}",
                    type="primary" if page.id == selected else "secondary",
                    use_container_width=True,
                    on_click=SessionManager.set_selected_page,
                    args=(page.id,),
                )
            st.divider()
            st.button("🔄 Refresh", key="refresh_sections", on_click=SessionManager.invalidate_sections)

    # Section list

    @staticmethod
    def _render_section_list(page: PageSchema, client: CMSClient) -> None:
        records_by_key = sections_for_page(
            {
                key: [PersistedSection.model_validate(r) for r in records]
                for key, records in SessionManager.get_sections().items()
            },
            page.section_keys,
        )

        for section in page.sections:
            with st.container(border=True):
                title_col, add_col = st.columns([5, 1])
                with title_col:
                    st.subheader(section.name)
                    st.caption(section.description)
                add_col.button(
                    "➕ Add",
                    key=f"add_{section.key}",
                    on_click=SessionManager.open_create_form,
                    args=(section.key, empty_document(section)),
                )

                records = records_by_key.get(section.key, [])
                if not records:
                    st.caption("No content yet.")
                # the website shows one record per section
                shown = select_active_section(records)
                for record in records:
                    CMSView._render_record(record, client, is_shown=record is shown)

    @staticmethod
    def _render_record(record: PersistedSection, client: CMSClient, is_shown: bool = False) -> None:
        status = "🟢" if record.is_active else "⚪"
        badge = "" if record.is_active else " `INACTIVE`"
        if is_shown:
            badge += " `ON SITE`"
        info_col, edit_col, toggle_col, delete_col = st.columns([6, 1, 1, 1])

        info_col.markdown(f"{status} **{record.display_title}**{badge}")
        info_col.caption(f"Order {record.order}")

        edit_col.button(
            "✏️",
            key=f"edit_{record.id}",
            help="Edit",
            on_click=SessionManager.open_edit_form,
            args=(record.model_dump(),),
        )

        if toggle_col.button("⏻", key=f"toggle_{record.id}",
                             help="Deactivate" if record.is_active else "Activate"):
            try:
                SubmissionHandler.toggle_active(client, record.model_dump())
            except GatewayError as e:
                ErrorHandler.handle_error(e, f"changing status of section {record.id}", ErrorType.GATEWAY,
                                          user_message=f"Failed to update section status: {e.message}")
            else:
                SessionManager.invalidate_sections()
                st.rerun()

        if delete_col.button("🗑️", key=f"delete_{record.id}", help="Delete"):
            SessionManager.set_pending_delete(record.id)

        if SessionManager.get_pending_delete() == record.id:
            st.warning(f"Delete **{record.display_title}**? This cannot be undone.")
            confirm_col, cancel_col = st.columns(2)
            if confirm_col.button("Delete", key=f"confirm_delete_{record.id}", type="primary"):
                CMSView._delete(record, client)
            cancel_col.button("Cancel", key=f"cancel_delete_{record.id}",
                              on_click=SessionManager.set_pending_delete, args=(None,))

    @staticmethod
    def _delete(record: PersistedSection, client: CMSClient) -> None:
        try:
            client.delete_section(record.id)
        except GatewayError as e:
            ErrorHandler.handle_error(e, f"deleting section {record.id}", ErrorType.GATEWAY,
                                      user_message=f"Failed to delete section: {e.message}")
            return

        SessionManager.set_pending_delete(None)
        SessionManager.invalidate_sections()
        Notify.success("Section deleted successfully")
        st.rerun()

    # Section form

    @staticmethod
    def _render_form(catalog: PageCatalog, section: SectionSchema, client: CMSClient,
                     registry: EditorRegistry) -> None:
        record = SessionManager.get_editing_record()
        st.subheader(f"{'Edit' if record else 'Create'} {section.name}")
        st.caption(section.description)

        FieldRenderer(section, registry, catalog.link_targets).render_fields()

        if record is not None and SessionManager.has_unsaved_changes():
            changes = calculate_changes(SessionManager.get_original_document(), SessionManager.get_document())
            with st.expander(f"📝 Pending changes ({len(changes)})"):
                for change in changes:
                    st.markdown(format_change(change))

        for message in SessionManager.get_validation_errors():
            st.error(message)

        cancel_col, save_col = st.columns(2)
        cancel_col.button("Cancel", key="form_cancel", on_click=SessionManager.close_form,
                          use_container_width=True)
        if save_col.button("Update" if record else "Create", key="form_submit", type="primary",
                           use_container_width=True):
            CMSView._submit(section, client, registry)

    @staticmethod
    def _submit(section: SectionSchema, client: CMSClient, registry: EditorRegistry) -> None:
        document = SessionManager.get_document()
        record = SessionManager.get_editing_record()

        errors = SubmissionHandler.validate_required(section, document, registry)
        if errors:
            logger.info(f"Submission of {section.key} blocked by {len(errors)} missing fields")
            SessionManager.set_validation_errors(errors)
            st.rerun()
            return

        try:
            SubmissionHandler.save_section(client, section.key, document, record)
        except GatewayError as e:
            ErrorHandler.handle_error(e, f"saving section {section.key}", ErrorType.GATEWAY,
                                      user_message=f"Failed to save section: {e.message}")
            return

        Notify.success("Section updated successfully" if record else "Section created successfully")
        SessionManager.close_form()
        SessionManager.invalidate_sections()
        st.rerun()
