"""
Main Streamlit application for the studio CMS.
Schema-driven editor for the content sections of the studio website.
"""

import streamlit as st
import logging

from studio_cms.config_loader import get_config, get_config_summary, get_config_value, validate_config


def get_logging_level(level_str):
    """Map string logging level to logging constant."""
    level_map = {
        'DEBUG': logging.DEBUG,
        'INFO': logging.INFO,
        'WARNING': logging.WARNING,
        'ERROR': logging.ERROR,
        'CRITICAL': logging.CRITICAL
    }
    return level_map.get(str(level_str).upper(), logging.INFO)


# Configure logging dynamically from config
log_level_str = get_config_value('logging', 'level', 'INFO')
logging.basicConfig(
    level=get_logging_level(log_level_str),
    format=get_config_value('logging', 'format', '%(asctime)s %(levelname)s %(name)s: %(message)s')
)
logger = logging.getLogger(__name__)
logger.info(f"Logging configured to level: {log_level_str}")

page_title = get_config_value('ui', 'page_title', 'Content Management')

st.set_page_config(
    page_title=page_title,
    page_icon="📝",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_registry():
    """Custom editors, shared by all sessions."""
    from studio_cms.editor_registry import default_registry
    return default_registry()


def load_catalog_or_stop():
    """Load the page catalog; the app cannot run without it."""
    from studio_cms.error_handler import ErrorHandler, ErrorType
    from studio_cms.exceptions import CatalogLoadError, SchemaDefinitionError
    from studio_cms.schema_loader import get_configured_catalog

    try:
        return get_configured_catalog()
    except (CatalogLoadError, SchemaDefinitionError) as e:
        ErrorHandler.handle_error(e, "loading page catalog", ErrorType.SCHEMA)
        st.stop()


def main():
    """Main application entry point."""
    from studio_cms.cms_client import create_client
    from studio_cms.cms_view import CMSView
    from studio_cms.error_handler import ErrorHandler, ErrorType
    from studio_cms.exceptions import GatewayError
    from studio_cms.session_manager import SessionManager
    from studio_cms.ui_feedback import Notify

    config = get_config()
    if not validate_config(config):
        Notify.once("Some configuration settings are invalid; check config.yaml", "warning", key="invalid_config")

    SessionManager.initialize()
    catalog = load_catalog_or_stop()

    try:
        client = create_client(config)
    except GatewayError as e:
        ErrorHandler.handle_error(e, "creating content API client", ErrorType.GATEWAY)
        st.stop()

    st.title(get_config_value('app', 'name', 'Studio CMS'))

    if get_config_value('app', 'debug', False):
        with st.sidebar.expander("Debug"):
            st.json({'config': get_config_summary(config), 'session': SessionManager.get_session_info()})

    CMSView.render(catalog, client, get_registry())


if __name__ == "__main__":
    main()
