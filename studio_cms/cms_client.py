"""
HTTP client for the studio content API.

Wraps the content-section and institute-info endpoints. Responses come in a
``{"data": ...}`` envelope; a bare body is accepted as well. Every failure
is raised as GatewayError. Callers decide whether a failure is recovered
(read paths) or shown to the user (write paths).
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

import requests

from .exceptions import GatewayError
from .models import InstituteInfo, InstituteInfoUpdate, PersistedSection, SectionCreate, SectionUpdate

logger = logging.getLogger(__name__)

GroupedSections = Dict[str, List[PersistedSection]]


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        message = body.get('message') or body.get('error')
        if isinstance(message, list):
            return ", ".join(str(part) for part in message)
        if message:
            return str(message)
    return f"Request failed with status {response.status_code}"


class CMSClient:
    """
    Client for the content API.

    Args:
        base_url: API root, e.g. http://localhost:3000/api/v1
        timeout: Seconds per request
        token: Optional bearer token
    """

    def __init__(self, base_url: str, timeout: float = 15, token: Optional[str] = None):
        if not base_url.startswith(('http://', 'https://')):
            raise GatewayError(f"Invalid API base URL: {base_url}")
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.token = token
        logger.debug(f"CMSClient initialized: base_url={self.base_url}, timeout={self.timeout}")

    def _headers(self) -> Dict[str, str]:
        headers = {'Accept': 'application/json'}
        if self.token:
            headers['Authorization'] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, endpoint: str, json: Any = None,
                 params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{endpoint}"
        logger.debug(f"{method} {url}")

        try:
            response = requests.request(
                method, url, json=json, params=params, headers=self._headers(), timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"Failed to reach content API: {method} {url}: {e}")
            raise GatewayError(f"Could not reach the content API: {e}", None, method, url) from e

        if not response.ok:
            message = _error_message(response)
            logger.error(f"Content API error: {method} {url} status={response.status_code} message={message}")
            raise GatewayError(message, response.status_code, method, url)

        if response.status_code == 204 or not response.content:
            return None

        try:
            body = response.json()
        except ValueError as e:
            raise GatewayError("Content API returned invalid JSON", response.status_code, method, url) from e

        if isinstance(body, dict) and 'data' in body:
            return body['data']
        return body

    # Content sections

    def list_sections(self, include_inactive: bool = False,
                      grouped: bool = True) -> Union[GroupedSections, List[PersistedSection]]:
        """
        List content sections.

        Returns:
            Mapping of section_key to records when grouped, else a flat list
        """
        params = {'grouped': 'true' if grouped else 'false'}
        if include_inactive:
            params['include_inactive'] = 'true'

        data = self._request('GET', '/content-sections', params=params)

        if grouped:
            if not isinstance(data, dict):
                return {}
            return {
                key: [PersistedSection.model_validate(item) for item in items or []]
                for key, items in data.items()
            }
        return [PersistedSection.model_validate(item) for item in data or []]

    def list_sections_by_key(self, section_key: str) -> List[PersistedSection]:
        data = self._request('GET', f"/content-sections/{section_key}")
        if isinstance(data, dict):
            data = [data]
        return [PersistedSection.model_validate(item) for item in data or []]

    def create_section(self, payload: SectionCreate) -> PersistedSection:
        data = self._request('POST', '/content-sections', json=payload.model_dump())
        logger.info(f"Created content section {payload.section_key}")
        return PersistedSection.model_validate(data)

    def update_section(self, section_id: str, patch: SectionUpdate) -> PersistedSection:
        data = self._request('PATCH', f"/content-sections/{section_id}", json=patch.payload())
        logger.info(f"Updated content section {section_id}")
        return PersistedSection.model_validate(data)

    def delete_section(self, section_id: str) -> None:
        self._request('DELETE', f"/content-sections/{section_id}")
        logger.info(f"Deleted content section {section_id}")

    # Institute info

    def get_institute_info(self) -> Optional[InstituteInfo]:
        """Institute details, or None when none have been saved yet."""
        try:
            data = self._request('GET', '/institute-info')
        except GatewayError as e:
            if e.is_not_found:
                return None
            raise
        return InstituteInfo.model_validate(data) if data else None

    def update_institute_info(self, update: InstituteInfoUpdate) -> InstituteInfo:
        data = self._request('PUT', '/institute-info', json=update.payload())
        logger.info("Updated institute info")
        return InstituteInfo.model_validate(data)


def sections_for_page(grouped: GroupedSections, section_keys: Iterable[str]) -> Dict[str, List[PersistedSection]]:
    """Records of each section key, sorted by order."""
    return {
        key: sorted(grouped.get(key, []), key=lambda section: section.order)
        for key in section_keys
    }


def select_active_section(sections: List[PersistedSection]) -> Optional[PersistedSection]:
    """First active record, else the first record, else None."""
    for section in sections:
        if section.is_active:
            return section
    return sections[0] if sections else None


def create_client(config: Dict[str, Any]) -> CMSClient:
    api = config.get('api', {})
    return CMSClient(
        base_url=api.get('base_url') or 'http://localhost:3000/api/v1',
        timeout=api.get('timeout') or 15,
        token=api.get('token'),
    )
