"""
Submission handler for the studio CMS.
Checks required fields and sends section documents and institute details
to the content API.
"""

from typing import Dict, Any, List, Optional
import logging

from .cms_client import CMSClient
from .editor_registry import EditorRegistry
from .field_schema import FieldSchema, FieldType, SectionSchema
from .models import (
    InstituteInfo,
    InstituteInfoUpdate,
    PersistedSection,
    SectionCreate,
    SectionUpdate,
    SocialMedia,
)

logger = logging.getLogger(__name__)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict)):
        return not value
    return False


class SubmissionHandler:
    """Validation and persistence of edited content."""

    @staticmethod
    def validate_required(section: SectionSchema, document: Dict[str, Any],
                          registry: Optional[EditorRegistry] = None) -> List[str]:
        """
        Check required fields of a section document.

        Nested fields are checked inside every object and every array
        element. A field handled by a custom editor is validated by that
        editor instead.

        Returns:
            Messages such as "Primary CTA → Button Text is required"
        """
        errors: List[str] = []
        container = document if isinstance(document, dict) else {}
        for field in section.fields:
            SubmissionHandler._check_field(section.key, field, container.get(field.key), [], errors, registry)
        return errors

    @staticmethod
    def _check_field(section_key: str, field: FieldSchema, value: Any, trail: List[str],
                     errors: List[str], registry: Optional[EditorRegistry] = None) -> None:
        editor = registry.get(section_key, field.key) if registry else None
        if editor is not None:
            errors.extend(editor.validate(field, value))
            return

        location = trail + [field.label]

        if field.required and _is_blank(value):
            errors.append(f"{' → '.join(location)} is required")

        if field.type is FieldType.OBJECT:
            container = value if isinstance(value, dict) else {}
            for child in field.children:
                SubmissionHandler._check_field(section_key, child, container.get(child.key), location,
                                               errors, registry)

        elif field.type is FieldType.ARRAY and isinstance(value, list):
            for index, item in enumerate(value):
                container = item if isinstance(item, dict) else {}
                item_location = location + [f"Item {index + 1}"]
                for child in field.children:
                    SubmissionHandler._check_field(section_key, child, container.get(child.key), item_location,
                                                   errors, registry)

    @staticmethod
    def save_section(client: CMSClient, section_key: str, document: Dict[str, Any],
                     record: Optional[Dict[str, Any]] = None) -> PersistedSection:
        """
        Create a new record or overwrite an existing one with ``document``.

        A new record is created at order 0 and active. An update keeps the
        record's order and active flag.

        Raises:
            GatewayError: If the content API rejects the request
        """
        if record is None:
            logger.info(f"Creating section {section_key}")
            return client.create_section(SectionCreate(
                section_key=section_key,
                content=document,
                order=0,
                is_active=True,
            ))

        logger.info(f"Updating section {section_key} (id={record['id']})")
        return client.update_section(record['id'], SectionUpdate(
            section_key=section_key,
            content=document,
            order=record.get('order') or 0,
            is_active=record.get('is_active') is not False,
        ))

    @staticmethod
    def toggle_active(client: CMSClient, record: Dict[str, Any]) -> PersistedSection:
        """Flip is_active, resending the rest of the record unchanged."""
        is_active = not record.get('is_active', True)
        logger.info(f"Setting section {record['id']} active={is_active}")
        return client.update_section(record['id'], SectionUpdate(
            section_key=record.get('section_key'),
            content=record.get('content') or {},
            order=record.get('order') or 0,
            is_active=is_active,
        ))

    @staticmethod
    def institute_form_from(info: Optional[InstituteInfo]) -> Dict[str, Any]:
        """Editable form values for the institute panel; blank when nothing is saved."""
        info = info or InstituteInfo()
        social = info.social_media
        return {
            'location': info.location,
            'phone_numbers': list(info.phone_numbers) or [""],
            'email': info.email,
            'social_media': {
                'instagram': social.instagram or "",
                'facebook': social.facebook or "",
                'youtube': social.youtube or "",
                'whatsapp': social.whatsapp or "",
            },
        }

    @staticmethod
    def save_institute_info(client: CMSClient, form: Dict[str, Any]) -> InstituteInfo:
        """
        Validate and store institute details.

        Raises:
            pydantic.ValidationError: If location, email or phone numbers are missing
            GatewayError: If the content API rejects the request
        """
        update = InstituteInfoUpdate(
            location=form.get('location', ''),
            phone_numbers=form.get('phone_numbers', []),
            email=form.get('email', ''),
            social_media=SocialMedia(**(form.get('social_media') or {})),
        )
        return client.update_institute_info(update)
