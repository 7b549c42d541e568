"""
Pydantic models for records exchanged with the content API.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PersistedSection(BaseModel):
    """A stored content section; several records may share one section_key."""
    model_config = ConfigDict(extra='ignore')

    id: str
    section_key: str
    content: Dict[str, Any] = Field(default_factory=dict)
    order: int = 0
    is_active: bool = True
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator('id', mode='before')
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return str(value)

    @field_validator('content', mode='before')
    @classmethod
    def _content_mapping(cls, value: Any) -> Dict[str, Any]:
        return value if isinstance(value, dict) else {}

    @property
    def display_title(self) -> str:
        """Title shown in section lists: title, else badge, else the position."""
        return self.content.get('title') or self.content.get('badge') or f"Section #{self.order + 1}"


class SectionCreate(BaseModel):
    section_key: str
    content: Dict[str, Any]
    order: int = 0
    is_active: bool = True


class SectionUpdate(BaseModel):
    """Partial update; unset fields are left out of the request."""
    section_key: Optional[str] = None
    content: Optional[Dict[str, Any]] = None
    order: Optional[int] = None
    is_active: Optional[bool] = None

    def payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class SocialMedia(BaseModel):
    model_config = ConfigDict(extra='ignore')

    instagram: Optional[str] = None
    facebook: Optional[str] = None
    youtube: Optional[str] = None
    whatsapp: Optional[str] = None

    @field_validator('instagram', 'facebook', 'youtube', 'whatsapp', mode='before')
    @classmethod
    def _blank_to_none(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        value = str(value).strip()
        return value or None


class InstituteInfo(BaseModel):
    model_config = ConfigDict(extra='ignore')

    id: Optional[str] = None
    location: str = ""
    phone_numbers: List[str] = Field(default_factory=list)
    email: str = ""
    social_media: SocialMedia = Field(default_factory=SocialMedia)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator('id', mode='before')
    @classmethod
    def _coerce_id(cls, value: Any) -> Optional[str]:
        return str(value) if value is not None else None

    @field_validator('social_media', mode='before')
    @classmethod
    def _social_mapping(cls, value: Any) -> Any:
        return value if value is not None else {}


class InstituteInfoUpdate(BaseModel):
    """
    Institute details as submitted from the admin form.

    Blank phone numbers are dropped; at least one must remain.
    Blank social links are omitted from the payload.
    """
    location: str
    phone_numbers: List[str]
    email: str
    social_media: SocialMedia = Field(default_factory=SocialMedia)

    @field_validator('location', 'email')
    @classmethod
    def _required_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator('phone_numbers')
    @classmethod
    def _at_least_one_phone(cls, value: List[str]) -> List[str]:
        phones = [phone.strip() for phone in value if phone and phone.strip()]
        if not phones:
            raise ValueError("At least one phone number is required")
        return phones

    def payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
