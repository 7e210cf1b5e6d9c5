from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from wishlist.core.ticket import parse_ticket_ref
from wishlist.core.validation import validate_category, validate_description, validate_title
from wishlist.models.feature_request import FeatureStatus


class FeatureCreate(BaseModel):
    title: str
    description: str | None = None
    category: str | None = None

    @field_validator("title")
    @classmethod
    def check_title(cls, v: str) -> str:
        return validate_title(v)

    @field_validator("description")
    @classmethod
    def check_description(cls, v: str | None) -> str | None:
        return validate_description(v)

    @field_validator("category")
    @classmethod
    def check_category(cls, v: str | None) -> str | None:
        return validate_category(v)


class FeatureUpdate(BaseModel):
    """Admin edit of feature metadata. Only fields present in the body are changed."""

    title: str | None = None
    description: str | None = None
    category: str | None = None
    status: FeatureStatus | None = None
    ticket_url: str | None = Field(
        default=None,
        description="http(s) URL or ticket key like PROJ-123; blank clears it",
    )

    @field_validator("title")
    @classmethod
    def check_title(cls, v: str | None) -> str:
        return validate_title(v)

    @field_validator("description")
    @classmethod
    def check_description(cls, v: str | None) -> str | None:
        return validate_description(v)

    @field_validator("category")
    @classmethod
    def check_category(cls, v: str | None) -> str | None:
        return validate_category(v)

    @field_validator("status")
    @classmethod
    def check_status(cls, v: FeatureStatus | None) -> FeatureStatus:
        if v is None:
            raise ValueError("Status is required")
        return v

    @field_validator("ticket_url")
    @classmethod
    def check_ticket_url(cls, v: str | None) -> str | None:
        parse_ticket_ref(v)
        return v


class FeatureStatusUpdate(BaseModel):
    status: FeatureStatus


class FeatureOut(BaseModel):
    id: int
    title: str
    description: str | None
    category: str | None
    status: FeatureStatus
    created_at: datetime
    ticket_url: str | None
    vote_count: int = 0
    has_voted: bool = False

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at")
    def serialize_datetime(self, dt: datetime) -> str:
        return dt.isoformat() + "Z"
