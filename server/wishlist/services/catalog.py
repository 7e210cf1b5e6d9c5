"""Feature catalog: CRUD, field validation and the ranked listing view."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy.orm import Session

from wishlist.core.ticket import (
    MAX_TICKET_URL_LENGTH,
    InvalidTicketReferenceError,
    parse_ticket_ref,
)
from wishlist.core.time import utcnow
from wishlist.core.validation import (
    FieldValidationError,
    validate_category,
    validate_description,
    validate_title,
)
from wishlist.models.feature_request import FeatureRequest, FeatureStatus

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {"title", "description", "category", "status", "ticket_url"}


class FeatureNotFoundError(Exception):
    """Raised when a feature request does not exist."""


class FeatureValidationError(ValueError):
    """Raised when a create or update carries an invalid field value."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


def _validated(field: str, validator, value):
    try:
        return validator(value)
    except FieldValidationError as e:
        raise FeatureValidationError(e.field, e.message) from e


def get_feature(db: Session, feature_id: int) -> FeatureRequest | None:
    return db.query(FeatureRequest).filter(FeatureRequest.id == feature_id).first()


def get_feature_or_raise(db: Session, feature_id: int) -> FeatureRequest:
    feature = get_feature(db, feature_id)
    if feature is None:
        raise FeatureNotFoundError
    return feature


def count_features(db: Session) -> int:
    return db.query(FeatureRequest).count()


def create_feature(
    db: Session,
    title: str,
    description: str | None = None,
    category: str | None = None,
) -> FeatureRequest:
    """Create an OPEN feature request. Nothing is written if a field is invalid."""
    feature = FeatureRequest(
        title=_validated("title", validate_title, title),
        description=_validated("description", validate_description, description),
        category=_validated("category", validate_category, category),
        status=FeatureStatus.OPEN.value,
        created_at=utcnow(),
    )
    db.add(feature)
    db.commit()
    db.refresh(feature)
    logger.info("Feature %s created: %r", feature.id, feature.title)
    return feature


def _coerce_status(value: Any) -> FeatureStatus:
    if value is None:
        raise FeatureValidationError("status", "Status is required")
    try:
        return FeatureStatus(value)
    except ValueError as e:
        raise FeatureValidationError("status", f"Unknown status '{value}'") from e


def update_feature(
    db: Session,
    feature_id: int,
    fields: Mapping[str, Any],
    ticket_base_url: str | None = None,
) -> FeatureRequest:
    """
    Apply a partial update to a feature.

    Only keys present in ``fields`` change. Every value is validated before the
    feature is touched, so a rejected update leaves the row unchanged. Ticket
    keys are expanded against ``ticket_base_url`` here, at save time.

    Raises:
        FeatureNotFoundError: If the feature does not exist.
        FeatureValidationError: If any field is invalid.
    """
    unknown = set(fields) - UPDATABLE_FIELDS
    if unknown:
        raise FeatureValidationError(sorted(unknown)[0], "Field cannot be updated")

    feature = get_feature_or_raise(db, feature_id)

    changes: dict[str, Any] = {}
    if "title" in fields:
        changes["title"] = _validated("title", validate_title, fields["title"])
    if "description" in fields:
        changes["description"] = _validated(
            "description", validate_description, fields["description"]
        )
    if "category" in fields:
        changes["category"] = _validated("category", validate_category, fields["category"])
    if "status" in fields:
        changes["status"] = _coerce_status(fields["status"]).value
    if "ticket_url" in fields:
        try:
            ticket = parse_ticket_ref(fields["ticket_url"])
        except InvalidTicketReferenceError as e:
            raise FeatureValidationError("ticket_url", str(e)) from e
        stored = ticket.to_stored(ticket_base_url)
        # Expansion against the base URL can push a valid key past the column width
        if stored is not None and len(stored) > MAX_TICKET_URL_LENGTH:
            raise FeatureValidationError(
                "ticket_url",
                f"Ticket link must be at most {MAX_TICKET_URL_LENGTH} characters",
            )
        changes["ticket_url"] = stored

    for name, value in changes.items():
        setattr(feature, name, value)
    db.commit()
    db.refresh(feature)
    logger.info("Feature %s updated (%s)", feature.id, ", ".join(sorted(changes)) or "no changes")
    return feature


def update_status(db: Session, feature_id: int, status: FeatureStatus) -> FeatureRequest:
    """Move a feature to any status; all transitions are allowed."""
    return update_feature(db, feature_id, {"status": status})


def list_features(db: Session, status: FeatureStatus | None = None) -> list[FeatureRequest]:
    """All features in creation order, optionally restricted to one status."""
    query = db.query(FeatureRequest)
    if status is not None:
        query = query.filter(FeatureRequest.status == FeatureStatus(status).value)
    return query.order_by(FeatureRequest.id.asc()).all()


def rank_by_votes_descending(
    features: Sequence[FeatureRequest], vote_counts: Mapping[int, int]
) -> list[FeatureRequest]:
    """Order features by vote count, highest first.

    The sort is stable, so features with equal counts keep their incoming
    (creation) order. Features missing from ``vote_counts`` count as 0.
    """
    return sorted(features, key=lambda f: vote_counts.get(f.id, 0), reverse=True)
