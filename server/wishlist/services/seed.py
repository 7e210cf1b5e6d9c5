"""Demo data loader for empty catalogs."""

import logging
from datetime import timedelta

from sqlalchemy.orm import Session

from wishlist.core.time import utcnow
from wishlist.models.feature_request import FeatureRequest, FeatureStatus
from wishlist.services.catalog import count_features

logger = logging.getLogger(__name__)

# (title, description, category, status, days old, ticket url)
DEMO_FEATURES = [
    (
        "Dark Mode",
        "A dark mode for the whole application that is easier on the eyes.",
        "UI/UX",
        FeatureStatus.OPEN,
        2,
        None,
    ),
    (
        "Export as PDF",
        "Export feature lists as a PDF document.",
        "Function",
        FeatureStatus.IN_PROGRESS,
        5,
        None,
    ),
    (
        "Jira Integration",
        "Link features to Jira tickets automatically.",
        "Integration",
        FeatureStatus.OPEN,
        1,
        "https://jira.example.com/browse/PROJ-123",
    ),
]


def seed_test_data(db: Session, enabled: bool) -> int:
    """Insert the demo features when enabled and the catalog is empty.

    Returns the number of features inserted.
    """
    if not enabled:
        logger.info("Test data disabled, skipping seed")
        return 0

    if count_features(db) > 0:
        logger.info("Features already present, skipping seed")
        return 0

    now = utcnow()
    for title, description, category, status, days_old, ticket_url in DEMO_FEATURES:
        db.add(
            FeatureRequest(
                title=title,
                description=description,
                category=category,
                status=status.value,
                created_at=now - timedelta(days=days_old),
                ticket_url=ticket_url,
            )
        )
    db.commit()
    logger.info("Seeded %d demo features", len(DEMO_FEATURES))
    return len(DEMO_FEATURES)
