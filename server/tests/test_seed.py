"""Tests for the demo data loader."""

from sqlalchemy.orm import Session

from wishlist.models.feature_request import FeatureRequest, FeatureStatus
from wishlist.services.seed import seed_test_data


class TestSeedTestData:
    def test_disabled_inserts_nothing(self, db: Session):
        assert seed_test_data(db, enabled=False) == 0
        assert db.query(FeatureRequest).count() == 0

    def test_enabled_on_empty_catalog(self, db: Session):
        assert seed_test_data(db, enabled=True) == 3

        features = {f.title: f for f in db.query(FeatureRequest).all()}
        assert features["Export as PDF"].status == FeatureStatus.IN_PROGRESS.value
        assert features["Dark Mode"].status == FeatureStatus.OPEN.value
        jira = features["Jira Integration"]
        assert jira.ticket_url == "https://jira.example.com/browse/PROJ-123"
        assert features["Export as PDF"].created_at < jira.created_at

    def test_existing_data_is_left_alone(self, db: Session, test_feature: FeatureRequest):
        assert seed_test_data(db, enabled=True) == 0
        assert db.query(FeatureRequest).count() == 1
