"""Bootstrap script: create the initial admin user and load demo features if configured."""

import sys

from wishlist.core.config import get_settings
from wishlist.db.session import SessionLocal
from wishlist.models.user import User, UserRole
from wishlist.services.auth import create_user
from wishlist.services.seed import seed_test_data


def bootstrap_admin() -> None:
    """Create admin user if no users exist and bootstrap credentials are set."""
    settings = get_settings()

    if not settings.bootstrap_admin_username or not settings.bootstrap_admin_password:
        print("Bootstrap: No admin credentials configured, skipping.")
        return

    db = SessionLocal()
    try:
        user_count = db.query(User).count()
        if user_count > 0:
            print(f"Bootstrap: {user_count} user(s) already exist, skipping.")
            return

        user = create_user(
            db,
            settings.bootstrap_admin_username,
            settings.bootstrap_admin_password,
            role=UserRole.ADMIN.value,
        )
        print(f"Bootstrap: Created admin user '{user.username}' with ID {user.id}")
    finally:
        db.close()


def bootstrap_features() -> None:
    settings = get_settings()
    db = SessionLocal()
    try:
        inserted = seed_test_data(db, settings.testdata_enabled)
        print(f"Bootstrap: {inserted} demo feature(s) loaded.")
    finally:
        db.close()


def main() -> None:
    try:
        bootstrap_admin()
        bootstrap_features()
    except Exception as e:
        print(f"Bootstrap error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
