"""Script to create a wishlist user."""

import argparse
import sys

from wishlist.db.session import SessionLocal
from wishlist.models.user import UserRole
from wishlist.services.auth import create_user, get_user_by_username


def main():
    parser = argparse.ArgumentParser(description="Create a wishlist user")
    parser.add_argument("--username", required=True, help="Login name")
    parser.add_argument("--password", required=True, help="Password")
    parser.add_argument("--admin", action="store_true", help="Grant the admin role")
    args = parser.parse_args()

    role = UserRole.ADMIN.value if args.admin else UserRole.USER.value

    db = SessionLocal()
    try:
        if get_user_by_username(db, args.username):
            print(f"User '{args.username}' already exists.")
            sys.exit(1)

        user = create_user(db, args.username, args.password, role=role)
        print(f"Created {user.role} '{user.username}' with ID {user.id}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
