#!/usr/bin/env python3
"""
Script to create an admin account. Public registration only creates donor,
NGO and volunteer accounts.

Usage: python create_admin.py "Admin Name" admin@example.com 'password'
"""
import sys

from app.crud import crud_user
from app.db.database import SessionLocal


def create_admin(name: str, email: str, password: str) -> int:
    db = SessionLocal()
    try:
        if crud_user.get_user_by_email(db, email):
            print(f"ERROR: an account with email {email} already exists")
            return 1
        admin = crud_user.create_admin(db, name=name, email=email, password=password)
        if admin is None:
            print(f"ERROR: could not create admin {email}")
            return 1
        print(f"Created admin {admin.email} with id {admin.id}")
        return 0
    finally:
        db.close()


def main(argv) -> int:
    if len(argv) != 3:
        print(__doc__)
        return 2
    return create_admin(*argv)


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
