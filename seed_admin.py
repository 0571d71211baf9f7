#!/usr/bin/env python3
"""
Create, reset or remove an admin account in the Magic Wash database.

This script DOES NOT read or reveal any existing passwords.  New
passwords are stored as PBKDF2-HMAC-SHA256 hashes ("salthex$hashhex").

Usage:
    python seed_admin.py --username admin --email admin@magicwash.com
    python seed_admin.py --username admin --reset
    python seed_admin.py --username admin --delete
    python seed_admin.py --db ./carwash.db --username admin --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
The database defaults to DATABASE_URL from the environment.
"""

import argparse
import getpass
import logging
import sys
from typing import List, Optional

from carwash_api.app.core.config import Settings
from carwash_api.app.core.db import Database
from carwash_api.app.core.errors import ApiError, ValidationFailed
from carwash_api.app.core.logging_config import setup_logging
from carwash_api.app.services.admin_service import AdminService

logger = logging.getLogger("seed_admin")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Manage Magic Wash admin accounts.")
    ap.add_argument("--db", help="Path to the SQLite DB file (defaults to DATABASE_URL)")
    ap.add_argument("--username", default="admin", help="Admin username (default: admin)")
    ap.add_argument("--email", default="admin@magicwash.com", help="Contact email for a new account")
    ap.add_argument("--role", default="admin", help="Role for a new account")
    ap.add_argument("--password", help="Password. If omitted, you'll be prompted securely.")
    action = ap.add_mutually_exclusive_group()
    action.add_argument("--reset", action="store_true", help="Replace the password of an existing account")
    action.add_argument("--delete", action="store_true", help="Remove the account")
    return ap


def main(argv: Optional[List[str]] = None, settings: Optional[Settings] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level)

    db = Database(args.db or settings.database_url).connect()
    admins = AdminService(db, settings)
    try:
        existing = admins.get_admin(args.username)

        if args.delete:
            if existing is None:
                print(f"[!] No admin found with username: {args.username}", file=sys.stderr)
                return 2
            admins.delete_admin(args.username)
            print(f"[+] Admin {args.username} deleted")
            return 0

        if args.reset and existing is None:
            print(f"[!] No admin found with username: {args.username}", file=sys.stderr)
            return 2
        if not args.reset and existing is not None:
            print(f"[!] Admin {existing.username} already exists (created {existing.created_at.isoformat()})")
            print("    Use --reset to set a new password.")
            return 0

        password = args.password or getpass.getpass("Enter NEW password: ")
        if not password:
            print("[!] Empty password is not allowed.", file=sys.stderr)
            return 1

        if args.reset:
            admins.set_password(args.username, password)
            print(f"[+] Password updated for admin: {args.username}")
        else:
            admins.create_admin(args.username, password, email=args.email, role=args.role)
            print(f"[+] Admin {args.username} created. Change this password after first login.")
        return 0
    except ValidationFailed as exc:
        for error in exc.errors:
            print(f"[!] {error}", file=sys.stderr)
        return 1
    except ApiError as exc:
        print(f"[!] {exc.message}", file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
