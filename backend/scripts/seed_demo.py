#!/usr/bin/env python
"""Idempotent seed script for demo hubs and an admin profile.

Usage:
    python backend/scripts/seed_demo.py                        # seed normally
    python backend/scripts/seed_demo.py --admin-email ops@x.io # choose admin login
    python backend/scripts/seed_demo.py --dry-run              # run logic then rollback (no DB changes)
"""
from __future__ import annotations
import os, sys, argparse
from sqlalchemy import select

# Allow running from repo root
sys.path.append(os.path.abspath('backend'))
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from laundry import create_app, get_db  # noqa: E402
from laundry.constants.roles import Role  # noqa: E402
from laundry.models.profile import Base, Profile  # noqa: E402
from laundry.models.hub import LaundryHub  # noqa: E402
import laundry.models.order  # noqa: E402,F401
import laundry.models.tracking  # noqa: E402,F401
import laundry.models.audit  # noqa: E402,F401
from seeds.hubs import HUBS  # noqa: E402


def ensure_hubs(session):
    existing = {h.name for h in session.execute(select(LaundryHub)).scalars().all()}
    created = 0
    for fields in HUBS:
        if fields['name'] in existing:
            continue
        session.add(LaundryHub(**fields))
        created += 1
    return created


def ensure_admin(session, email: str, password: str):
    profile = session.execute(select(Profile).where(Profile.email == email)).scalar_one_or_none()
    if profile:
        return False
    profile = Profile(email=email, full_name='Dispatch Admin', role=Role.ADMIN.value, password_hash='')
    profile.set_password(password)
    session.add(profile)
    return True


def main(argv=None):
    parser = argparse.ArgumentParser(description='Seed demo hubs and an admin profile')
    parser.add_argument('--admin-email', default=os.getenv('SEED_ADMIN_EMAIL', 'admin@example.com'))
    parser.add_argument('--admin-password', default=os.getenv('SEED_ADMIN_PASSWORD', 'admin'))
    parser.add_argument('--dry-run', action='store_true', help='rollback instead of commit')
    args = parser.parse_args(argv)

    app = create_app()
    with app.app_context():
        session = get_db()
        Base.metadata.create_all(session.get_bind(), checkfirst=True)
        hubs_created = ensure_hubs(session)
        admin_created = ensure_admin(session, args.admin_email, args.admin_password)
        if args.dry_run:
            session.rollback()
        else:
            session.commit()
        app.logger.info('hubs created=%s admin created=%s dry_run=%s', hubs_created, admin_created, args.dry_run)
        print(f"hubs created: {hubs_created}; admin created: {admin_created}{' (dry run)' if args.dry_run else ''}")


if __name__ == '__main__':
    main()
