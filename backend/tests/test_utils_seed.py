"""Test seeding utilities to reduce duplication.

The suite shares one in-memory database, so helpers generate unique emails / names
and never assume an empty table.
"""
import uuid
from typing import Iterable, Optional
from laundry import get_db
from laundry.constants.roles import Role
from laundry.models.profile import Profile
from laundry.models.hub import LaundryHub
from laundry.services.identity import Actor, actor_for

ALL_SERVICES = ('wash_fold', 'dry_cleaning', 'ironing')


def unique(prefix: str) -> str:
    return f'{prefix}-{uuid.uuid4().hex[:10]}'


def ensure_profile(role: Role, email: Optional[str] = None, password: str = 'pw', full_name: Optional[str] = None) -> Profile:
    """Idempotently ensure a profile with the given email exists; returns it."""
    session = get_db()
    email = email or f"{unique(role.value)}@example.com"
    p = session.query(Profile).filter_by(email=email).one_or_none()
    if not p:
        p = Profile(email=email, full_name=full_name or email.split('@')[0], role=role.value, password_hash='')
        p.set_password(password)
        session.add(p); session.commit(); session.refresh(p)
    return p


def ensure_hub(services: Iterable[str] = ALL_SERVICES, name: Optional[str] = None) -> LaundryHub:
    session = get_db()
    hub = LaundryHub(name=name or unique('Hub'), address='1 Test Street', services=list(services))
    session.add(hub); session.commit(); session.refresh(hub)
    return hub


def make_actor(role: Role) -> Actor:
    """Profile + Actor in one step for service-level tests."""
    return actor_for(ensure_profile(role))


__all__ = ['unique', 'ensure_profile', 'ensure_hub', 'make_actor', 'ALL_SERVICES']
