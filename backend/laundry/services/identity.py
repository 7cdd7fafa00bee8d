from __future__ import annotations
"""Identity binding between JWT sessions and lifecycle actors.

The access token identity is the profile id (as a string, a flask-jwt-extended v4
requirement) and the ``role`` claim carries the profile role. The lifecycle manager
trusts this binding completely and performs no authentication of its own.
"""
from dataclasses import dataclass
from flask_jwt_extended import create_access_token, get_jwt, get_jwt_identity
from laundry.constants.roles import Role
from laundry.errors import PermissionDenied


@dataclass(frozen=True)
class Actor:
    actor_id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @property
    def is_driver(self) -> bool:
        return self.role is Role.DRIVER

    @property
    def is_customer(self) -> bool:
        return self.role is Role.CUSTOMER

    def require(self, *roles: Role, message: str = None):
        if self.role not in roles:
            raise PermissionDenied(message, actor_id=self.actor_id, role=self.role.value)
        return self


def actor_for(profile) -> Actor:
    return Actor(actor_id=profile.id, role=Role.parse(profile.role))


def issue_access_token(profile) -> str:
    return create_access_token(identity=str(profile.id), additional_claims={'role': Role.parse(profile.role).value})


def current_actor() -> Actor:
    """Build the Actor from the JWT verified for the current request."""
    claims = get_jwt()
    try:
        role = Role.parse(claims.get('role'))
    except ValueError:
        raise PermissionDenied('Token carries no valid role')
    return Actor(actor_id=int(get_jwt_identity()), role=role)


__all__ = ['Actor', 'actor_for', 'issue_access_token', 'current_actor']
