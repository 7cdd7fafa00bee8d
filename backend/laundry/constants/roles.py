"""Actor roles. Assigned once at signup and never changed afterwards."""
from __future__ import annotations
from enum import Enum


class Role(str, Enum):
    CUSTOMER = 'customer'
    DRIVER = 'driver'
    ADMIN = 'admin'

    @classmethod
    def parse(cls, value) -> 'Role':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f'unknown role {value!r}')


ALL_ROLES = tuple(r.value for r in Role)

__all__ = ['Role', 'ALL_ROLES']
