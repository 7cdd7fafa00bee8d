from functools import wraps
from flask import g
from flask_jwt_extended import verify_jwt_in_request
from laundry.services.identity import current_actor


def require_actor(*roles):
    """Verify the request JWT and expose the resolved Actor as ``g.actor``.

    With roles given, actors outside them get 403 before the view runs. Lifecycle
    operations still enforce their own role rules; this only guards endpoints that
    have no lifecycle counterpart (hub catalogue writes, admin dashboards).
    """
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            actor = current_actor()
            if roles:
                actor.require(*roles)
            g.actor = actor
            return fn(*args, **kwargs)
        return wrapper
    return outer
