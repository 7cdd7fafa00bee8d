from flask import Blueprint, current_app, g
from sqlalchemy import select
from laundry import get_db
from laundry.constants.roles import Role
from laundry.decorators.auth import require_actor
from laundry.models.profile import Profile
from laundry.services.lifecycle import OrderLifecycle
from laundry.utils.listing import paginate, build_list_payload

admin_bp = Blueprint('admin', __name__)


@admin_bp.get('/stats')
@require_actor(Role.ADMIN)
def dispatch_stats():
    return OrderLifecycle(get_db(), current_app.extensions.get('change_feed')).stats(g.actor)


@admin_bp.get('/drivers')
@require_actor(Role.ADMIN)
def list_drivers():
    """Driver profiles an admin can dispatch orders to."""
    session = get_db()
    stmt = select(Profile).where(Profile.role == Role.DRIVER.value).order_by(Profile.full_name.asc(), Profile.id.asc())
    rows, total, limit, offset = paginate(session, stmt)
    data = [
        {'id': p.id, 'full_name': p.full_name, 'email': p.email, 'phone': p.phone}
        for p in rows
    ]
    return build_list_payload(data, total, limit, offset)
