from flask import Blueprint, request, g
from sqlalchemy import select
from laundry import get_db
from laundry.constants.roles import Role
from laundry.constants.services import ALL_SERVICE_TYPES, catalogue_json
from laundry.decorators.auth import require_actor
from laundry.errors import ValidationError
from laundry.models.hub import LaundryHub
from laundry.services.audit import add_audit
from laundry.utils.listing import paginate, make_cached_list_response, handle_conditional, latest_timestamp, iso_z
from laundry.utils.validation import require_text, optional_text, coordinate

hubs_bp = Blueprint('hubs', __name__)


@hubs_bp.get('')
@require_actor()
def list_hubs():
    session = get_db()
    stmt = select(LaundryHub).order_by(LaundryHub.name.asc(), LaundryHub.id.asc())
    rows, total, limit, offset = paginate(session, stmt)
    latest_ts = latest_timestamp(rows, 'created_at')
    resp, etag = make_cached_list_response([_hub_json(h) for h in rows], total, limit, offset, latest_ts)
    cond = handle_conditional(etag, latest_ts)
    if cond:
        return cond
    return resp


@hubs_bp.get('/services')
def list_services():
    return {'data': catalogue_json()}


@hubs_bp.post('')
@require_actor(Role.ADMIN)
def create_hub():
    data = request.get_json(silent=True) or {}
    services = data.get('services') or []
    if not isinstance(services, list) or any(s not in ALL_SERVICE_TYPES for s in services):
        raise ValidationError('services must be a list of known service types', field='services')
    hub = LaundryHub(
        name=require_text(data.get('name'), 'name', max_length=128),
        address=require_text(data.get('address'), 'address', max_length=255),
        phone=optional_text(data.get('phone'), 'phone'),
        operating_hours=optional_text(data.get('operating_hours'), 'operating_hours'),
        latitude=coordinate(data.get('latitude'), 'latitude', 90.0),
        longitude=coordinate(data.get('longitude'), 'longitude', 180.0),
        services=sorted(set(services)),
    )
    session = get_db()
    session.add(hub)
    session.flush()
    add_audit(session, 'HUB.CREATE', g.actor.actor_id, 'LaundryHub', hub.id, {'name': hub.name})
    session.commit()
    return _hub_json(hub), 201


def _hub_json(h: LaundryHub):
    return {
        'id': h.id,
        'name': h.name,
        'address': h.address,
        'phone': h.phone,
        'operating_hours': h.operating_hours,
        'latitude': h.latitude,
        'longitude': h.longitude,
        'services': list(h.services or []),
        'created_at': iso_z(h.created_at),
    }
