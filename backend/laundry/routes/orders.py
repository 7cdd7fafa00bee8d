from __future__ import annotations
from flask import Blueprint, request, current_app, g, make_response, jsonify
from laundry import get_db
from laundry.decorators.auth import require_actor
from laundry.models.order import Order
from laundry.services.lifecycle import OrderLifecycle, OrderFilter
from laundry.utils.listing import (
    paginate, make_cached_list_response, handle_conditional, latest_timestamp, compute_etag, iso_z
)

orders_bp = Blueprint('orders', __name__)


def _lifecycle() -> OrderLifecycle:
    return OrderLifecycle(get_db(), current_app.extensions.get('change_feed'))


def _body() -> dict:
    return request.get_json(silent=True) or {}


@orders_bp.get('')
@require_actor()
def list_orders():
    """Orders visible to the caller, newest first, with ETag / Last-Modified validators."""
    listing = _lifecycle().list_for_actor(g.actor, OrderFilter.from_args(request.args))
    rows, total, limit, offset = paginate(listing.session, listing.statement)
    latest_ts = latest_timestamp(rows)
    resp, etag = make_cached_list_response([_order_json(o) for o in rows], total, limit, offset, latest_ts)
    cond = handle_conditional(etag, latest_ts)
    if cond:
        return cond
    return resp


@orders_bp.post('')
@require_actor()
def create_order():
    data = _body()
    o = _lifecycle().create_order(
        g.actor,
        hub_id=data.get('hub_id'),
        service_type=data.get('service_type'),
        garment_count=data.get('garment_count'),
        pickup_address=data.get('pickup_address'),
        special_instructions=data.get('special_instructions'),
    )
    return _order_json(o), 201


@orders_bp.get('/<int:order_id>')
@require_actor()
def get_order(order_id: int):
    o = _lifecycle().get_for_actor(order_id, g.actor)
    latest_ts = latest_timestamp([o])
    etag = compute_etag([o.id], 1, 1, 0, iso_z(latest_ts) or '')
    cond = handle_conditional(etag, latest_ts)
    if cond:
        return cond
    resp = make_response(jsonify(_order_json(o)))
    resp.headers['ETag'] = etag
    return resp


@orders_bp.post('/<int:order_id>/approve')
@require_actor()
def approve_order(order_id: int):
    return _order_json(_lifecycle().approve(order_id, g.actor))


@orders_bp.post('/<int:order_id>/reject')
@require_actor()
def reject_order(order_id: int):
    return _order_json(_lifecycle().reject(order_id, g.actor))


@orders_bp.post('/<int:order_id>/claim')
@require_actor()
def claim_order(order_id: int):
    return _order_json(_lifecycle().claim(order_id, g.actor))


@orders_bp.post('/<int:order_id>/assign')
@require_actor()
def assign_order(order_id: int):
    return _order_json(_lifecycle().assign(order_id, g.actor, _body().get('driver_id')))


@orders_bp.post('/<int:order_id>/advance')
@require_actor()
def advance_order(order_id: int):
    data = _body()
    o = _lifecycle().advance(
        order_id,
        g.actor,
        expected_status=data.get('expected_status'),
        latitude=data.get('latitude'),
        longitude=data.get('longitude'),
    )
    return _order_json(o)


@orders_bp.get('/<int:order_id>/tracking')
@require_actor()
def order_tracking(order_id: int):
    events = _lifecycle().tracking_for(order_id, g.actor)
    return {
        'data': [
            {
                'id': e.id,
                'order_id': e.order_id,
                'driver_id': e.driver_id,
                'latitude': e.latitude,
                'longitude': e.longitude,
                'status_message': e.status_message,
                'created_at': iso_z(e.created_at),
            }
            for e in events
        ]
    }


def _order_json(o: Order):
    return {
        'id': o.id,
        'customer_id': o.customer_id,
        'hub_id': o.hub_id,
        'driver_id': o.driver_id,
        'service_type': o.service_type,
        'garment_count': o.garment_count,
        'pickup_address': o.pickup_address,
        'special_instructions': o.special_instructions,
        'total_amount': o.total_amount,
        'status': o.status,
        'estimated_delivery': iso_z(o.estimated_delivery),
        'admin_approved_at': iso_z(o.admin_approved_at),
        'admin_approved_by': o.admin_approved_by,
        'created_at': iso_z(o.created_at),
        'updated_at': iso_z(o.updated_at),
    }
