from __future__ import annotations
"""Order lifecycle manager: the one place that moves orders between statuses.

Order lifecycle graph:
  pending -> approved            (admin approve)
  pending -> cancelled           (admin reject)
  approved -> assigned           (driver claim / admin assign)
  assigned -> picked -> in_laundry -> ready -> out_for_delivery -> delivered
                                 (assigned driver advance)
delivered and cancelled are terminal.

Every mutation is a single conditional UPDATE whose WHERE clause restates the
precondition (expected status, and for claims ``driver_id IS NULL``). The store
serializes concurrent writers; a zero rowcount means another request moved the
order first and the manager re-reads the row to report the precise failure.
Nothing here retries: retry policy belongs to the caller.
"""
import logging
from contextlib import contextmanager
from dataclasses import dataclass, asdict
from datetime import timedelta
from typing import Iterator, List, Optional

from sqlalchemy import select, update, func, and_, or_

from laundry.constants.roles import Role
from laundry.constants.services import ALL_SERVICE_TYPES, unit_price, turnaround_hours
from laundry.errors import (
    ValidationError, NotFoundError, PermissionDenied, InvalidTransitionError, ClaimConflictError
)
from laundry.models.profile import Profile, utcnow
from laundry.models.hub import LaundryHub
from laundry.models.order import Order
from laundry.models.tracking import TrackingEvent
from laundry.services.audit import add_audit
from laundry.services.identity import Actor
from laundry.services.notifications import ChangeFeed, EVENT_INSERT, EVENT_UPDATE
from laundry.utils.filters import apply_filters
from laundry.utils.fsm import TransitionValidator
from laundry.utils.validation import validate_status, require_text, optional_text, int_value, positive_int, coordinate

logger = logging.getLogger(__name__)

ORDER_FSM = TransitionValidator(
    {
        Order.STATUS_PENDING: {Order.STATUS_APPROVED, Order.STATUS_CANCELLED},
        Order.STATUS_APPROVED: {Order.STATUS_ASSIGNED},
        Order.STATUS_ASSIGNED: {Order.STATUS_PICKED},
        Order.STATUS_PICKED: {Order.STATUS_IN_LAUNDRY},
        Order.STATUS_IN_LAUNDRY: {Order.STATUS_READY},
        Order.STATUS_READY: {Order.STATUS_OUT_FOR_DELIVERY},
        Order.STATUS_OUT_FOR_DELIVERY: {Order.STATUS_DELIVERED},
        Order.STATUS_DELIVERED: set(),
        Order.STATUS_CANCELLED: set(),
    },
    chain=[
        Order.STATUS_ASSIGNED,
        Order.STATUS_PICKED,
        Order.STATUS_IN_LAUNDRY,
        Order.STATUS_READY,
        Order.STATUS_OUT_FOR_DELIVERY,
        Order.STATUS_DELIVERED,
    ],
)

PICKUP_MESSAGE = 'Order picked up from customer'

SCOPE_AVAILABLE = 'available'
SCOPE_MINE = 'mine'
DRIVER_SCOPES = (SCOPE_AVAILABLE, SCOPE_MINE)


@dataclass
class OrderFilter:
    status: Optional[str] = None
    service_type: Optional[str] = None
    hub_id: Optional[int] = None
    # drivers only: the claimable pool, their own active orders, or both (None)
    scope: Optional[str] = None

    @classmethod
    def from_args(cls, args) -> 'OrderFilter':
        # Only absent or empty params are dropped; hub_id=0 still filters
        def arg(name):
            value = args.get(name)
            return None if value in (None, '') else value
        return cls(
            status=arg('status'),
            service_type=arg('service_type'),
            hub_id=arg('hub_id'),
            scope=arg('scope'),
        )


class OrderListing:
    """Lazy, restartable view over a Select; each iteration re-queries the store."""

    def __init__(self, session, statement):
        self.session = session
        self.statement = statement

    def __iter__(self) -> Iterator[Order]:
        return iter(self.session.execute(self.statement).scalars())

    def all(self) -> List[Order]:
        return list(self)

    def count(self) -> int:
        return self.session.execute(
            select(func.count()).select_from(self.statement.order_by(None).subquery())
        ).scalar_one()


def _not_possible(order: Order, detail: str = None) -> InvalidTransitionError:
    message = "That state change isn't possible right now"
    message += f': {detail}' if detail else f' (order is {order.status}).'
    return InvalidTransitionError(message, order_id=order.id, status=order.status)


class OrderLifecycle:
    def __init__(self, session, feed: Optional[ChangeFeed] = None):
        self.session = session
        self.feed = feed

    # ---------- creation ---------- #

    def create_order(self, actor: Actor, hub_id, service_type, garment_count, pickup_address, special_instructions=None) -> Order:
        actor.require(Role.CUSTOMER, message='Only customers can place orders.')
        service_type = validate_status(service_type, ALL_SERVICE_TYPES, 'service_type')
        garment_count = positive_int(garment_count, 'garment_count')
        pickup_address = require_text(pickup_address, 'pickup_address', max_length=255)
        special_instructions = optional_text(special_instructions, 'special_instructions')
        hub_id = int_value(hub_id, 'hub_id')
        hub = self.session.get(LaundryHub, hub_id)
        if hub is None:
            raise NotFoundError(f'Laundry hub {hub_id} not found', hub_id=hub_id)
        if not hub.offers(service_type):
            raise NotFoundError(f'Laundry hub {hub_id} does not offer {service_type}', hub_id=hub_id)
        now = utcnow()
        order = Order(
            customer_id=actor.actor_id,
            hub_id=hub.id,
            driver_id=None,
            service_type=service_type,
            garment_count=garment_count,
            pickup_address=pickup_address,
            special_instructions=special_instructions,
            total_amount=unit_price(service_type) * garment_count,
            status=Order.STATUS_PENDING,
            estimated_delivery=now + timedelta(hours=turnaround_hours(service_type)),
            created_at=now,
            updated_at=now,
        )
        with self._unit_of_work():
            self.session.add(order)
            self.session.flush()
            add_audit(self.session, 'ORDER.CREATE', actor.actor_id, 'Order', order.id,
                      {'after': order.status, 'total_amount': order.total_amount})
            self.session.commit()
        self._publish(EVENT_INSERT, order.id)
        logger.info('order %s created by customer %s (%s x%s = %s)',
                    order.id, actor.actor_id, service_type, garment_count, order.total_amount)
        return order

    # ---------- admin gate ---------- #

    def approve(self, order_id: int, actor: Actor) -> Order:
        actor.require(Role.ADMIN, message='Only admins can approve orders.')
        now = utcnow()
        return self._transition(
            order_id, actor, 'ORDER.APPROVE', Order.STATUS_PENDING, Order.STATUS_APPROVED,
            values={'admin_approved_at': now, 'admin_approved_by': actor.actor_id, 'updated_at': now},
        )

    def reject(self, order_id: int, actor: Actor) -> Order:
        actor.require(Role.ADMIN, message='Only admins can reject orders.')
        return self._transition(order_id, actor, 'ORDER.REJECT', Order.STATUS_PENDING, Order.STATUS_CANCELLED)

    # ---------- driver claim / admin dispatch ---------- #

    def claim(self, order_id: int, actor: Actor) -> Order:
        actor.require(Role.DRIVER, message='Only drivers can claim orders.')
        return self._take(order_id, actor, actor.actor_id, 'ORDER.CLAIM')

    def assign(self, order_id: int, actor: Actor, driver_id) -> Order:
        """Admin dispatch of an approved, unassigned order to a named driver."""
        actor.require(Role.ADMIN, message='Only admins can assign drivers.')
        driver_id = int_value(driver_id, 'driver_id')
        driver = self.session.get(Profile, driver_id)
        if driver is None:
            raise NotFoundError(f'Driver {driver_id} not found', driver_id=driver_id)
        if driver.role != Role.DRIVER.value:
            raise ValidationError(f'Profile {driver_id} is not a driver', field='driver_id')
        return self._take(order_id, actor, driver.id, 'ORDER.ASSIGN')

    def _take(self, order_id: int, actor: Actor, driver_id: int, action: str) -> Order:
        order = self._load(order_id)
        self._check_claimable(order, driver_id)
        with self._unit_of_work():
            won = self._conditional_update(
                order_id,
                [Order.status == Order.STATUS_APPROVED, Order.driver_id.is_(None)],
                {'status': Order.STATUS_ASSIGNED, 'driver_id': driver_id},
            )
            if not won:
                self.session.rollback()
                logger.debug('order %s claim by driver %s lost the race', order_id, driver_id)
                # Re-read to tell a lost race apart from an order that moved elsewhere
                self._check_claimable(self._load(order_id), driver_id)
                raise ClaimConflictError(order_id=order_id)
            return self._finish(order_id, actor, action, Order.STATUS_APPROVED, Order.STATUS_ASSIGNED,
                                {'driver_id': driver_id})

    def _check_claimable(self, order: Order, driver_id: int):
        if order.driver_id is not None and not order.is_terminal:
            if order.driver_id == driver_id:
                raise _not_possible(order, 'this order is already assigned to that driver.')
            raise ClaimConflictError(order_id=order.id)
        if order.status != Order.STATUS_APPROVED:
            raise _not_possible(order)

    # ---------- driver progress ---------- #

    def advance(self, order_id: int, actor: Actor, expected_status: Optional[str] = None,
                latitude: Optional[float] = None, longitude: Optional[float] = None) -> Order:
        """Move the order one step along the delivery chain.

        ``expected_status`` is the status the caller last saw; when the order has
        already moved past it the call fails instead of advancing twice.
        """
        actor.require(Role.DRIVER, message='Only drivers can update delivery progress.')
        if expected_status is not None:
            validate_status(expected_status, Order.ALL_STATUSES, 'expected_status')
        latitude = coordinate(latitude, 'latitude', 90.0)
        longitude = coordinate(longitude, 'longitude', 180.0)
        order = self._load(order_id)
        if order.driver_id != actor.actor_id:
            raise PermissionDenied('Only the assigned driver can update this order.', order_id=order_id)
        if expected_status is not None and order.status != expected_status:
            raise _not_possible(order, f'order is {order.status}, not {expected_status}.')
        current = order.status
        target = ORDER_FSM.successor(current)
        if target is None:
            raise _not_possible(order)
        ORDER_FSM.assert_can_transition(current, target)
        with self._unit_of_work():
            moved = self._conditional_update(
                order_id,
                [Order.status == current, Order.driver_id == actor.actor_id],
                {'status': target},
            )
            if not moved:
                self.session.rollback()
                raise _not_possible(self._load(order_id), 'the order changed before this update was applied.')
            if target == Order.STATUS_PICKED:
                self.session.add(TrackingEvent(
                    order_id=order_id,
                    driver_id=actor.actor_id,
                    latitude=latitude,
                    longitude=longitude,
                    status_message=PICKUP_MESSAGE,
                ))
            return self._finish(order_id, actor, 'ORDER.ADVANCE', current, target)

    # ---------- reads ---------- #

    def list_for_actor(self, actor: Actor, filter: Optional[OrderFilter] = None) -> OrderListing:
        filter = filter or OrderFilter()
        stmt = select(Order)
        if actor.role is Role.CUSTOMER:
            stmt = stmt.where(Order.customer_id == actor.actor_id)
        elif actor.role is Role.DRIVER:
            pool = and_(Order.status == Order.STATUS_APPROVED, Order.driver_id.is_(None))
            mine = and_(Order.driver_id == actor.actor_id, Order.status.not_in(Order.TERMINAL_STATUSES))
            if filter.scope == SCOPE_AVAILABLE:
                stmt = stmt.where(pool)
            elif filter.scope == SCOPE_MINE:
                stmt = stmt.where(mine)
            else:
                stmt = stmt.where(or_(pool, mine))
        specs = {
            'status': {'op': lambda q, v: q.where(Order.status == v), 'validate': lambda v: v in Order.ALL_STATUSES},
            'service_type': {'op': lambda q, v: q.where(Order.service_type == v), 'validate': lambda v: v in ALL_SERVICE_TYPES},
            'hub_id': {'coerce': lambda v: int_value(v, 'hub_id'), 'op': lambda q, v: q.where(Order.hub_id == v)},
            'scope': {'op': lambda q, v: q, 'validate': lambda v: v in DRIVER_SCOPES},
        }
        stmt = apply_filters(stmt, specs, asdict(filter))
        stmt = stmt.order_by(Order.created_at.desc(), Order.id.desc())
        return OrderListing(self.session, stmt)

    def get_for_actor(self, order_id: int, actor: Actor) -> Order:
        order = self._load(order_id)
        if not self._visible(order, actor):
            raise PermissionDenied('You cannot view this order.', order_id=order_id)
        return order

    def tracking_for(self, order_id: int, actor: Actor) -> List[TrackingEvent]:
        self.get_for_actor(order_id, actor)
        stmt = (
            select(TrackingEvent)
            .where(TrackingEvent.order_id == order_id)
            .order_by(TrackingEvent.created_at.asc(), TrackingEvent.id.asc())
        )
        return list(self.session.execute(stmt).scalars())

    def stats(self, actor: Actor) -> dict:
        actor.require(Role.ADMIN, message='Only admins can view dispatch statistics.')
        counts = {status: 0 for status in Order.ALL_STATUSES}
        for status, count in self.session.execute(select(Order.status, func.count(Order.id)).group_by(Order.status)):
            counts[status] = int(count)
        revenue = self.session.execute(
            select(func.coalesce(func.sum(Order.total_amount), 0)).where(Order.status == Order.STATUS_DELIVERED)
        ).scalar_one()
        return {
            'total': sum(counts.values()),
            'by_status': counts,
            'pending': counts[Order.STATUS_PENDING],
            'approved': counts[Order.STATUS_APPROVED],
            'in_progress': sum(counts[s] for s in Order.ACTIVE_STATUSES),
            'delivered': counts[Order.STATUS_DELIVERED],
            'revenue': int(revenue),
        }

    # ---------- internals ---------- #

    @staticmethod
    def _visible(order: Order, actor: Actor) -> bool:
        if actor.role is Role.ADMIN:
            return True
        if actor.role is Role.CUSTOMER:
            return order.customer_id == actor.actor_id
        if order.driver_id == actor.actor_id:
            return True
        return order.status == Order.STATUS_APPROVED and order.driver_id is None

    def _load(self, order_id: int) -> Order:
        order = self.session.get(Order, order_id, populate_existing=True)
        if order is None:
            raise NotFoundError(f'Order {order_id} not found', order_id=order_id)
        return order

    def _transition(self, order_id: int, actor: Actor, action: str, expected: str, target: str, values=None) -> Order:
        order = self._load(order_id)
        if order.status != expected or not ORDER_FSM.can_transition(order.status, target):
            raise _not_possible(order)
        with self._unit_of_work():
            if not self._conditional_update(order_id, [Order.status == expected], {'status': target, **(values or {})}):
                self.session.rollback()
                raise _not_possible(self._load(order_id))
            return self._finish(order_id, actor, action, expected, target)

    def _conditional_update(self, order_id: int, conditions, values) -> bool:
        values = dict(values)
        values.setdefault('updated_at', utcnow())
        result = self.session.execute(
            update(Order)
            .where(Order.id == order_id, *conditions)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def _finish(self, order_id: int, actor: Actor, action: str, before: str, after: str, meta=None) -> Order:
        add_audit(self.session, action, actor.actor_id, 'Order', order_id, {'before': before, 'after': after, **(meta or {})})
        self.session.commit()
        order = self._load(order_id)
        self._publish(EVENT_UPDATE, order_id)
        logger.info('order %s %s -> %s by %s %s', order_id, before, after, actor.role.value, actor.actor_id)
        return order

    def _publish(self, kind: str, order_id: int):
        if self.feed is not None:
            self.feed.publish(kind, Order.__tablename__, order_id)

    @contextmanager
    def _unit_of_work(self):
        try:
            yield
        except Exception:
            self.session.rollback()
            raise


__all__ = ['OrderLifecycle', 'OrderFilter', 'OrderListing', 'ORDER_FSM', 'PICKUP_MESSAGE', 'SCOPE_AVAILABLE', 'SCOPE_MINE']
