from __future__ import annotations
from typing import Iterable, Optional, Tuple, List
from flask import request, make_response
from sqlalchemy import select, func
from laundry.config.pagination import normalize_pagination
from laundry.errors import ValidationError
import hashlib
from datetime import datetime, timezone, timedelta
from email.utils import parsedate_to_datetime, format_datetime

TIMESTAMP_TOLERANCE = timedelta(seconds=1)


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def canonicalize_timestamp(dt: datetime) -> datetime:
    """Return UTC tz-aware timestamp truncated to whole seconds (microseconds removed)."""
    return _as_utc(dt).replace(microsecond=0)


def iso_z(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return _as_utc(dt).isoformat().replace('+00:00', 'Z')


def request_pagination() -> Tuple[int, int]:
    try:
        return normalize_pagination(request.args.get('limit'), request.args.get('offset'))
    except ValueError as e:
        raise ValidationError(str(e))


def paginate(session, stmt) -> Tuple[list, int, int, int]:
    """Run a Select with limit/offset taken from the query string.

    Returns (rows, total, limit, offset); total counts the unpaged statement.
    """
    limit, offset = request_pagination()
    total = session.execute(select(func.count()).select_from(stmt.order_by(None).subquery())).scalar_one()
    rows = session.execute(stmt.offset(offset).limit(limit)).scalars().all()
    return rows, total, limit, offset


def latest_timestamp(rows: Iterable, attr: str = 'updated_at') -> Optional[datetime]:
    """Newest timestamp among rows, tz-aware UTC at full precision."""
    stamps = [_as_utc(getattr(r, attr)) for r in rows if getattr(r, attr, None)]
    return max(stamps) if stamps else None


def compute_etag(ids: Iterable[int], total: int, limit: int, offset: int, latest_ts: Optional[str] = '') -> str:
    seed = f"{list(ids)}|{total}|{limit}|{offset}|{latest_ts or ''}"
    return hashlib.sha256(seed.encode()).hexdigest()[:32]


def build_list_payload(rows: List[dict], total: int, limit: int, offset: int):
    return {
        'data': rows,
        'pagination': {
            'total': total,
            'limit': limit,
            'offset': offset,
            'returned': len(rows)
        }
    }


def _http_date(dt: datetime) -> str:
    """Return RFC1123 HTTP-date string in GMT."""
    return format_datetime(dt, usegmt=True)


def _validator_headers(resp, etag: str, latest_ts: Optional[datetime]):
    resp.headers['ETag'] = etag
    if latest_ts:
        latest_c = canonicalize_timestamp(latest_ts)
        resp.headers['Last-Modified'] = _http_date(latest_c)
        resp.headers['X-Last-Modified-ISO'] = iso_z(latest_c)
    return resp


def make_cached_list_response(rows: List[dict], total: int, limit: int, offset: int, latest_ts: Optional[datetime] = None):
    ids = [r.get('id') for r in rows]
    # Full precision so two writes inside one second still change the ETag
    latest_iso = iso_z(latest_ts) if latest_ts else ''
    etag = compute_etag(ids, total, limit, offset, latest_iso)
    resp = make_response(build_list_payload(rows, total, limit, offset))
    return _validator_headers(resp, etag, latest_ts), etag


def _parse_if_modified_since(header_val: str) -> Optional[datetime]:
    if not header_val:
        return None
    # Try ISO 8601 first
    try:
        dt = datetime.fromisoformat(header_val.replace('Z', '+00:00'))
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt
    except ValueError:
        pass
    # Try HTTP-date (RFC 1123)
    try:
        dt = parsedate_to_datetime(header_val)
    except (TypeError, ValueError):
        return None
    if dt and dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def handle_conditional(etag_value: str, latest_ts: Optional[datetime]):
    """Evaluate conditional request headers.

    Precedence: If-None-Match over If-Modified-Since (per RFC 9110 semantics).
    Returns a 304 response object if conditions satisfied, else None.
    """
    inm = request.headers.get('If-None-Match')
    if inm:
        if inm.strip('"') == etag_value:
            return _validator_headers(make_response('', 304), etag_value, latest_ts)
        return None
    ims_raw = request.headers.get('If-Modified-Since')
    if ims_raw and latest_ts:
        ims_dt = _parse_if_modified_since(ims_raw)
        if ims_dt and canonicalize_timestamp(latest_ts) <= canonicalize_timestamp(ims_dt) + TIMESTAMP_TOLERANCE:
            return _validator_headers(make_response('', 304), etag_value, latest_ts)
    return None
