import os

DEFAULT_LIMIT = int(os.getenv('PAGE_SIZE_DEFAULT', '50'))
MAX_LIMIT = int(os.getenv('PAGE_SIZE_MAX', '200'))


def normalize_pagination(limit_raw, offset_raw, default_limit: int = DEFAULT_LIMIT, max_limit: int = MAX_LIMIT):
    """Coerce raw query-string limit/offset into a clamped (limit, offset) pair."""
    try:
        limit = int(limit_raw) if limit_raw not in (None, '') else default_limit
        offset = int(offset_raw) if offset_raw not in (None, '') else 0
    except ValueError:
        raise ValueError('limit/offset must be int')
    limit = max(1, min(limit, max_limit))
    offset = max(0, offset)
    return limit, offset
