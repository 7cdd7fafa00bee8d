from __future__ import annotations
from typing import Any, Dict
from laundry.errors import ValidationError


def apply_filters(query, specs: Dict[str, Dict[str, Any]], params: Dict[str, Any]):
    """Generic filter builder over a SQLAlchemy Select (or legacy Query).

    specs: { param_name: { 'op': callable(query, value)->query, 'coerce': type/func, 'validate': callable(optional) } }
    Params that are absent or None are skipped.
    """
    for name, meta in specs.items():
        if name not in params or params[name] is None:
            continue
        val = params[name]
        if 'coerce' in meta:
            try:
                val = meta['coerce'](val)
            except Exception:
                raise ValidationError(f'{name} invalid', field=name)
        if 'validate' in meta and not meta['validate'](val):
            raise ValidationError(f'{name} invalid', field=name)
        query = meta['op'](query, val)
    return query
