from __future__ import annotations
"""Typed failures raised by the order lifecycle.

Each error carries the HTTP status the API answers with and a human readable
message. Route handlers let these propagate; the app-level error handler renders
them as ``{"error": {...}}``.

``ClaimConflictError`` is the only retryable failure: the caller should refresh
its view of the claimable pool and try another order.
"""
from typing import Any, Dict, Optional


class LifecycleError(Exception):
    status_code = 400
    title = 'Bad Request'
    code = 'error'
    retryable = False
    default_message = 'Request could not be processed.'

    def __init__(self, message: Optional[str] = None, **context: Any):
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            'status': self.status_code,
            'title': self.title,
            'detail': self.message,
            'code': self.code,
        }
        if self.retryable:
            body['retryable'] = True
        return body


class ValidationError(LifecycleError):
    status_code = 400
    title = 'Bad Request'
    code = 'validation_error'
    default_message = 'Some of the submitted values are invalid.'


class NotFoundError(LifecycleError):
    status_code = 404
    title = 'Not Found'
    code = 'not_found'
    default_message = 'The requested record does not exist.'


class PermissionDenied(LifecycleError):
    """Actor role or identity does not permit the requested operation."""
    status_code = 403
    title = 'Forbidden'
    code = 'permission_denied'
    default_message = "You're not allowed to do that."


class InvalidTransitionError(LifecycleError):
    status_code = 400
    title = 'Bad Request'
    code = 'invalid_transition'
    default_message = "That state change isn't possible right now."


class ClaimConflictError(LifecycleError):
    status_code = 409
    title = 'Conflict'
    code = 'claim_conflict'
    retryable = True
    default_message = 'Someone else already took this order.'


__all__ = [
    'LifecycleError', 'ValidationError', 'NotFoundError', 'PermissionDenied',
    'InvalidTransitionError', 'ClaimConflictError'
]
