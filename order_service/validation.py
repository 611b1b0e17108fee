"""
Request validators.

Each validator takes the raw decoded JSON (or query mapping) and returns a
typed model, or raises one generic client error. Which field failed is
deliberately not reported.
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import ValidationError

from common.errors import InvalidCancellation, InvalidPayload, InvalidQuery
from common.models import OrderCancelRequest, OrderCreateRequest, OrderListQuery


def validate_create(raw: Any) -> OrderCreateRequest:
    if not isinstance(raw, dict):
        raise InvalidPayload()
    try:
        return OrderCreateRequest.model_validate(raw)
    except ValidationError as e:
        raise InvalidPayload() from e


def validate_list_query(params: Mapping[str, str]) -> OrderListQuery:
    known = {k: params[k] for k in ("customerId", "status", "from", "to") if k in params}
    try:
        return OrderListQuery.model_validate(known)
    except ValidationError as e:
        raise InvalidQuery() from e


def validate_cancel(raw: Any) -> OrderCancelRequest:
    """An absent body (None) means no reason was given."""
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise InvalidCancellation()
    try:
        return OrderCancelRequest.model_validate(raw)
    except ValidationError as e:
        raise InvalidCancellation() from e
