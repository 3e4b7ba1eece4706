"""
Projects the raw replicated ``dealRequests`` value into typed deal requests.

Each field of a request is a multi-value register. The projection picks the
first value of the register (unordered sets are sorted first so concurrent
values resolve the same way on every pass) and decodes it as JSON.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

import orjson

from .errors import DealRequestDecodeError
from .models import DealRequest


@dataclass(slots=True)
class SnapshotProjection:
    requests: dict[str, DealRequest] = field(default_factory=dict)
    errors: list[DealRequestDecodeError] = field(default_factory=list)


def resolve_register(
    deal_request_id: str,
    field_name: str,
    register: Iterable[str | bytes] | str | bytes,
) -> str | bytes:
    if isinstance(register, (str, bytes)):
        return register

    if isinstance(register, (set, frozenset)):
        try:
            values = sorted(register)

        except TypeError as err:
            raise DealRequestDecodeError(
                deal_request_id,
                field_name,
                f"register holds values of mixed types ({err})",
            ) from err

    else:
        values = list(register)

    if len(values) == 0:
        raise DealRequestDecodeError(
            deal_request_id,
            field_name,
            "register holds no value",
        )

    return values[0]


def decode_field(
    deal_request_id: str,
    field_name: str,
    register: Iterable[str | bytes] | str | bytes,
) -> Any:
    serialized = resolve_register(deal_request_id, field_name, register)

    try:
        return orjson.loads(serialized)

    except (orjson.JSONDecodeError, TypeError) as err:
        raise DealRequestDecodeError(
            deal_request_id,
            field_name,
            str(err),
        ) from err


def project_deal_request(
    deal_request_id: str,
    raw_fields: Mapping[str, Iterable[str | bytes]],
) -> DealRequest:
    return DealRequest(
        deal_request_id=deal_request_id,
        fields={
            field_name: decode_field(deal_request_id, field_name, register)
            for field_name, register in raw_fields.items()
        },
    )


def project_snapshot(
    raw: Mapping[str, Mapping[str, Iterable[str | bytes]]],
) -> SnapshotProjection:
    """
    Project every deal request in ``raw``.

    A request with an undecodable field is left out of ``requests`` and its
    ``DealRequestDecodeError`` is reported in ``errors``; the remaining
    requests are projected normally.
    """
    projection = SnapshotProjection()

    for deal_request_id, raw_fields in raw.items():
        try:
            projection.requests[deal_request_id] = project_deal_request(
                deal_request_id,
                raw_fields,
            )

        except DealRequestDecodeError as err:
            projection.errors.append(err)

    return projection
