"""Typed conversion of raw database values.

Drivers disagree on what comes back for UUID, NUMERIC, TIMESTAMP and BOOLEAN
columns (SQLite hands back strings, floats and integers), so repositories run
every column through these before building domain records.
"""

import json
from datetime import UTC, datetime
from decimal import Decimal

from storefront.shared.money import to_money


def as_id(value) -> str | None:
    if value is None:
        return None
    return str(value)


def as_decimal(value) -> Decimal | None:
    if value is None:
        return None
    return to_money(value)


def as_datetime(value) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value


def as_bool(value) -> bool:
    return bool(value)


def as_json_list(value) -> list:
    if not value:
        return []
    if isinstance(value, list):
        return value
    return json.loads(value)


def db_id(value) -> str | None:
    return None if value is None else str(value)


def db_timestamp(value: datetime | None) -> str | None:
    return None if value is None else value.isoformat()


def db_money(value) -> str | None:
    return None if value is None else str(to_money(value))
