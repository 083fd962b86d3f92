"""
Response parsing for the admin savings endpoint.

The upstream API has shipped two envelope shapes over time, so both are
accepted:

    {"success": true, "data": {"savings": [...], "pagination": {...}}}
    {"success": true, "data": [...]}

Anything else is rejected with SavingsPayloadError.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from shared.notification_item import PENDING_STATUS, NotificationItem


class SavingsPayloadError(ValueError):
    """Raised when a response envelope or record is missing required data or is malformed."""


def extract_savings_records(payload: Any) -> List[Dict[str, Any]]:
    """
    Return the raw savings records from a response envelope.

    Raises SavingsPayloadError when the envelope reports failure or when the
    data field matches neither accepted shape.
    """
    if not isinstance(payload, dict):
        raise SavingsPayloadError("Response root must be a JSON object.")

    if payload.get("success") is not True:
        message = payload.get("message")
        raise SavingsPayloadError(f"Response reported failure: {message or 'no message'}")

    data = payload.get("data")
    if isinstance(data, dict):
        records = data.get("savings")
    else:
        records = data

    if not isinstance(records, list):
        raise SavingsPayloadError("data must be a list or an object with a 'savings' list.")

    return [record for record in records if isinstance(record, dict)]


def parse_notification_item(record: Dict[str, Any]) -> NotificationItem:
    """Build a NotificationItem from one savings record."""
    item_id = record.get("_id")
    if not isinstance(item_id, str) or not item_id.strip():
        raise SavingsPayloadError("_id must be a non-empty string.")

    member_id, member_name = _parse_member(record.get("memberId"))

    return NotificationItem(
        id=item_id.strip(),
        member_id=member_id,
        member_name=member_name,
        installment_period=_coerce_period(record.get("installmentPeriod")),
        amount=_coerce_amount(record.get("amount")),
        created_at=_parse_created_at(record.get("createdAt")),
        status=PENDING_STATUS,
    )


def parse_iso8601_utc(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp and normalise it to UTC.

    Accepts values ending with 'Z' or an explicit offset. Raises
    SavingsPayloadError when parsing fails or when no timezone is present.
    """
    if not isinstance(value, str):
        raise SavingsPayloadError("createdAt must be a string.")

    cleaned = value.strip()
    try:
        if cleaned.endswith("Z"):
            cleaned = cleaned[:-1] + "+00:00"
        dt = datetime.fromisoformat(cleaned)
    except ValueError as exc:
        raise SavingsPayloadError(
            "createdAt must be in ISO-8601 format (e.g. 2026-01-01T00:00:00Z)."
        ) from exc

    if dt.tzinfo is None:
        raise SavingsPayloadError("createdAt must include a timezone.")

    return dt.astimezone(timezone.utc)


def _parse_member(value: Any) -> tuple[Optional[str], Optional[str]]:
    # memberId is either the bare id or the populated member document.
    if isinstance(value, str):
        return (value.strip() or None), None
    if isinstance(value, dict):
        raw_id = value.get("_id")
        raw_name = value.get("name")
        member_id = raw_id.strip() if isinstance(raw_id, str) and raw_id.strip() else None
        member_name = raw_name.strip() if isinstance(raw_name, str) and raw_name.strip() else None
        return member_id, member_name
    return None, None


def _coerce_period(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _coerce_amount(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    if not isinstance(value, (int, float, str)):
        return 0
    try:
        amount = int(float(value.strip())) if isinstance(value, str) else int(value)
    except (ValueError, OverflowError):
        return 0

    if amount < 0:
        raise SavingsPayloadError("amount must not be negative.")
    return amount


def _parse_created_at(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    try:
        return parse_iso8601_utc(value)
    except SavingsPayloadError:
        return None
