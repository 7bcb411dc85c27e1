"""
Stateless page tokens over the (create_time, id) order of a collection.

A token is the URL-safe base64 of a small JSON document holding the
position of the last record of the previous page. Listing resumes strictly
after that position. Tokens are not snapshots: records inserted or deleted
before the position while a client is paging may be skipped or seen again.
"""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass
from datetime import datetime

from catalog_manager.core.errors import invalid_argument

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100


@dataclass(frozen=True, slots=True)
class Position:
    """A point in the stable (create_time, id) order."""

    create_time: datetime
    id: str


# Start of the collection is represented by ``None``.
Cursor = Position | None


def encode(position: Position) -> str:
    payload = json.dumps(
        {"t": position.create_time.isoformat(), "id": position.id},
        separators=(",", ":"),
    )
    return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii").rstrip("=")


def decode(token: str | None) -> Cursor:
    """Decode a page token; an absent or empty token means start of collection."""
    if not token:
        return None

    padded = token + "=" * (-len(token) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded.encode("ascii"))
        data = json.loads(raw)
        create_time = datetime.fromisoformat(data["t"])
        record_id = data["id"]
    except (binascii.Error, UnicodeError, ValueError, KeyError, TypeError) as exc:
        raise invalid_argument("invalid page token") from exc

    if not isinstance(record_id, str) or not record_id:
        raise invalid_argument("invalid page token")
    return Position(create_time=create_time, id=record_id)


def clamp_page_size(
    requested: int | None,
    *,
    default: int = DEFAULT_PAGE_SIZE,
    maximum: int = MAX_PAGE_SIZE,
) -> int:
    """Apply the default when omitted and cap at ``maximum``; reject sizes <= 0."""
    if requested is None:
        return min(default, maximum)
    if requested <= 0:
        raise invalid_argument("invalid max_page_size: must be greater than 0")
    return min(requested, maximum)


def next_token(last: Position | None, has_more: bool) -> str | None:
    """Token for the page after ``last``, or ``None`` when the listing is exhausted."""
    if not has_more or last is None:
        return None
    return encode(last)
