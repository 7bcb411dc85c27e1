"""Identifier and resource path assignment for new records."""

from __future__ import annotations

import re
from uuid import uuid4

from catalog_manager.core.errors import invalid_argument

MAX_ID_LENGTH = 63

# DNS-1123 label
_DNS_LABEL = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")


def assign_id(supplied_id: str | None = None) -> str:
    """Return the caller's id when it is a valid DNS label, else a fresh UUID4.

    Uniqueness is not checked here; the repository's insert enforces it.
    """
    if not supplied_id:
        return str(uuid4())

    if len(supplied_id) > MAX_ID_LENGTH or not _DNS_LABEL.match(supplied_id):
        raise invalid_argument(
            "invalid id: must be a DNS-1123 label of at most 63 lowercase "
            "alphanumerics or '-', starting and ending with an alphanumeric"
        )
    return supplied_id


def resource_path(collection_prefix: str, record_id: str) -> str:
    return f"{collection_prefix}/{record_id}"
