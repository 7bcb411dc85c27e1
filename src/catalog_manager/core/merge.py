"""PATCH-style merge of a catalog item update onto the stored record."""

from __future__ import annotations

from dataclasses import dataclass

from catalog_manager.core import fields as field_model
from catalog_manager.core.errors import immutable_field_update
from catalog_manager.domain import models, v1alpha1


@dataclass(slots=True)
class CatalogItemPatch:
    """Partial update; ``None`` leaves the attribute unchanged."""

    display_name: str | None = None
    spec: v1alpha1.CatalogItemSpec | None = None


def merge_catalog_item(
    existing: models.CatalogItem, patch: CatalogItemPatch
) -> models.CatalogItem:
    """Return a copy of ``existing`` with ``patch`` applied.

    ``spec.service_type`` is immutable: a differing value raises
    IMMUTABLE_FIELD_UPDATE, an equal or omitted one is ignored. A supplied
    ``spec.fields`` replaces the stored list as a whole. The display name
    length is checked by the transport layer, not here.
    """
    merged = existing.model_copy(deep=True)

    if patch.display_name is not None:
        merged.display_name = patch.display_name

    if patch.spec is not None:
        requested_type = patch.spec.service_type
        if requested_type is not None and requested_type != existing.spec.service_type:
            raise immutable_field_update()

        if patch.spec.fields is not None:
            merged.spec = models.CatalogItemSpec(
                service_type=existing.spec.service_type,
                fields=field_model.fields_to_internal(patch.spec.fields),
            )

    return merged
