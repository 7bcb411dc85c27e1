"""Conversion of form field configurations between API and stored shapes.

``default``, ``validation_schema`` and ``depends_on.mapping`` are passed
through untouched. Whether ``depends_on.path`` names a sibling field is not
checked.
"""

from __future__ import annotations

from collections.abc import Iterable

from catalog_manager.core.errors import invalid_argument
from catalog_manager.domain import models, v1alpha1


def to_internal(field: v1alpha1.FieldConfiguration) -> models.FieldConfiguration:
    if not field.path:
        raise invalid_argument("invalid field path: path cannot be empty")

    depends_on = None
    if field.depends_on is not None:
        depends_on = models.DependsOn(
            path=field.depends_on.path,
            mapping=dict(field.depends_on.mapping),
        )

    return models.FieldConfiguration(
        path=field.path,
        default=field.default,
        display_name=field.display_name or "",
        editable=bool(field.editable),
        validation_schema=dict(field.validation_schema or {}),
        depends_on=depends_on,
    )


def to_external(field: models.FieldConfiguration) -> v1alpha1.FieldConfiguration:
    depends_on = None
    if field.depends_on is not None:
        depends_on = v1alpha1.DependsOn(
            path=field.depends_on.path,
            mapping=dict(field.depends_on.mapping),
        )

    return v1alpha1.FieldConfiguration(
        path=field.path,
        default=field.default,
        display_name=field.display_name or None,
        editable=True if field.editable else None,
        validation_schema=dict(field.validation_schema) if field.validation_schema else None,
        depends_on=depends_on,
    )


def fields_to_internal(
    fields: Iterable[v1alpha1.FieldConfiguration] | None,
) -> list[models.FieldConfiguration]:
    return [to_internal(f) for f in fields or ()]


def fields_to_external(
    fields: Iterable[models.FieldConfiguration],
) -> list[v1alpha1.FieldConfiguration]:
    return [to_external(f) for f in fields]
