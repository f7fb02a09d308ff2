"""Normalization of deprecated OCF fields to their current equivalents.

The OCF schema evolves, and some fields are replaced over time. Payloads from
older exports are normalized here before validation, so every encoder only
ever sees the current field names.

Normalization never fails: it only chooses which value to keep. Each time a
legacy value is actually used, a ``DeprecationNotice`` is emitted (logged as a
warning by default) so callers can find and migrate old data.

Example:
    normalize_deprecated_fields("stock_plan", {"id": "plan-1", "stock_class_id": "sc-1"})
    → {"id": "plan-1", "stock_class_ids": ["sc-1"]}
"""

import logging
from typing import Any, Callable, Dict, List, Literal, Mapping, Optional, Sequence
from pydantic import Field

from ..schemas.base import FrozenModel

logger = logging.getLogger(__name__)


# =============================================================================
# Registry of Known Deprecations
# =============================================================================

DeprecationType = Literal["singular_to_array", "renamed", "removed"]


class DeprecatedFieldMapping(FrozenModel):
    """One legacy field and the field that replaced it."""

    deprecated_field: str
    replacement_field: str
    deprecation_type: DeprecationType
    value_map: Dict[str, str] = Field(
        default_factory=dict,
        description="Legacy value → current value, for renamed enum fields",
    )


DEPRECATED_FIELDS: Dict[str, List[DeprecatedFieldMapping]] = {
    "stock_plan": [
        DeprecatedFieldMapping(
            deprecated_field="stock_class_id",
            replacement_field="stock_class_ids",
            deprecation_type="singular_to_array",
        ),
    ],
    "equity_compensation_issuance": [
        DeprecatedFieldMapping(
            deprecated_field="option_grant_type",
            replacement_field="compensation_type",
            deprecation_type="renamed",
            value_map={"NSO": "OPTION_NSO", "ISO": "OPTION_ISO", "INTL": "OPTION"},
        ),
    ],
}


def _kind_key(kind: Any) -> str:
    return str(getattr(kind, "value", kind))


def get_deprecated_field_mappings(kind: Any) -> List[DeprecatedFieldMapping]:
    """Return the deprecations declared for ``kind`` (empty list if none)."""
    return list(DEPRECATED_FIELDS.get(_kind_key(kind), []))


# =============================================================================
# Notices
# =============================================================================

class DeprecationNotice(FrozenModel):
    """Emitted when a legacy field value was used during normalization."""

    kind: str
    deprecated_field: str
    replacement_field: str
    deprecated_value: Any = None

    @property
    def message(self) -> str:
        return (
            f"Field '{self.deprecated_field}' is deprecated for {self.kind}. "
            f"Use '{self.replacement_field}' instead."
        )


DeprecationHandler = Callable[[DeprecationNotice], None]


def log_deprecation(notice: DeprecationNotice) -> None:
    """Default handler: one WARNING record per notice."""
    logger.warning(notice.message)


def _is_present(value: Any) -> bool:
    return value is not None and value != ""


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


# =============================================================================
# Normalization
# =============================================================================

def normalize_singular_to_array(singular: Any, array: Optional[Sequence[Any]]) -> List[Any]:
    """Merge a legacy singular value and its array replacement.

    The array wins whenever it is a non-empty list or tuple. Otherwise a
    non-empty singular value is wrapped into a one-element list. Otherwise
    the result is empty. A string is never taken for the array.

    Example:
        normalize_singular_to_array("x", None)   → ["x"]
        normalize_singular_to_array("x", ["y"])  → ["y"]
        normalize_singular_to_array("", [])      → []
    """
    if _is_array(array) and array:
        return list(array)
    if _is_present(singular):
        return [singular]
    return []


def normalize_deprecated_fields(
    kind: Any,
    payload: Mapping[str, Any],
    on_deprecated: Optional[DeprecationHandler] = None,
    *,
    warn: bool = True,
) -> Dict[str, Any]:
    """Return a copy of ``payload`` with legacy fields folded into current ones.

    Args:
        kind: Entity kind (string or EntityKind).
        payload: Raw payload mapping, possibly containing legacy fields.
        on_deprecated: Handler called for every notice. Defaults to logging.
        warn: When False and no handler is given, notices are dropped.

    Returns:
        A new dict. Legacy keys are removed; the input is never modified.
    """
    data = dict(payload)
    kind_name = _kind_key(kind)
    handler = on_deprecated or (log_deprecation if warn else None)

    for mapping in get_deprecated_field_mappings(kind_name):
        legacy = data.pop(mapping.deprecated_field, None)
        current = data.get(mapping.replacement_field)
        used_legacy = False

        if mapping.deprecation_type == "singular_to_array":
            # A malformed current value is left for model validation to reject
            if current is None or _is_array(current):
                used_legacy = not current and _is_present(legacy)
                data[mapping.replacement_field] = normalize_singular_to_array(legacy, current)
        elif mapping.deprecation_type == "renamed":
            used_legacy = not _is_present(current) and _is_present(legacy)
            if used_legacy:
                data[mapping.replacement_field] = mapping.value_map.get(legacy, legacy)
        else:
            used_legacy = _is_present(legacy)

        if used_legacy and handler is not None:
            handler(
                DeprecationNotice(
                    kind=kind_name,
                    deprecated_field=mapping.deprecated_field,
                    replacement_field=mapping.replacement_field,
                    deprecated_value=legacy,
                )
            )

    return data


# =============================================================================
# Verification
# =============================================================================

class DeprecatedFieldUsage(FrozenModel):
    deprecated_fields_used: List[str] = Field(default_factory=list)

    @property
    def has_deprecated_fields(self) -> bool:
        return bool(self.deprecated_fields_used)


def check_deprecated_fields(kind: Any, payload: Mapping[str, Any]) -> DeprecatedFieldUsage:
    """Report which legacy fields carry a value, without modifying anything."""
    used = [
        m.deprecated_field
        for m in get_deprecated_field_mappings(kind)
        if _is_present(payload.get(m.deprecated_field))
    ]
    return DeprecatedFieldUsage(deprecated_fields_used=used)
