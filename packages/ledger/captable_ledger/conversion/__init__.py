"""Conversion between OCF payloads and native ledger arguments.

Usage:
    from captable_ledger.conversion import EntityKind, encode, decode

    native = encode(EntityKind.STOCK_PLAN, {"id": "plan-1", "stock_class_id": "sc-1", ...})
    plan = decode(EntityKind.STOCK_PLAN, native)
"""

# Registry
from .registry import (
    EntityKind,
    ConverterSpec,
    CONVERTERS,
    get_converter,
    resolve_kind,
    require_id,
    payload_id,
    validate_payload,
    encode,
    decode,
)

# Deprecated fields
from .normalization import (
    DeprecatedFieldMapping,
    DeprecatedFieldUsage,
    DeprecationNotice,
    DeprecationHandler,
    DEPRECATED_FIELDS,
    log_deprecation,
    normalize_singular_to_array,
    normalize_deprecated_fields,
    check_deprecated_fields,
    get_deprecated_field_mappings,
)

# Primitives
from .primitives import (
    EnumCodec,
    date_to_ledger,
    ledger_to_date,
    decimal_to_ledger,
    ledger_to_decimal,
    find_unsafe_value,
)

__all__ = [
    # Registry
    "EntityKind",
    "ConverterSpec",
    "CONVERTERS",
    "get_converter",
    "resolve_kind",
    "require_id",
    "payload_id",
    "validate_payload",
    "encode",
    "decode",
    # Deprecated fields
    "DeprecatedFieldMapping",
    "DeprecatedFieldUsage",
    "DeprecationNotice",
    "DeprecationHandler",
    "DEPRECATED_FIELDS",
    "log_deprecation",
    "normalize_singular_to_array",
    "normalize_deprecated_fields",
    "check_deprecated_fields",
    "get_deprecated_field_mappings",
    # Primitives
    "EnumCodec",
    "date_to_ledger",
    "ledger_to_date",
    "decimal_to_ledger",
    "ledger_to_decimal",
    "find_unsafe_value",
]
