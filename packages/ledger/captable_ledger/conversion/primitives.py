"""Shared helpers for converting between OCF payload values and ledger arguments.

Ledger conventions:
    - dates travel as ledger time strings at midnight UTC (YYYY-MM-DDT00:00:00.000Z)
    - decimals travel as plain (non-exponent) strings
    - enum values travel as variant tags, e.g. "OcfStakeholderTypeIndividual"
    - absent optionals travel as None
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

from ..errors import ErrorCode, ValidationError
from ..schemas.base import Monetary

T = TypeVar("T")
R = TypeVar("R")

LEDGER_TIME_SUFFIX = "T00:00:00.000Z"

JSON_SAFE_SCALARS = (str, int, float, bool, type(None))


# =============================================================================
# Dates
# =============================================================================

def date_to_ledger(value: date) -> str:
    return f"{value.isoformat()}{LEDGER_TIME_SUFFIX}"


def ledger_to_date(value: Any, field_path: str) -> date:
    """Parse a ledger time string back to its date portion."""
    try:
        return date.fromisoformat(value.split("T")[0])
    except (AttributeError, ValueError):
        raise ValidationError(
            field_path,
            "Expected a ledger time string",
            expected_type="str",
            received_value=value,
            code=ErrorCode.INVALID_FORMAT,
        )


# =============================================================================
# Numbers and Money
# =============================================================================

def decimal_to_ledger(value: Decimal) -> str:
    return format(value, "f")


def ledger_to_decimal(value: Any, field_path: str) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise ValidationError(
            field_path,
            "Expected a numeric string",
            expected_type="str",
            received_value=value,
            code=ErrorCode.INVALID_FORMAT,
        )
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(
            field_path,
            "Expected a numeric string",
            expected_type="str",
            received_value=value,
            code=ErrorCode.INVALID_FORMAT,
        )


def monetary_to_ledger(value: Monetary) -> Dict[str, str]:
    return {"amount": decimal_to_ledger(value.amount), "currency": value.currency}


def ledger_to_monetary(value: Dict[str, Any], field_path: str) -> Monetary:
    return Monetary(
        amount=ledger_to_decimal(value["amount"], f"{field_path}.amount"),
        currency=value["currency"],
    )


# =============================================================================
# Optionals and Lists
# =============================================================================

def optional(value: Optional[T], encoder: Callable[[T], R]) -> Optional[R]:
    """Apply ``encoder`` unless the value is absent."""
    return None if value is None else encoder(value)


def as_list(value: Optional[List[Any]]) -> List[Any]:
    return list(value) if value else []


# =============================================================================
# Enum Variants
# =============================================================================

def pascal_case(value: str) -> str:
    return "".join(part[:1].upper() + part[1:].lower() for part in value.split("_"))


class EnumCodec:
    """Bidirectional mapping between OCF enum values and ledger variant tags.

    Example:
        STAKEHOLDER_TYPE = EnumCodec("OcfStakeholderType", ["INDIVIDUAL", "INSTITUTION"])
        STAKEHOLDER_TYPE.encode("INDIVIDUAL", "stakeholder.stakeholder_type")
        → "OcfStakeholderTypeIndividual"
    """

    def __init__(
        self,
        prefix: str,
        values: Iterable[str],
        overrides: Optional[Dict[str, str]] = None,
    ):
        overrides = overrides or {}
        self.prefix = prefix
        self._to_tag = {v: overrides.get(v, prefix + pascal_case(v)) for v in values}
        self._from_tag = {tag: v for v, tag in self._to_tag.items()}

    def encode(self, value: str, field_path: str) -> str:
        try:
            return self._to_tag[value]
        except KeyError:
            raise ValidationError(
                field_path,
                f"Unknown value '{value}' (expected one of {sorted(self._to_tag)})",
                received_value=value,
                code=ErrorCode.UNKNOWN_ENUM_VALUE,
            )

    def decode(self, tag: str, field_path: str) -> str:
        try:
            return self._from_tag[tag]
        except KeyError:
            raise ValidationError(
                field_path,
                f"Unknown ledger variant '{tag}' for {self.prefix}",
                received_value=tag,
                code=ErrorCode.UNKNOWN_ENUM_VALUE,
            )

    def encode_optional(self, value: Optional[str], field_path: str) -> Optional[str]:
        return None if value is None else self.encode(value, field_path)

    def decode_optional(self, tag: Optional[str], field_path: str) -> Optional[str]:
        return None if tag is None else self.decode(tag, field_path)


# =============================================================================
# Shares Authorized (numeric-or-enum variant)
# =============================================================================

_SHARES_AUTHORIZED_ENUM = EnumCodec(
    "OcfAuthorizedShares", ["UNLIMITED", "NOT_APPLICABLE"]
)


def shares_authorized_to_ledger(value: Any, field_path: str) -> Dict[str, str]:
    if isinstance(value, str):
        return {
            "tag": "OcfInitialSharesEnum",
            "value": _SHARES_AUTHORIZED_ENUM.encode(value, field_path),
        }
    return {"tag": "OcfInitialSharesNumeric", "value": decimal_to_ledger(value)}


def ledger_to_shares_authorized(value: Dict[str, Any], field_path: str) -> Any:
    tag = value.get("tag")
    if tag == "OcfInitialSharesEnum":
        return _SHARES_AUTHORIZED_ENUM.decode(value["value"], field_path)
    if tag == "OcfInitialSharesNumeric":
        return ledger_to_decimal(value["value"], field_path)
    raise ValidationError(
        field_path,
        f"Unknown shares-authorized variant '{tag}'",
        received_value=value,
        code=ErrorCode.UNKNOWN_ENUM_VALUE,
    )


# =============================================================================
# JSON Safety
# =============================================================================

def find_unsafe_value(value: Any, path: str = "") -> Optional[str]:
    """Return the path of the first value that would not survive JSON encoding.

    Encoders must only emit str/int/float/bool/None and lists/dicts of those.
    A leaked Decimal, date or model instance is reported by its dotted path.
    """
    if isinstance(value, dict):
        for key, item in value.items():
            found = find_unsafe_value(item, f"{path}.{key}" if path else str(key))
            if found is not None:
                return found
        return None
    if isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            found = find_unsafe_value(item, f"{path}[{index}]")
            if found is not None:
                return found
        return None
    if isinstance(value, JSON_SAFE_SCALARS):
        return None
    return path or "<root>"
