"""Entity conversion registry.

A lookup table from entity kind to its payload model and ``{encode, decode}``
pair. Dispatch is by key only; there is no runtime type inspection of the
payload beyond validating it against the kind's model.

Usage:
    native = encode("stakeholder", {"id": "sh-1", ...})
    payload = decode("stakeholder", native)
"""

from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Type
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from ..errors import ErrorCode, ValidationError
from ..schemas.base import FrozenModel
from ..schemas.objects import (
    DocumentPayload,
    EntityPayload,
    IssuerPayload,
    StakeholderPayload,
    StockClassPayload,
    StockLegendTemplatePayload,
    StockPlanPayload,
    ValuationPayload,
    VestingTermsPayload,
)
from ..schemas.transactions import (
    ConvertibleIssuancePayload,
    EquityCompensationExercisePayload,
    EquityCompensationIssuancePayload,
    IssuerAuthorizedSharesAdjustmentPayload,
    StockCancellationPayload,
    StockClassAuthorizedSharesAdjustmentPayload,
    StockIssuancePayload,
    StockPlanPoolAdjustmentPayload,
    StockRepurchasePayload,
    StockTransferPayload,
    WarrantIssuancePayload,
)
from . import objects as obj
from . import transactions as tx
from .normalization import DeprecationHandler, normalize_deprecated_fields
from .primitives import pascal_case

NativeArgs = Dict[str, Any]


class EntityKind(str, Enum):
    """Entity kinds a batch can create, edit or delete."""

    ISSUER = "issuer"
    STAKEHOLDER = "stakeholder"
    STOCK_CLASS = "stock_class"
    STOCK_PLAN = "stock_plan"
    STOCK_LEGEND_TEMPLATE = "stock_legend_template"
    VESTING_TERMS = "vesting_terms"
    VALUATION = "valuation"
    DOCUMENT = "document"
    STOCK_ISSUANCE = "stock_issuance"
    STOCK_TRANSFER = "stock_transfer"
    STOCK_CANCELLATION = "stock_cancellation"
    STOCK_REPURCHASE = "stock_repurchase"
    CONVERTIBLE_ISSUANCE = "convertible_issuance"
    WARRANT_ISSUANCE = "warrant_issuance"
    EQUITY_COMPENSATION_ISSUANCE = "equity_compensation_issuance"
    EQUITY_COMPENSATION_EXERCISE = "equity_compensation_exercise"
    STOCK_CLASS_AUTHORIZED_SHARES_ADJUSTMENT = "stock_class_authorized_shares_adjustment"
    ISSUER_AUTHORIZED_SHARES_ADJUSTMENT = "issuer_authorized_shares_adjustment"
    STOCK_PLAN_POOL_ADJUSTMENT = "stock_plan_pool_adjustment"


_ACTION_PREFIX = {"create": "OcfCreate", "edit": "OcfEdit", "delete": "OcfDelete"}


class ConverterSpec(FrozenModel):
    """Everything the compiler needs to know about one entity kind."""

    model_config = ConfigDict(frozen=True, use_enum_values=False)

    kind: EntityKind
    model: Type[EntityPayload]
    encoder: Callable[[Any], NativeArgs]
    decoder: Callable[[NativeArgs], Any]
    creatable: bool = True
    deletable: bool = True

    def tag(self, action: str) -> str:
        """Ledger variant tag for one action, e.g. ``OcfCreateStockClass``."""
        return _ACTION_PREFIX[action] + pascal_case(self.kind.value)

    def allows(self, action: str) -> bool:
        if action == "create":
            return self.creatable
        if action == "delete":
            return self.deletable
        return True


# =============================================================================
# Registry Table
# =============================================================================

CONVERTERS: Dict[EntityKind, ConverterSpec] = {
    spec.kind: spec
    for spec in [
        ConverterSpec(
            kind=EntityKind.ISSUER,
            model=IssuerPayload,
            encoder=obj.encode_issuer,
            decoder=obj.decode_issuer,
            creatable=False,
            deletable=False,
        ),
        ConverterSpec(
            kind=EntityKind.STAKEHOLDER,
            model=StakeholderPayload,
            encoder=obj.encode_stakeholder,
            decoder=obj.decode_stakeholder,
        ),
        ConverterSpec(
            kind=EntityKind.STOCK_CLASS,
            model=StockClassPayload,
            encoder=obj.encode_stock_class,
            decoder=obj.decode_stock_class,
        ),
        ConverterSpec(
            kind=EntityKind.STOCK_PLAN,
            model=StockPlanPayload,
            encoder=obj.encode_stock_plan,
            decoder=obj.decode_stock_plan,
        ),
        ConverterSpec(
            kind=EntityKind.STOCK_LEGEND_TEMPLATE,
            model=StockLegendTemplatePayload,
            encoder=obj.encode_stock_legend_template,
            decoder=obj.decode_stock_legend_template,
        ),
        ConverterSpec(
            kind=EntityKind.VESTING_TERMS,
            model=VestingTermsPayload,
            encoder=obj.encode_vesting_terms,
            decoder=obj.decode_vesting_terms,
        ),
        ConverterSpec(
            kind=EntityKind.VALUATION,
            model=ValuationPayload,
            encoder=obj.encode_valuation,
            decoder=obj.decode_valuation,
        ),
        ConverterSpec(
            kind=EntityKind.DOCUMENT,
            model=DocumentPayload,
            encoder=obj.encode_document,
            decoder=obj.decode_document,
        ),
        ConverterSpec(
            kind=EntityKind.STOCK_ISSUANCE,
            model=StockIssuancePayload,
            encoder=tx.encode_stock_issuance,
            decoder=tx.decode_stock_issuance,
        ),
        ConverterSpec(
            kind=EntityKind.STOCK_TRANSFER,
            model=StockTransferPayload,
            encoder=tx.encode_stock_transfer,
            decoder=tx.decode_stock_transfer,
        ),
        ConverterSpec(
            kind=EntityKind.STOCK_CANCELLATION,
            model=StockCancellationPayload,
            encoder=tx.encode_stock_cancellation,
            decoder=tx.decode_stock_cancellation,
        ),
        ConverterSpec(
            kind=EntityKind.STOCK_REPURCHASE,
            model=StockRepurchasePayload,
            encoder=tx.encode_stock_repurchase,
            decoder=tx.decode_stock_repurchase,
        ),
        ConverterSpec(
            kind=EntityKind.CONVERTIBLE_ISSUANCE,
            model=ConvertibleIssuancePayload,
            encoder=tx.encode_convertible_issuance,
            decoder=tx.decode_convertible_issuance,
        ),
        ConverterSpec(
            kind=EntityKind.WARRANT_ISSUANCE,
            model=WarrantIssuancePayload,
            encoder=tx.encode_warrant_issuance,
            decoder=tx.decode_warrant_issuance,
        ),
        ConverterSpec(
            kind=EntityKind.EQUITY_COMPENSATION_ISSUANCE,
            model=EquityCompensationIssuancePayload,
            encoder=tx.encode_equity_compensation_issuance,
            decoder=tx.decode_equity_compensation_issuance,
        ),
        ConverterSpec(
            kind=EntityKind.EQUITY_COMPENSATION_EXERCISE,
            model=EquityCompensationExercisePayload,
            encoder=tx.encode_equity_compensation_exercise,
            decoder=tx.decode_equity_compensation_exercise,
        ),
        ConverterSpec(
            kind=EntityKind.STOCK_CLASS_AUTHORIZED_SHARES_ADJUSTMENT,
            model=StockClassAuthorizedSharesAdjustmentPayload,
            encoder=tx.encode_stock_class_authorized_shares_adjustment,
            decoder=tx.decode_stock_class_authorized_shares_adjustment,
        ),
        ConverterSpec(
            kind=EntityKind.ISSUER_AUTHORIZED_SHARES_ADJUSTMENT,
            model=IssuerAuthorizedSharesAdjustmentPayload,
            encoder=tx.encode_issuer_authorized_shares_adjustment,
            decoder=tx.decode_issuer_authorized_shares_adjustment,
        ),
        ConverterSpec(
            kind=EntityKind.STOCK_PLAN_POOL_ADJUSTMENT,
            model=StockPlanPoolAdjustmentPayload,
            encoder=tx.encode_stock_plan_pool_adjustment,
            decoder=tx.decode_stock_plan_pool_adjustment,
        ),
    ]
}


# =============================================================================
# Lookup and Validation
# =============================================================================

def resolve_kind(kind: Any) -> EntityKind:
    try:
        return EntityKind(kind)
    except ValueError:
        raise ValidationError(
            "kind",
            f"Unsupported entity kind '{kind}'",
            received_value=kind,
            code=ErrorCode.UNKNOWN_ENUM_VALUE,
        )


def get_converter(kind: Any) -> ConverterSpec:
    return CONVERTERS[resolve_kind(kind)]


def require_id(kind: Any, value: Any) -> str:
    """Return ``value`` if it is a usable natural key, else raise.

    An empty string counts as absent.
    """
    kind_name = resolve_kind(kind).value
    if value is None or value == "":
        raise ValidationError(
            f"{kind_name}.id",
            "Required field is missing or empty",
            expected_type="str",
            received_value=value,
            code=ErrorCode.REQUIRED_FIELD_MISSING,
        )
    if not isinstance(value, str):
        raise ValidationError(
            f"{kind_name}.id",
            f"Expected a string, got {type(value).__name__}",
            expected_type="str",
            received_value=value,
            code=ErrorCode.INVALID_TYPE,
        )
    return value


def payload_id(payload: Any) -> Any:
    if isinstance(payload, Mapping):
        return payload.get("id")
    return getattr(payload, "id", None)


_PYDANTIC_CODES = {
    "missing": ErrorCode.REQUIRED_FIELD_MISSING,
    "literal_error": ErrorCode.UNKNOWN_ENUM_VALUE,
    "enum": ErrorCode.UNKNOWN_ENUM_VALUE,
}


def _from_pydantic(kind: EntityKind, exc: PydanticValidationError) -> ValidationError:
    """Translate the first Pydantic error into one carrying a dotted field path."""
    first = exc.errors()[0]
    loc = ".".join(str(part) for part in first.get("loc", ()))
    path = f"{kind.value}.{loc}" if loc else kind.value
    return ValidationError(
        path,
        first.get("msg", str(exc)),
        received_value=first.get("input"),
        code=_PYDANTIC_CODES.get(first.get("type"), ErrorCode.INVALID_TYPE),
    )


def validate_payload(
    kind: Any,
    payload: Any,
    on_deprecated: Optional[DeprecationHandler] = None,
    *,
    warn: bool = True,
) -> EntityPayload:
    """Normalize and validate a raw payload into the kind's model.

    Mappings go through deprecated-field normalization first. A model
    instance of the right class is already current and is returned as is.

    Raises:
        ValidationError: Missing/empty id, wrong payload type or any field
            failing the model's validation.
    """
    spec = get_converter(kind)

    if isinstance(payload, spec.model):
        require_id(spec.kind, payload.id)
        return payload

    if isinstance(payload, BaseModel):
        data = payload.model_dump()
    elif isinstance(payload, Mapping):
        data = dict(payload)
    else:
        raise ValidationError(
            spec.kind.value,
            f"Payload must be a mapping or {spec.model.__name__}",
            expected_type=spec.model.__name__,
            received_value=payload,
            code=ErrorCode.INVALID_TYPE,
        )

    data = normalize_deprecated_fields(spec.kind, data, on_deprecated, warn=warn)
    require_id(spec.kind, data.get("id"))

    try:
        return spec.model.model_validate(data)
    except PydanticValidationError as exc:
        raise _from_pydantic(spec.kind, exc) from exc


# =============================================================================
# Encode / Decode
# =============================================================================

def encode(
    kind: Any,
    payload: Any,
    on_deprecated: Optional[DeprecationHandler] = None,
    *,
    warn: bool = True,
) -> NativeArgs:
    """Convert an OCF payload (mapping or model) into native ledger arguments."""
    spec = get_converter(kind)
    model = validate_payload(spec.kind, payload, on_deprecated, warn=warn)
    return spec.encoder(model)


def decode(kind: Any, native: Mapping[str, Any]) -> EntityPayload:
    """Convert native ledger arguments back into the kind's payload model.

    Raises:
        ValidationError: Missing/empty id, missing required field, unknown
            variant tag or malformed value.
    """
    spec = get_converter(kind)
    if not isinstance(native, Mapping):
        raise ValidationError(
            spec.kind.value,
            "Native arguments must be a mapping",
            received_value=native,
            code=ErrorCode.INVALID_TYPE,
        )
    require_id(spec.kind, native.get("id"))

    try:
        return spec.decoder(dict(native))
    except KeyError as exc:
        raise ValidationError(
            f"{spec.kind.value}.{exc.args[0]}",
            "Required field is missing",
            code=ErrorCode.REQUIRED_FIELD_MISSING,
        ) from exc
    except (TypeError, AttributeError) as exc:
        raise ValidationError(
            spec.kind.value,
            f"Malformed native arguments: {exc}",
            code=ErrorCode.INVALID_TYPE,
        ) from exc
    except PydanticValidationError as exc:
        raise _from_pydantic(spec.kind, exc) from exc
