"""Encoders and decoders for cap table transactions."""

from typing import Any, Dict

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
    TransactionPayload,
    WarrantIssuancePayload,
)
from .primitives import (
    EnumCodec,
    as_list,
    date_to_ledger,
    decimal_to_ledger,
    ledger_to_date,
    ledger_to_decimal,
    ledger_to_monetary,
    ledger_to_shares_authorized,
    monetary_to_ledger,
    optional,
    shares_authorized_to_ledger,
)

NativeArgs = Dict[str, Any]


STOCK_ISSUANCE_TYPE = EnumCodec(
    "OcfStockIssuance",
    ["RSA", "FOUNDERS_STOCK"],
    overrides={"RSA": "OcfStockIssuanceRSA", "FOUNDERS_STOCK": "OcfStockIssuanceFounders"},
)
CONVERTIBLE_TYPE = EnumCodec(
    "OcfConvertible",
    ["NOTE", "SAFE", "CONVERTIBLE_SECURITY"],
    overrides={"CONVERTIBLE_SECURITY": "OcfConvertibleSecurity"},
)
COMPENSATION_TYPE = EnumCodec(
    "OcfCompensationType",
    ["OPTION_ISO", "OPTION_NSO", "OPTION", "RSU", "CSAR", "SSAR"],
    overrides={
        "OPTION_ISO": "OcfCompensationTypeOptionISO",
        "OPTION_NSO": "OcfCompensationTypeOptionNSO",
        "RSU": "OcfCompensationTypeRSU",
        "CSAR": "OcfCompensationTypeCSAR",
        "SSAR": "OcfCompensationTypeSSAR",
    },
)


# =============================================================================
# Common Fields
# =============================================================================

def _base_to_ledger(payload: TransactionPayload) -> NativeArgs:
    native = {
        "id": payload.id,
        "date": date_to_ledger(payload.date),
        "comments": list(payload.comments),
    }
    security_id = getattr(payload, "security_id", None)
    if security_id is not None:
        native["security_id"] = security_id
    return native


def _base_from_ledger(native: NativeArgs, kind: str, with_security: bool = True) -> NativeArgs:
    fields = {
        "id": native["id"],
        "date": ledger_to_date(native["date"], f"{kind}.date"),
        "comments": as_list(native.get("comments")),
    }
    if with_security:
        fields["security_id"] = native["security_id"]
    return fields


def _opt_date(native: NativeArgs, key: str, kind: str):
    return optional(native.get(key), lambda v: ledger_to_date(v, f"{kind}.{key}"))


def _opt_decimal(native: NativeArgs, key: str, kind: str):
    return optional(native.get(key), lambda v: ledger_to_decimal(v, f"{kind}.{key}"))


def _opt_monetary(native: NativeArgs, key: str, kind: str):
    return optional(native.get(key), lambda v: ledger_to_monetary(v, f"{kind}.{key}"))


# =============================================================================
# Issuances
# =============================================================================

def encode_stock_issuance(payload: StockIssuancePayload) -> NativeArgs:
    return {
        **_base_to_ledger(payload),
        "custom_id": payload.custom_id,
        "stakeholder_id": payload.stakeholder_id,
        "stock_class_id": payload.stock_class_id,
        "share_price": monetary_to_ledger(payload.share_price),
        "quantity": decimal_to_ledger(payload.quantity),
        "stock_plan_id": payload.stock_plan_id,
        "vesting_terms_id": payload.vesting_terms_id,
        "board_approval_date": optional(payload.board_approval_date, date_to_ledger),
        "consideration_text": payload.consideration_text,
        "issuance_type": STOCK_ISSUANCE_TYPE.encode_optional(
            payload.issuance_type, "stock_issuance.issuance_type"
        ),
        "stock_legend_ids": list(payload.stock_legend_ids),
    }


def decode_stock_issuance(native: NativeArgs) -> StockIssuancePayload:
    k = "stock_issuance"
    return StockIssuancePayload(
        **_base_from_ledger(native, k),
        custom_id=native["custom_id"],
        stakeholder_id=native["stakeholder_id"],
        stock_class_id=native["stock_class_id"],
        share_price=ledger_to_monetary(native["share_price"], f"{k}.share_price"),
        quantity=ledger_to_decimal(native["quantity"], f"{k}.quantity"),
        stock_plan_id=native.get("stock_plan_id"),
        vesting_terms_id=native.get("vesting_terms_id"),
        board_approval_date=_opt_date(native, "board_approval_date", k),
        consideration_text=native.get("consideration_text"),
        issuance_type=STOCK_ISSUANCE_TYPE.decode_optional(
            native.get("issuance_type"), f"{k}.issuance_type"
        ),
        stock_legend_ids=as_list(native.get("stock_legend_ids")),
    )


def encode_convertible_issuance(payload: ConvertibleIssuancePayload) -> NativeArgs:
    return {
        **_base_to_ledger(payload),
        "custom_id": payload.custom_id,
        "stakeholder_id": payload.stakeholder_id,
        "investment_amount": monetary_to_ledger(payload.investment_amount),
        "convertible_type": CONVERTIBLE_TYPE.encode(
            payload.convertible_type, "convertible_issuance.convertible_type"
        ),
        "seniority": payload.seniority,
        "board_approval_date": optional(payload.board_approval_date, date_to_ledger),
        "pro_rata": optional(payload.pro_rata, decimal_to_ledger),
        "consideration_text": payload.consideration_text,
    }


def decode_convertible_issuance(native: NativeArgs) -> ConvertibleIssuancePayload:
    k = "convertible_issuance"
    return ConvertibleIssuancePayload(
        **_base_from_ledger(native, k),
        custom_id=native["custom_id"],
        stakeholder_id=native["stakeholder_id"],
        investment_amount=ledger_to_monetary(native["investment_amount"], f"{k}.investment_amount"),
        convertible_type=CONVERTIBLE_TYPE.decode(native["convertible_type"], f"{k}.convertible_type"),
        seniority=native["seniority"],
        board_approval_date=_opt_date(native, "board_approval_date", k),
        pro_rata=_opt_decimal(native, "pro_rata", k),
        consideration_text=native.get("consideration_text"),
    )


def encode_warrant_issuance(payload: WarrantIssuancePayload) -> NativeArgs:
    return {
        **_base_to_ledger(payload),
        "custom_id": payload.custom_id,
        "stakeholder_id": payload.stakeholder_id,
        "purchase_price": monetary_to_ledger(payload.purchase_price),
        "quantity": optional(payload.quantity, decimal_to_ledger),
        "exercise_price": optional(payload.exercise_price, monetary_to_ledger),
        "warrant_expiration_date": optional(payload.warrant_expiration_date, date_to_ledger),
        "vesting_terms_id": payload.vesting_terms_id,
    }


def decode_warrant_issuance(native: NativeArgs) -> WarrantIssuancePayload:
    k = "warrant_issuance"
    return WarrantIssuancePayload(
        **_base_from_ledger(native, k),
        custom_id=native["custom_id"],
        stakeholder_id=native["stakeholder_id"],
        purchase_price=ledger_to_monetary(native["purchase_price"], f"{k}.purchase_price"),
        quantity=_opt_decimal(native, "quantity", k),
        exercise_price=_opt_monetary(native, "exercise_price", k),
        warrant_expiration_date=_opt_date(native, "warrant_expiration_date", k),
        vesting_terms_id=native.get("vesting_terms_id"),
    )


def encode_equity_compensation_issuance(payload: EquityCompensationIssuancePayload) -> NativeArgs:
    return {
        **_base_to_ledger(payload),
        "custom_id": payload.custom_id,
        "stakeholder_id": payload.stakeholder_id,
        "compensation_type": COMPENSATION_TYPE.encode(
            payload.compensation_type, "equity_compensation_issuance.compensation_type"
        ),
        "quantity": decimal_to_ledger(payload.quantity),
        "exercise_price": optional(payload.exercise_price, monetary_to_ledger),
        "base_price": optional(payload.base_price, monetary_to_ledger),
        "stock_plan_id": payload.stock_plan_id,
        "stock_class_id": payload.stock_class_id,
        "vesting_terms_id": payload.vesting_terms_id,
        "expiration_date": optional(payload.expiration_date, date_to_ledger),
        "early_exercisable": payload.early_exercisable,
    }


def decode_equity_compensation_issuance(native: NativeArgs) -> EquityCompensationIssuancePayload:
    k = "equity_compensation_issuance"
    return EquityCompensationIssuancePayload(
        **_base_from_ledger(native, k),
        custom_id=native["custom_id"],
        stakeholder_id=native["stakeholder_id"],
        compensation_type=COMPENSATION_TYPE.decode(
            native["compensation_type"], f"{k}.compensation_type"
        ),
        quantity=ledger_to_decimal(native["quantity"], f"{k}.quantity"),
        exercise_price=_opt_monetary(native, "exercise_price", k),
        base_price=_opt_monetary(native, "base_price", k),
        stock_plan_id=native.get("stock_plan_id"),
        stock_class_id=native.get("stock_class_id"),
        vesting_terms_id=native.get("vesting_terms_id"),
        expiration_date=_opt_date(native, "expiration_date", k),
        early_exercisable=native.get("early_exercisable"),
    )


# =============================================================================
# Security Lifecycle
# =============================================================================

def encode_stock_transfer(payload: StockTransferPayload) -> NativeArgs:
    return {
        **_base_to_ledger(payload),
        "quantity": decimal_to_ledger(payload.quantity),
        "resulting_security_ids": list(payload.resulting_security_ids),
        "balance_security_id": payload.balance_security_id,
        "consideration_text": payload.consideration_text,
    }


def decode_stock_transfer(native: NativeArgs) -> StockTransferPayload:
    k = "stock_transfer"
    return StockTransferPayload(
        **_base_from_ledger(native, k),
        quantity=ledger_to_decimal(native["quantity"], f"{k}.quantity"),
        resulting_security_ids=list(native["resulting_security_ids"]),
        balance_security_id=native.get("balance_security_id"),
        consideration_text=native.get("consideration_text"),
    )


def encode_stock_cancellation(payload: StockCancellationPayload) -> NativeArgs:
    return {
        **_base_to_ledger(payload),
        "quantity": decimal_to_ledger(payload.quantity),
        "reason_text": payload.reason_text,
        "balance_security_id": payload.balance_security_id,
    }


def decode_stock_cancellation(native: NativeArgs) -> StockCancellationPayload:
    k = "stock_cancellation"
    return StockCancellationPayload(
        **_base_from_ledger(native, k),
        quantity=ledger_to_decimal(native["quantity"], f"{k}.quantity"),
        reason_text=native["reason_text"],
        balance_security_id=native.get("balance_security_id"),
    )


def encode_stock_repurchase(payload: StockRepurchasePayload) -> NativeArgs:
    return {
        **_base_to_ledger(payload),
        "quantity": decimal_to_ledger(payload.quantity),
        "price": monetary_to_ledger(payload.price),
        "balance_security_id": payload.balance_security_id,
        "consideration_text": payload.consideration_text,
    }


def decode_stock_repurchase(native: NativeArgs) -> StockRepurchasePayload:
    k = "stock_repurchase"
    return StockRepurchasePayload(
        **_base_from_ledger(native, k),
        quantity=ledger_to_decimal(native["quantity"], f"{k}.quantity"),
        price=ledger_to_monetary(native["price"], f"{k}.price"),
        balance_security_id=native.get("balance_security_id"),
        consideration_text=native.get("consideration_text"),
    )


def encode_equity_compensation_exercise(payload: EquityCompensationExercisePayload) -> NativeArgs:
    return {
        **_base_to_ledger(payload),
        "quantity": decimal_to_ledger(payload.quantity),
        "resulting_security_ids": list(payload.resulting_security_ids),
        "consideration_text": payload.consideration_text,
    }


def decode_equity_compensation_exercise(native: NativeArgs) -> EquityCompensationExercisePayload:
    k = "equity_compensation_exercise"
    return EquityCompensationExercisePayload(
        **_base_from_ledger(native, k),
        quantity=ledger_to_decimal(native["quantity"], f"{k}.quantity"),
        resulting_security_ids=as_list(native.get("resulting_security_ids")),
        consideration_text=native.get("consideration_text"),
    )


# =============================================================================
# Authorization Adjustments
# =============================================================================

def _approvals_to_ledger(payload: Any) -> NativeArgs:
    return {
        "board_approval_date": optional(payload.board_approval_date, date_to_ledger),
        "stockholder_approval_date": optional(payload.stockholder_approval_date, date_to_ledger),
    }


def _approvals_from_ledger(native: NativeArgs, kind: str) -> NativeArgs:
    return {
        "board_approval_date": _opt_date(native, "board_approval_date", kind),
        "stockholder_approval_date": _opt_date(native, "stockholder_approval_date", kind),
    }


def encode_stock_class_authorized_shares_adjustment(
    payload: StockClassAuthorizedSharesAdjustmentPayload,
) -> NativeArgs:
    return {
        **_base_to_ledger(payload),
        "stock_class_id": payload.stock_class_id,
        "new_shares_authorized": decimal_to_ledger(payload.new_shares_authorized),
        **_approvals_to_ledger(payload),
    }


def decode_stock_class_authorized_shares_adjustment(
    native: NativeArgs,
) -> StockClassAuthorizedSharesAdjustmentPayload:
    k = "stock_class_authorized_shares_adjustment"
    return StockClassAuthorizedSharesAdjustmentPayload(
        **_base_from_ledger(native, k, with_security=False),
        stock_class_id=native["stock_class_id"],
        new_shares_authorized=ledger_to_decimal(
            native["new_shares_authorized"], f"{k}.new_shares_authorized"
        ),
        **_approvals_from_ledger(native, k),
    )


def encode_issuer_authorized_shares_adjustment(
    payload: IssuerAuthorizedSharesAdjustmentPayload,
) -> NativeArgs:
    return {
        **_base_to_ledger(payload),
        "issuer_id": payload.issuer_id,
        "new_shares_authorized": shares_authorized_to_ledger(
            payload.new_shares_authorized, "issuer_authorized_shares_adjustment.new_shares_authorized"
        ),
        **_approvals_to_ledger(payload),
    }


def decode_issuer_authorized_shares_adjustment(
    native: NativeArgs,
) -> IssuerAuthorizedSharesAdjustmentPayload:
    k = "issuer_authorized_shares_adjustment"
    return IssuerAuthorizedSharesAdjustmentPayload(
        **_base_from_ledger(native, k, with_security=False),
        issuer_id=native["issuer_id"],
        new_shares_authorized=ledger_to_shares_authorized(
            native["new_shares_authorized"], f"{k}.new_shares_authorized"
        ),
        **_approvals_from_ledger(native, k),
    )


def encode_stock_plan_pool_adjustment(payload: StockPlanPoolAdjustmentPayload) -> NativeArgs:
    return {
        **_base_to_ledger(payload),
        "stock_plan_id": payload.stock_plan_id,
        "shares_reserved": decimal_to_ledger(payload.shares_reserved),
        **_approvals_to_ledger(payload),
    }


def decode_stock_plan_pool_adjustment(native: NativeArgs) -> StockPlanPoolAdjustmentPayload:
    k = "stock_plan_pool_adjustment"
    return StockPlanPoolAdjustmentPayload(
        **_base_from_ledger(native, k, with_security=False),
        stock_plan_id=native["stock_plan_id"],
        shares_reserved=ledger_to_decimal(native["shares_reserved"], f"{k}.shares_reserved"),
        **_approvals_from_ledger(native, k),
    )
