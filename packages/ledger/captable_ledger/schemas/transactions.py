"""Cap table transaction payloads.

Transactions are dated records of what happened to securities or to the
share authorizations of the issuer, its stock classes and plans.
"""

import datetime
from decimal import Decimal
from typing import List, Literal, Optional
from pydantic import Field

from .base import Monetary, ShareCount
from .objects import EntityPayload, SharesAuthorized


# =============================================================================
# Transaction Base Classes
# =============================================================================

class TransactionPayload(EntityPayload):
    """A dated event."""

    date: datetime.date


class SecurityTransactionPayload(TransactionPayload):
    """A dated event affecting one security (identified by ``security_id``)."""

    security_id: str


# =============================================================================
# Issuances
# =============================================================================

class StockIssuancePayload(SecurityTransactionPayload):
    """Shares of a stock class issued to a stakeholder."""

    custom_id: str
    stakeholder_id: str
    stock_class_id: str
    share_price: Monetary
    quantity: ShareCount
    stock_plan_id: Optional[str] = None
    vesting_terms_id: Optional[str] = None
    board_approval_date: Optional[datetime.date] = None
    consideration_text: Optional[str] = None
    issuance_type: Optional[Literal["RSA", "FOUNDERS_STOCK"]] = None
    stock_legend_ids: List[str] = Field(default_factory=list)


class ConvertibleIssuancePayload(SecurityTransactionPayload):
    """A SAFE, note or other convertible instrument."""

    custom_id: str
    stakeholder_id: str
    investment_amount: Monetary
    convertible_type: Literal["NOTE", "SAFE", "CONVERTIBLE_SECURITY"]
    seniority: int = Field(ge=0)
    board_approval_date: Optional[datetime.date] = None
    pro_rata: Optional[Decimal] = None
    consideration_text: Optional[str] = None


class WarrantIssuancePayload(SecurityTransactionPayload):
    custom_id: str
    stakeholder_id: str
    purchase_price: Monetary
    quantity: Optional[ShareCount] = None
    exercise_price: Optional[Monetary] = None
    warrant_expiration_date: Optional[datetime.date] = None
    vesting_terms_id: Optional[str] = None


CompensationType = Literal["OPTION_ISO", "OPTION_NSO", "OPTION", "RSU", "CSAR", "SSAR"]


class EquityCompensationIssuancePayload(SecurityTransactionPayload):
    """An option, RSU or SAR grant.

    Older OCF files carry ``option_grant_type`` (NSO/ISO/INTL); it is
    normalized into ``compensation_type`` before validation.
    """

    custom_id: str
    stakeholder_id: str
    compensation_type: CompensationType
    quantity: ShareCount
    exercise_price: Optional[Monetary] = None
    base_price: Optional[Monetary] = None
    stock_plan_id: Optional[str] = None
    stock_class_id: Optional[str] = None
    vesting_terms_id: Optional[str] = None
    expiration_date: Optional[datetime.date] = None
    early_exercisable: Optional[bool] = None


# =============================================================================
# Security Lifecycle
# =============================================================================

class StockTransferPayload(SecurityTransactionPayload):
    quantity: ShareCount
    resulting_security_ids: List[str] = Field(min_length=1)
    balance_security_id: Optional[str] = None
    consideration_text: Optional[str] = None


class StockCancellationPayload(SecurityTransactionPayload):
    quantity: ShareCount
    reason_text: str
    balance_security_id: Optional[str] = None


class StockRepurchasePayload(SecurityTransactionPayload):
    quantity: ShareCount
    price: Monetary
    balance_security_id: Optional[str] = None
    consideration_text: Optional[str] = None


class EquityCompensationExercisePayload(SecurityTransactionPayload):
    quantity: ShareCount
    resulting_security_ids: List[str] = Field(default_factory=list)
    consideration_text: Optional[str] = None


# =============================================================================
# Authorization Adjustments
# =============================================================================

class StockClassAuthorizedSharesAdjustmentPayload(TransactionPayload):
    stock_class_id: str
    new_shares_authorized: ShareCount
    board_approval_date: Optional[datetime.date] = None
    stockholder_approval_date: Optional[datetime.date] = None


class IssuerAuthorizedSharesAdjustmentPayload(TransactionPayload):
    issuer_id: str
    new_shares_authorized: SharesAuthorized
    board_approval_date: Optional[datetime.date] = None
    stockholder_approval_date: Optional[datetime.date] = None


class StockPlanPoolAdjustmentPayload(TransactionPayload):
    stock_plan_id: str
    shares_reserved: ShareCount
    board_approval_date: Optional[datetime.date] = None
    stockholder_approval_date: Optional[datetime.date] = None
