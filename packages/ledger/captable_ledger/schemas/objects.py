"""Cap table object payloads (non-transactional OCF objects).

These are the long-lived entities of a cap table: the issuer, stakeholders,
stock classes and plans, templates, vesting terms, valuations and documents.
Field names follow the Open Cap Format (snake_case) so payloads exported from
other OCF tools validate unchanged.
"""

import datetime
from datetime import date
from decimal import Decimal
from typing import List, Literal, Optional, Union
from pydantic import Field

from .base import (
    Address,
    Comments,
    DomainModel,
    Email,
    Monetary,
    Name,
    NaturalKey,
    Phone,
    ShareCount,
    TaxId,
)


# =============================================================================
# Entity Base Class
# =============================================================================

class EntityPayload(DomainModel):
    """Base class for all entity payloads.

    ``id`` is the natural key. It is declared as a plain string so that an
    empty id reaches the package's own validation (which reports the field
    path) rather than failing inside Pydantic.
    """

    id: NaturalKey
    comments: Comments = Field(default_factory=list)


SharesAuthorized = Union[Literal["UNLIMITED", "NOT_APPLICABLE"], Decimal]

StakeholderRelationship = Literal[
    "EMPLOYEE", "ADVISOR", "INVESTOR", "FOUNDER", "BOARD_MEMBER", "OFFICER", "OTHER"
]

StakeholderStatus = Literal[
    "ACTIVE",
    "LEAVE_OF_ABSENCE",
    "TERMINATION_VOLUNTARY_OTHER",
    "TERMINATION_VOLUNTARY_GOOD_CAUSE",
    "TERMINATION_VOLUNTARY_RETIREMENT",
    "TERMINATION_INVOLUNTARY_OTHER",
    "TERMINATION_INVOLUNTARY_DEATH",
    "TERMINATION_INVOLUNTARY_DISABILITY",
    "TERMINATION_INVOLUNTARY_WITH_CAUSE",
]


# =============================================================================
# Issuer
# =============================================================================

class IssuerPayload(EntityPayload):
    """The company whose capitalization is recorded.

    The issuer is created together with the cap table itself, so batches may
    only edit it.
    """

    legal_name: str
    formation_date: date
    country_of_formation: str
    dba: Optional[str] = None
    country_subdivision_of_formation: Optional[str] = None
    tax_ids: List[TaxId] = Field(default_factory=list)
    email: Optional[Email] = None
    phone: Optional[Phone] = None
    address: Optional[Address] = None
    initial_shares_authorized: Optional[SharesAuthorized] = None


# =============================================================================
# Stakeholder
# =============================================================================

class ContactInfo(DomainModel):
    name: Name
    phone_numbers: List[Phone] = Field(default_factory=list)
    emails: List[Email] = Field(default_factory=list)


class StakeholderPayload(EntityPayload):
    """An individual or institution holding (or entitled to) securities."""

    name: Name
    stakeholder_type: Literal["INDIVIDUAL", "INSTITUTION"]
    issuer_assigned_id: Optional[str] = None
    primary_contact: Optional[ContactInfo] = None
    addresses: List[Address] = Field(default_factory=list)
    tax_ids: List[TaxId] = Field(default_factory=list)
    current_relationships: List[StakeholderRelationship] = Field(default_factory=list)
    current_status: Optional[StakeholderStatus] = None


# =============================================================================
# Stock Class
# =============================================================================

class StockClassPayload(EntityPayload):
    """A class of stock with its authorization and economic terms.

    Example:
        StockClassPayload(
            id="sc-common",
            name="Common Stock",
            class_type="COMMON",
            default_id_prefix="CS-",
            initial_shares_authorized=Decimal("10000000"),
            votes_per_share=Decimal("1"),
            seniority=Decimal("1"),
        )
    """

    name: str
    class_type: Literal["COMMON", "PREFERRED"]
    default_id_prefix: str
    initial_shares_authorized: SharesAuthorized
    votes_per_share: Decimal = Field(ge=0)
    seniority: Decimal = Field(ge=0)
    board_approval_date: Optional[date] = None
    stockholder_approval_date: Optional[date] = None
    par_value: Optional[Monetary] = None
    price_per_share: Optional[Monetary] = None
    liquidation_preference_multiple: Optional[Decimal] = None
    participation_cap_multiple: Optional[Decimal] = None


# =============================================================================
# Stock Plan
# =============================================================================

class StockPlanPayload(EntityPayload):
    """An equity incentive plan reserving shares of one or more classes.

    Older OCF files carry a singular ``stock_class_id``; it is normalized into
    ``stock_class_ids`` before validation (see conversion.normalization).
    """

    plan_name: str
    initial_shares_reserved: ShareCount
    stock_class_ids: List[str] = Field(default_factory=list)
    board_approval_date: Optional[date] = None
    stockholder_approval_date: Optional[date] = None
    default_cancellation_behavior: Optional[
        Literal["RETIRE", "RETURN_TO_POOL", "HOLD_AS_CAPITAL_STOCK", "DEFINED_PER_PLAN_SECURITY"]
    ] = None


# =============================================================================
# Templates, Terms and Valuations
# =============================================================================

class StockLegendTemplatePayload(EntityPayload):
    name: str
    text: str


class VestingTrigger(DomainModel):
    """What makes a vesting condition fire."""

    type: Literal[
        "VESTING_START_DATE",
        "VESTING_SCHEDULE_ABSOLUTE",
        "VESTING_SCHEDULE_RELATIVE",
        "VESTING_EVENT",
    ]
    date: Optional[datetime.date] = None
    period_length: Optional[int] = Field(default=None, ge=1)
    period_type: Optional[Literal["DAYS", "MONTHS", "YEARS"]] = None
    occurrences: Optional[int] = Field(default=None, ge=1)
    relative_to_condition_id: Optional[str] = None


class VestingCondition(DomainModel):
    id: str
    trigger: VestingTrigger
    description: Optional[str] = None
    quantity: Optional[ShareCount] = None
    next_condition_ids: List[str] = Field(default_factory=list)


class VestingTermsPayload(EntityPayload):
    name: str
    description: str
    allocation_type: Literal[
        "CUMULATIVE_ROUNDING",
        "CUMULATIVE_ROUND_DOWN",
        "FRONT_LOADED",
        "BACK_LOADED",
        "FRONT_LOADED_TO_SINGLE_TRANCHE",
        "BACK_LOADED_TO_SINGLE_TRANCHE",
        "FRACTIONAL",
    ]
    vesting_conditions: List[VestingCondition] = Field(min_length=1)


class ValuationPayload(EntityPayload):
    """A 409A (or similar) valuation of one stock class."""

    stock_class_id: str
    price_per_share: Monetary
    effective_date: date
    valuation_type: Literal["409A"] = "409A"
    provider: Optional[str] = None
    board_approval_date: Optional[date] = None
    stockholder_approval_date: Optional[date] = None


# =============================================================================
# Document
# =============================================================================

class ObjectReference(DomainModel):
    object_type: str
    object_id: str


class DocumentPayload(EntityPayload):
    """A document (by hash and location) related to other cap table objects."""

    md5: str
    path: Optional[str] = None
    uri: Optional[str] = None
    related_objects: List[ObjectReference] = Field(default_factory=list)
