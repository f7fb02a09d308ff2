"""Base classes and type system for cap table ledger models.

This module provides the foundational types, validators, and base classes
used throughout the ledger schema system.
"""

from decimal import Decimal
from typing import Annotated, List, Literal, Optional
from pydantic import AfterValidator, BaseModel, ConfigDict, Field

# =============================================================================
# Base Model
# =============================================================================

class DomainModel(BaseModel):
    """Base class for all ledger models.

    Provides common configuration for all Pydantic models in the package:
    - Validation on assignment for runtime safety
    - Support for Decimal and date types
    - Enum value serialization
    """

    model_config = ConfigDict(
        frozen=False,
        validate_assignment=True,
        use_enum_values=True,
        arbitrary_types_allowed=True,
    )


class FrozenModel(DomainModel):
    """Immutable variant for handles and compiled artifacts."""

    model_config = ConfigDict(frozen=True)


# =============================================================================
# Type Aliases - Numeric
# =============================================================================

ShareCount = Annotated[
    Decimal,
    Field(ge=0, description="Number of shares (non-negative)")
]

Amount = Annotated[
    Decimal,
    Field(description="Decimal quantity as carried on the ledger")
]


# =============================================================================
# Type Aliases - Identifiers
# =============================================================================

NaturalKey = Annotated[
    str,
    Field(description="Caller-chosen entity id, unique within one cap table")
]

ResourceId = Annotated[
    str,
    Field(description="Opaque ledger identity of one resource version")
]

PartyId = Annotated[
    str,
    Field(description="Ledger principal (party) identifier")
]


# =============================================================================
# Shared Value Objects
# =============================================================================

def _drop_blank_comments(comments: List[str]) -> List[str]:
    return [c for c in comments if c.strip()]


Comments = Annotated[List[str], AfterValidator(_drop_blank_comments)]


class Monetary(DomainModel):
    """Monetary amount with ISO 4217 currency code."""

    amount: Decimal
    currency: str = Field(min_length=3, max_length=3)


class Name(DomainModel):
    legal_name: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class Address(DomainModel):
    address_type: Literal["LEGAL", "CONTACT", "OTHER"]
    country: str
    street_suite: Optional[str] = None
    city: Optional[str] = None
    country_subdivision: Optional[str] = None
    postal_code: Optional[str] = None


class Email(DomainModel):
    email_type: Literal["PERSONAL", "BUSINESS", "OTHER"]
    email_address: str


class Phone(DomainModel):
    phone_type: Literal["HOME", "MOBILE", "BUSINESS", "OTHER"]
    phone_number: str


class TaxId(DomainModel):
    country: str
    tax_id: str


# =============================================================================
# ID Examples and Conventions
# =============================================================================
#
# Natural keys (entity ids) are chosen by the caller:
#   - "sh-founder-alice" - a stakeholder
#   - "sc-common" - a stock class
#   - "iss-0001" - a stock issuance
#
# Resource ids are opaque and change on every mutation of the cap table:
#   - "00a1b2...::1220f3..." - one version of the cap table resource
#
# =============================================================================
