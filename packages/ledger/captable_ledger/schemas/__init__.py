"""Cap table ledger schemas.

This package contains all Pydantic models used by the batch compiler:
- Base types and shared value objects
- Entity payloads (objects and transactions, OCF-shaped)
- Ledger-facing shapes (proofs, value resources, events, compiled requests)
- Batch handles, operations and results
- Payment contexts

Usage:
    from captable_ledger.schemas import (
        AggregateHandle, BatchResult, StakeholderPayload, DisclosureProof
    )
"""

# Base types
from .base import (
    DomainModel,
    FrozenModel,
    ShareCount,
    Amount,
    NaturalKey,
    ResourceId,
    PartyId,
    Monetary,
    Name,
    Address,
    Email,
    Phone,
    TaxId,
)

# Objects
from .objects import (
    EntityPayload,
    IssuerPayload,
    ContactInfo,
    StakeholderPayload,
    StockClassPayload,
    StockPlanPayload,
    StockLegendTemplatePayload,
    VestingTrigger,
    VestingCondition,
    VestingTermsPayload,
    ValuationPayload,
    ObjectReference,
    DocumentPayload,
)

# Transactions
from .transactions import (
    TransactionPayload,
    SecurityTransactionPayload,
    StockIssuancePayload,
    ConvertibleIssuancePayload,
    WarrantIssuancePayload,
    EquityCompensationIssuancePayload,
    StockTransferPayload,
    StockCancellationPayload,
    StockRepurchasePayload,
    EquityCompensationExercisePayload,
    StockClassAuthorizedSharesAdjustmentPayload,
    IssuerAuthorizedSharesAdjustmentPayload,
    StockPlanPoolAdjustmentPayload,
)

# Ledger
from .ledger import (
    DisclosureProof,
    ValueResource,
    CreationEvent,
    ExercisedEvent,
    ExecutionResult,
    ExerciseCommand,
    CompiledRequest,
)

# Batch
from .batch import (
    AggregateHandle,
    Operation,
    BatchResult,
)

# Payments
from .payment import (
    PaymentContext,
    FundedPaymentContext,
    PaymentContextResult,
    CoinSelection,
)

__all__ = [
    # Base types
    "DomainModel",
    "FrozenModel",
    "ShareCount",
    "Amount",
    "NaturalKey",
    "ResourceId",
    "PartyId",
    "Monetary",
    "Name",
    "Address",
    "Email",
    "Phone",
    "TaxId",
    # Objects
    "EntityPayload",
    "IssuerPayload",
    "ContactInfo",
    "StakeholderPayload",
    "StockClassPayload",
    "StockPlanPayload",
    "StockLegendTemplatePayload",
    "VestingTrigger",
    "VestingCondition",
    "VestingTermsPayload",
    "ValuationPayload",
    "ObjectReference",
    "DocumentPayload",
    # Transactions
    "TransactionPayload",
    "SecurityTransactionPayload",
    "StockIssuancePayload",
    "ConvertibleIssuancePayload",
    "WarrantIssuancePayload",
    "EquityCompensationIssuancePayload",
    "StockTransferPayload",
    "StockCancellationPayload",
    "StockRepurchasePayload",
    "EquityCompensationExercisePayload",
    "StockClassAuthorizedSharesAdjustmentPayload",
    "IssuerAuthorizedSharesAdjustmentPayload",
    "StockPlanPoolAdjustmentPayload",
    # Ledger
    "DisclosureProof",
    "ValueResource",
    "CreationEvent",
    "ExercisedEvent",
    "ExecutionResult",
    "ExerciseCommand",
    "CompiledRequest",
    # Batch
    "AggregateHandle",
    "Operation",
    "BatchResult",
    # Payments
    "PaymentContext",
    "FundedPaymentContext",
    "PaymentContextResult",
    "CoinSelection",
]
