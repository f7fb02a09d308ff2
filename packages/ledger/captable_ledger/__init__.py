"""Cap table ledger client.

Compiles cap table mutations (create/edit/delete of OCF entities) into one
atomic update of a versioned ledger resource, and builds the payment
contexts such updates may need.

Usage:
    from captable_ledger import CapTableBatch, AggregateHandle

    handle = AggregateHandle(resource_id=cid, resource_kind="Fairmint.OpenCapTable.CapTable:CapTable")
    result = await CapTableBatch(client, handle, act_as=[issuer]).create("stakeholder", data).execute()
"""

__version__ = "0.1.0"

# Batch
from .batch import (
    CapTableBatch,
    BatchSummary,
    build_update_command,
    summarize,
)

# Chain tracking and disclosures
from .chain import extract_update_result, find_created_event, resolve_proof
from .disclosure import assemble_disclosures, filter_valid_proofs

# Cap table state
from .state import CapTableState, find_cap_table_state, get_cap_table_state

# Payments
from .payments import (
    OptionalLookup,
    PaymentContextBuilder,
    lookup_optional,
    select_value_resources,
)

# Conversion
from .conversion import (
    EntityKind,
    encode,
    decode,
    normalize_deprecated_fields,
    check_deprecated_fields,
    get_deprecated_field_mappings,
    DeprecationNotice,
)

# Client, config and errors
from .client import LedgerClient
from .config import LedgerSettings, load_settings
from .errors import (
    ErrorCode,
    LedgerError,
    ValidationError,
    EmptyBatchError,
    ConflictError,
    NotFoundError,
    InsufficientResourceError,
    ProtocolError,
    BatchResultMismatchError,
)

# Schemas
from .schemas import (
    AggregateHandle,
    BatchResult,
    Operation,
    DisclosureProof,
    ValueResource,
    CreationEvent,
    ExercisedEvent,
    ExecutionResult,
    CompiledRequest,
    PaymentContext,
    FundedPaymentContext,
    PaymentContextResult,
    CoinSelection,
)

__all__ = [
    "__version__",
    # Batch
    "CapTableBatch",
    "BatchSummary",
    "build_update_command",
    "summarize",
    # Chain tracking and disclosures
    "extract_update_result",
    "find_created_event",
    "resolve_proof",
    "assemble_disclosures",
    "filter_valid_proofs",
    # Cap table state
    "CapTableState",
    "get_cap_table_state",
    "find_cap_table_state",
    # Payments
    "OptionalLookup",
    "PaymentContextBuilder",
    "lookup_optional",
    "select_value_resources",
    # Conversion
    "EntityKind",
    "encode",
    "decode",
    "normalize_deprecated_fields",
    "check_deprecated_fields",
    "get_deprecated_field_mappings",
    "DeprecationNotice",
    # Client, config and errors
    "LedgerClient",
    "LedgerSettings",
    "load_settings",
    "ErrorCode",
    "LedgerError",
    "ValidationError",
    "EmptyBatchError",
    "ConflictError",
    "NotFoundError",
    "InsufficientResourceError",
    "ProtocolError",
    "BatchResultMismatchError",
    # Schemas
    "AggregateHandle",
    "BatchResult",
    "Operation",
    "DisclosureProof",
    "ValueResource",
    "CreationEvent",
    "ExercisedEvent",
    "ExecutionResult",
    "CompiledRequest",
    "PaymentContext",
    "FundedPaymentContext",
    "PaymentContextResult",
    "CoinSelection",
]
