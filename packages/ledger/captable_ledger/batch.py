"""Atomic batch updates of the cap table.

A ``CapTableBatch`` accumulates create/edit/delete operations against one
version of the cap table and submits them as a single exercise of the
update choice. The ledger applies all of them or none.

Example:
    batch = CapTableBatch(client, handle, act_as=[issuer_party])
    result = await (
        batch.create("stakeholder", stakeholder)
        .create("stock_class", common)
        .edit("issuer", issuer)
        .execute()
    )
    handle = result.updated_aggregate  # the only valid target for the next batch

A builder belongs to one caller and one logical transaction; it is not safe
to share across concurrent tasks. Once executed, the version it targeted is
consumed and the builder should be discarded.
"""

import logging
import uuid
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union
from pydantic import Field

from .chain import extract_update_result, find_created_event, resolve_proof
from .client import LedgerClient
from .config import LedgerSettings
from .conversion.normalization import DeprecationHandler
from .conversion.primitives import find_unsafe_value
from .conversion.registry import EntityKind, encode, get_converter, payload_id, require_id
from .disclosure import assemble_disclosures
from .errors import (
    BatchResultMismatchError,
    EmptyBatchError,
    ErrorCode,
    ProtocolError,
    ValidationError,
)
from .schemas.base import FrozenModel
from .schemas.batch import AggregateHandle, BatchResult, Operation
from .schemas.ledger import CompiledRequest, DisclosureProof, ExerciseCommand

logger = logging.getLogger(__name__)

_ARGUMENT_KEYS = {"create": "creates", "edit": "edits", "delete": "deletes"}

_FORBIDDEN_ISSUER_ACTIONS = {
    "create": "Cannot create issuer via batch - issuer is created together with the cap table",
    "delete": "Cannot delete issuer - issuer must always exist for the cap table",
}


# =============================================================================
# Summary
# =============================================================================

class BatchSummary(FrozenModel):
    """Operation counts and kinds, for logs and error context."""

    creates: int = 0
    edits: int = 0
    deletes: int = 0
    kinds: List[str] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return self.creates + self.edits + self.deletes

    def formatted(self) -> str:
        return (
            f"(creates={self.creates}, edits={self.edits}, deletes={self.deletes}, "
            f"kinds={', '.join(self.kinds) or '-'})"
        )


def summarize(operations: Sequence[Operation]) -> BatchSummary:
    kinds: List[str] = []
    for op in operations:
        if op.kind not in kinds:
            kinds.append(op.kind)
    return BatchSummary(
        creates=sum(1 for op in operations if op.action == "create"),
        edits=sum(1 for op in operations if op.action == "edit"),
        deletes=sum(1 for op in operations if op.action == "delete"),
        kinds=kinds,
    )


# =============================================================================
# Compilation
# =============================================================================

def _require_parties(act_as: Iterable[str]) -> List[str]:
    if isinstance(act_as, str):
        act_as = [act_as]
    parties = [p for p in act_as if p]
    if not parties:
        raise ValidationError(
            "act_as",
            "At least one acting party is required",
            expected_type="List[str]",
            received_value=act_as,
        )
    return parties


def _encode_operation(
    op: Operation,
    settings: LedgerSettings,
    on_deprecated: Optional[DeprecationHandler],
) -> Dict[str, Any]:
    spec = get_converter(op.kind)
    if op.action == "delete":
        return {"tag": spec.tag("delete"), "value": op.id}

    native = encode(spec.kind, op.payload, on_deprecated, warn=settings.warn_on_deprecated_fields)
    unsafe = find_unsafe_value(native)
    if unsafe is not None:
        raise ValidationError(
            f"{spec.kind.value}.{unsafe}",
            f"Encoded {spec.kind.value} '{op.id}' is not JSON-safe",
            code=ErrorCode.INVALID_TYPE,
        )
    return {"tag": spec.tag(op.action), "value": native}


def build_update_command(
    aggregate: AggregateHandle,
    operations: Sequence[Operation],
    *,
    act_as: Iterable[str],
    read_as: Optional[Iterable[str]] = None,
    extra_disclosures: Optional[Iterable[DisclosureProof]] = None,
    settings: Optional[LedgerSettings] = None,
    on_deprecated: Optional[DeprecationHandler] = None,
) -> CompiledRequest:
    """Compile operations into one request against ``aggregate``.

    Args:
        aggregate: Handle on the cap table version to consume.
        operations: Ordered operations; must not be empty.
        act_as: Submitting parties (at least one).
        read_as: Additional reading parties.
        extra_disclosures: Proofs for further referenced resources, e.g. a
            payment context's ``disclosed_contracts``.
        settings: Choice name, command id prefix and deprecation logging.
        on_deprecated: Handler for deprecated-field notices.

    Returns:
        CompiledRequest with a fresh command id and filtered disclosures.

    Raises:
        EmptyBatchError: No operations.
        ValidationError: A payload fails encoding, or no acting party.
        ProtocolError: A disclosure has a blob but no resource id.
    """
    if not operations:
        raise EmptyBatchError()
    settings = settings or LedgerSettings()
    parties = _require_parties(act_as)

    argument: Dict[str, List[Dict[str, Any]]] = {key: [] for key in _ARGUMENT_KEYS.values()}
    for op in operations:
        argument[_ARGUMENT_KEYS[op.action]].append(_encode_operation(op, settings, on_deprecated))

    command = ExerciseCommand(
        resource_kind=aggregate.resource_kind,
        resource_id=aggregate.resource_id,
        choice=settings.update_choice,
        argument=argument,
    )
    return CompiledRequest(
        command_id=f"{settings.command_id_prefix}-{uuid.uuid4().hex}",
        command=command,
        disclosed_contracts=assemble_disclosures(aggregate.to_proof(), extra_disclosures or []),
        act_as=parties,
        read_as=list(read_as or []),
    )


# =============================================================================
# Builder
# =============================================================================

class CapTableBatch:
    """Fluent accumulator of cap table operations.

    ``create``, ``edit`` and ``delete`` validate immediately and return the
    builder. Nothing touches the network until ``execute()``.
    """

    def __init__(
        self,
        client: Optional[LedgerClient],
        aggregate: Union[AggregateHandle, str],
        act_as: Iterable[str],
        read_as: Optional[Iterable[str]] = None,
        extra_disclosures: Optional[Iterable[DisclosureProof]] = None,
        settings: Optional[LedgerSettings] = None,
        on_deprecated: Optional[DeprecationHandler] = None,
    ):
        self.settings = settings or LedgerSettings()
        self.client = client
        if isinstance(aggregate, AggregateHandle):
            self.aggregate = aggregate
        else:
            self.aggregate = AggregateHandle(
                resource_id=aggregate, resource_kind=self.settings.aggregate_kind
            )
        self.act_as = _require_parties(act_as)
        self.read_as = list(read_as or [])
        self.extra_disclosures = list(extra_disclosures or [])
        self.on_deprecated = on_deprecated
        self._operations: List[Operation] = []

    # --- Accumulation ---

    def _accumulate(
        self,
        action: str,
        kind: Union[EntityKind, str],
        entity_id: Any,
        payload: Any,
    ) -> "CapTableBatch":
        spec = get_converter(kind)
        if not spec.allows(action):
            raise ValidationError(
                "kind",
                _FORBIDDEN_ISSUER_ACTIONS.get(
                    action, f"Cannot {action} {spec.kind.value} via batch"
                ),
                received_value=spec.kind.value,
                code=ErrorCode.INVALID_TYPE,
            )
        require_id(spec.kind, entity_id)
        if isinstance(payload, Mapping):
            payload = dict(payload)
        self._operations.append(
            Operation(action=action, kind=spec.kind.value, id=entity_id, payload=payload)
        )
        return self

    def create(self, kind: Union[EntityKind, str], payload: Any) -> "CapTableBatch":
        """Add a create operation. Raises ValidationError on a missing/empty id."""
        return self._accumulate("create", kind, payload_id(payload), payload)

    def edit(self, kind: Union[EntityKind, str], payload: Any) -> "CapTableBatch":
        """Add an edit operation (replaces the entity's payload, keeps its id)."""
        return self._accumulate("edit", kind, payload_id(payload), payload)

    def delete(self, kind: Union[EntityKind, str], entity_id: str) -> "CapTableBatch":
        return self._accumulate("delete", kind, entity_id, None)

    # --- Inspection ---

    @property
    def size(self) -> int:
        return len(self._operations)

    @property
    def is_empty(self) -> bool:
        return not self._operations

    @property
    def operations(self) -> List[Operation]:
        return list(self._operations)

    def clear(self) -> "CapTableBatch":
        self._operations.clear()
        return self

    def summary(self) -> BatchSummary:
        return summarize(self._operations)

    # --- Compilation and submission ---

    def build(self) -> CompiledRequest:
        """Compile without submitting (for callers that submit themselves)."""
        return build_update_command(
            self.aggregate,
            self._operations,
            act_as=self.act_as,
            read_as=self.read_as,
            extra_disclosures=self.extra_disclosures,
            settings=self.settings,
            on_deprecated=self.on_deprecated,
        )

    async def execute(self) -> BatchResult:
        """Submit the batch and return the successor handle and entity ids.

        Returns:
            BatchResult; there is never a partial result.

        Raises:
            ValidationError: No client was given. This is checked first, so an
                empty batch without a client reports the client.
            EmptyBatchError: No operations (raised before any network access).
            ValidationError: A payload fails encoding.
            ConflictError: The targeted version was already consumed (from
                the client, unwrapped).
            NotFoundError: No successor creation event, or its proof lookup
                came back empty.
            BatchResultMismatchError: The update committed, but its result is
                missing or does not match the submitted operation counts. The
                error carries the successor handle and update id.
        """
        if self.client is None:
            raise ValidationError(
                "client",
                "Cannot execute batch without a client - use build() and submit manually",
            )
        request = self.build()
        summary = self.summary()
        logger.info(
            "Submitting %s against %s %s",
            request.command_id, self.aggregate.resource_id, summary.formatted(),
        )

        try:
            result = await self.client.submit(request)
        except Exception as exc:
            logger.error(
                "Batch %s failed against %s %s: %s",
                request.command_id, self.aggregate.resource_id, summary.formatted(), exc,
            )
            raise

        # The version is consumed once submit returns; resolve the successor first
        event = find_created_event(result, self.aggregate.resource_kind)
        successor = await resolve_proof(self.client, event)

        try:
            created_ids, edited_ids = extract_update_result(
                result, self.aggregate.resource_id, self.settings.update_choice
            )
        except ProtocolError as exc:
            raise BatchResultMismatchError(
                str(exc), updated_aggregate=successor, update_id=result.update_id
            ) from exc
        if len(created_ids) != summary.creates or len(edited_ids) != summary.edits:
            raise BatchResultMismatchError(
                f"{self.settings.update_choice} returned {len(created_ids)} created and "
                f"{len(edited_ids)} edited ids for {summary.formatted()}",
                updated_aggregate=successor,
                update_id=result.update_id,
            )

        logger.info(
            "Cap table %s superseded by %s (update %s)",
            self.aggregate.resource_id, successor.resource_id, result.update_id,
        )

        return BatchResult(
            created_ids=created_ids,
            edited_ids=edited_ids,
            deleted_ids=[op.id for op in self._operations if op.action == "delete"],
            updated_aggregate=successor,
            update_id=result.update_id,
        )
