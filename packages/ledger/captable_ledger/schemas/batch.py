"""Batch models: the versioned aggregate handle, operations and results.

The cap table is a single resource whose identity changes on every mutation.
Callers hold an ``AggregateHandle`` for the version they want to mutate; each
successful batch returns the successor handle, which is the only valid target
for the next batch.
"""

from typing import Any, List, Literal, Optional
from pydantic import Field

from .base import FrozenModel, NaturalKey, ResourceId
from .ledger import DisclosureProof


# =============================================================================
# Aggregate Handle
# =============================================================================

class AggregateHandle(FrozenModel):
    """Immutable handle on one version of the cap table resource.

    Usage:
        result = await CapTableBatch(client, handle, act_as=[issuer]).create(...).execute()
        handle = result.updated_aggregate  # thread into the next batch
    """

    resource_id: ResourceId
    resource_kind: str
    provenance_blob: str = ""
    shard_id: str = ""

    def to_proof(self) -> DisclosureProof:
        return DisclosureProof(
            resource_kind=self.resource_kind,
            resource_id=self.resource_id,
            provenance_blob=self.provenance_blob,
            shard_id=self.shard_id,
        )


# =============================================================================
# Operation
# =============================================================================

OperationAction = Literal["create", "edit", "delete"]


class Operation(FrozenModel):
    """One accumulated mutation. ``payload`` is None for deletes."""

    action: OperationAction
    kind: str
    id: NaturalKey
    payload: Optional[Any] = None


# =============================================================================
# Batch Result
# =============================================================================

class BatchResult(FrozenModel):
    """Outcome of one atomic batch.

    Either every field is populated or ``execute()`` raised; there is no
    partially filled result.
    """

    created_ids: List[str] = Field(
        default_factory=list,
        description="Ledger ids of created entities, one per create op, in submission order",
    )
    edited_ids: List[str] = Field(
        default_factory=list,
        description="Ledger ids of edited entities, one per edit op, in submission order",
    )
    deleted_ids: List[NaturalKey] = Field(
        default_factory=list,
        description="Natural keys removed by this batch",
    )
    updated_aggregate: AggregateHandle
    update_id: str

    @property
    def updated_aggregate_id(self) -> str:
        return self.updated_aggregate.resource_id
