"""Ledger-facing models: proofs, value resources, events and compiled requests.

These are the shapes exchanged with the ledger client. The ledger itself is
append-only: every mutation consumes a resource version and creates a new
one, so nothing here is ever updated in place.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional
from pydantic import Field

from .base import DomainModel, FrozenModel, PartyId, ResourceId


# =============================================================================
# Disclosure Proof
# =============================================================================

class DisclosureProof(FrozenModel):
    """Provenance evidence accompanying a reference to an external resource.

    The ledger needs one of these for every referenced resource the submitting
    party cannot see by default. A proof with an empty ``provenance_blob`` is a
    placeholder and must never be submitted.
    """

    resource_kind: str
    resource_id: ResourceId
    provenance_blob: str = ""
    shard_id: str = ""

    @property
    def is_valid(self) -> bool:
        return bool(self.provenance_blob)


# =============================================================================
# Resources and Events
# =============================================================================

class ValueResource(FrozenModel):
    """A discrete, spendable, amount-bearing resource (consumed, not mutated)."""

    id: ResourceId
    effective_amount: Decimal = Field(ge=0)
    shard_id: str = ""
    provenance_blob: str = ""
    resource_kind: str = "Splice.Amulet:Amulet"

    def to_proof(self) -> DisclosureProof:
        return DisclosureProof(
            resource_kind=self.resource_kind,
            resource_id=self.id,
            provenance_blob=self.provenance_blob,
            shard_id=self.shard_id,
        )


class CreationEvent(FrozenModel):
    """A resource version created by a transaction (or fetched by id)."""

    resource_id: ResourceId
    resource_kind: str
    provenance_blob: str = ""
    shard_id: str = ""
    arguments: Dict[str, Any] = Field(default_factory=dict)

    def to_proof(self) -> DisclosureProof:
        return DisclosureProof(
            resource_kind=self.resource_kind,
            resource_id=self.resource_id,
            provenance_blob=self.provenance_blob,
            shard_id=self.shard_id,
        )


class ExercisedEvent(FrozenModel):
    """A choice exercised on a resource, with its returned value."""

    resource_id: ResourceId
    resource_kind: str
    choice: str
    result: Any = None


class ExecutionResult(FrozenModel):
    """Raw outcome of one successful submission."""

    update_id: str
    created_events: List[CreationEvent] = Field(default_factory=list)
    exercised_events: List[ExercisedEvent] = Field(default_factory=list)


# =============================================================================
# Compiled Request
# =============================================================================

class ExerciseCommand(FrozenModel):
    resource_kind: str
    resource_id: ResourceId
    choice: str
    argument: Dict[str, Any] = Field(default_factory=dict)


class CompiledRequest(FrozenModel):
    """One atomic state-transition request, ready for the ledger client."""

    command_id: str
    command: ExerciseCommand
    disclosed_contracts: List[DisclosureProof] = Field(default_factory=list)
    act_as: List[PartyId] = Field(min_length=1)
    read_as: List[PartyId] = Field(default_factory=list)
