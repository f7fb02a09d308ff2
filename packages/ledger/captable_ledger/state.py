"""Read-side snapshot of the cap table.

The cap table resource records, for every entity kind, which resource holds
each entity's current version. Reading that inventory lets a caller rebuild
its picture of what is on the ledger, or recover the live version after a
``ConflictError`` without replaying its own history.

Example:
    state = await get_cap_table_state(client, handle.resource_id)
    state.entity_ids("stakeholder")   → {"sh-alice", "sh-bob"}
    handle = state.aggregate          # current version, proof included
"""

import logging
from typing import Any, Dict, Mapping, Optional, Set

from pydantic import Field

from .chain import resolve_proof
from .client import LedgerClient
from .config import LedgerSettings
from .conversion.registry import EntityKind, resolve_kind
from .errors import ErrorCode, NotFoundError, ProtocolError
from .schemas.base import FrozenModel
from .schemas.batch import AggregateHandle
from .schemas.ledger import CreationEvent

logger = logging.getLogger(__name__)


# Cap table record field -> entity kind. Each field maps natural key -> resource id.
ENTITY_FIELDS: Dict[str, EntityKind] = {
    "stakeholders": EntityKind.STAKEHOLDER,
    "stock_classes": EntityKind.STOCK_CLASS,
    "stock_plans": EntityKind.STOCK_PLAN,
    "vesting_terms": EntityKind.VESTING_TERMS,
    "stock_legend_templates": EntityKind.STOCK_LEGEND_TEMPLATE,
    "documents": EntityKind.DOCUMENT,
    "valuations": EntityKind.VALUATION,
    "stock_class_authorized_shares_adjustments": EntityKind.STOCK_CLASS_AUTHORIZED_SHARES_ADJUSTMENT,
    "issuer_authorized_shares_adjustments": EntityKind.ISSUER_AUTHORIZED_SHARES_ADJUSTMENT,
    "stock_issuances": EntityKind.STOCK_ISSUANCE,
    "stock_cancellations": EntityKind.STOCK_CANCELLATION,
    "stock_transfers": EntityKind.STOCK_TRANSFER,
    "stock_repurchases": EntityKind.STOCK_REPURCHASE,
    "equity_compensation_issuances": EntityKind.EQUITY_COMPENSATION_ISSUANCE,
    "equity_compensation_exercises": EntityKind.EQUITY_COMPENSATION_EXERCISE,
    "convertible_issuances": EntityKind.CONVERTIBLE_ISSUANCE,
    "warrant_issuances": EntityKind.WARRANT_ISSUANCE,
    "stock_plan_pool_adjustments": EntityKind.STOCK_PLAN_POOL_ADJUSTMENT,
}

ISSUER_FIELD = "issuer"


class CapTableState(FrozenModel):
    """One version of the cap table and the entities it currently holds."""

    aggregate: AggregateHandle
    issuer_resource_id: Optional[str] = None
    entities: Dict[str, Dict[str, str]] = Field(
        default_factory=dict,
        description="Entity kind -> natural key -> resource id",
    )

    def resource_ids(self, kind: Any) -> Dict[str, str]:
        return dict(self.entities.get(resolve_kind(kind).value, {}))

    def entity_ids(self, kind: Any) -> Set[str]:
        return set(self.resource_ids(kind))

    def has_entity(self, kind: Any, entity_id: str) -> bool:
        return entity_id in self.entities.get(resolve_kind(kind).value, {})

    @property
    def total(self) -> int:
        return sum(len(ids) for ids in self.entities.values())


def _id_map(field: str, value: Any) -> Dict[str, str]:
    if not isinstance(value, Mapping) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in value.items()
    ):
        raise ProtocolError(f"Cap table field '{field}' is not a map of ids to resource ids")
    return dict(value)


def parse_cap_table_state(event: CreationEvent, aggregate: AggregateHandle) -> CapTableState:
    """Build a snapshot from the cap table's creation event arguments.

    Fields for entity kinds this client does not handle are ignored.

    Raises:
        ProtocolError: A known field is present but not a map of ids.
    """
    arguments = event.arguments
    entities: Dict[str, Dict[str, str]] = {}
    for field, kind in ENTITY_FIELDS.items():
        if field in arguments:
            ids = _id_map(field, arguments[field])
            if ids:
                entities[kind.value] = ids

    issuer = arguments.get(ISSUER_FIELD)
    if issuer is not None and not isinstance(issuer, str):
        raise ProtocolError(f"Cap table field '{ISSUER_FIELD}' is not a resource id")

    return CapTableState(aggregate=aggregate, issuer_resource_id=issuer, entities=entities)


async def get_cap_table_state(client: LedgerClient, resource_id: str) -> CapTableState:
    """Fetch one cap table version by id and read its entity inventory.

    Raises:
        NotFoundError: No creation event exists for ``resource_id``.
        ProtocolError: The record's entity fields are malformed.
    """
    event = await client.lookup_by_id(resource_id)
    if event is None:
        raise NotFoundError(
            f"Cap table {resource_id} not found",
            resource_id=resource_id,
            code=ErrorCode.CONTRACT_NOT_FOUND,
        )
    aggregate = await resolve_proof(client, event)
    state = parse_cap_table_state(event, aggregate)
    logger.debug("Read cap table %s with %d entities", resource_id, state.total)
    return state


async def find_cap_table_state(
    client: LedgerClient,
    party: str,
    settings: Optional[LedgerSettings] = None,
) -> Optional[CapTableState]:
    """Return the live cap table visible to ``party``, or None if it has none.

    This is the recovery path after a ``ConflictError``: the returned
    ``aggregate`` is the current version and can be targeted by a new batch.
    """
    settings = settings or LedgerSettings()
    events = await client.list_active_resources(party, settings.aggregate_kind)
    if not events:
        logger.info("No active cap table for %s", party)
        return None
    if len(events) > 1:
        logger.warning("%d active cap tables for %s, using the first", len(events), party)

    event = events[0]
    aggregate = await resolve_proof(client, event)
    return parse_cap_table_state(event, aggregate)
