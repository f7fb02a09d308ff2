"""Resource chain tracking.

After a successful submission the aggregate has a new identity. This module
finds it in the execution result, pulls the update choice's return value,
and makes sure the successor comes with a usable disclosure proof.
"""

import logging
from typing import Any, Dict, List, Tuple

from .client import LedgerClient
from .errors import ErrorCode, NotFoundError, ProtocolError
from .schemas.batch import AggregateHandle
from .schemas.ledger import CreationEvent, ExecutionResult

logger = logging.getLogger(__name__)


def find_created_event(result: ExecutionResult, resource_kind: str) -> CreationEvent:
    """Return the creation event whose kind matches ``resource_kind``.

    Raises:
        NotFoundError: No such event; the response does not have the shape
            this client expects.
    """
    for event in result.created_events:
        if event.resource_kind == resource_kind:
            return event
    raise NotFoundError(
        f"No {resource_kind} creation event in update {result.update_id}",
        resource_kind=resource_kind,
        code=ErrorCode.RESULT_NOT_FOUND,
    )


def extract_update_result(
    result: ExecutionResult,
    resource_id: str,
    choice: str,
) -> Tuple[List[str], List[str]]:
    """Return ``(created_ids, edited_ids)`` from the update choice's result.

    Raises:
        ProtocolError: The exercise event is missing or its result is not
            shaped as expected.
    """
    for event in result.exercised_events:
        if event.resource_id == resource_id and event.choice == choice:
            value: Any = event.result
            if not isinstance(value, dict):
                raise ProtocolError(
                    f"{choice} returned {type(value).__name__}, expected a record"
                )
            return _id_list(value, "created_ids", choice), _id_list(value, "edited_ids", choice)
    raise ProtocolError(
        f"No {choice} exercise on {resource_id} in update {result.update_id}"
    )


def _id_list(value: Dict[str, Any], key: str, choice: str) -> List[str]:
    ids = value.get(key, [])
    if not isinstance(ids, list) or not all(isinstance(i, str) for i in ids):
        raise ProtocolError(f"{choice} result field '{key}' is not a list of ids")
    return ids


async def resolve_proof(client: LedgerClient, event: CreationEvent) -> AggregateHandle:
    """Turn the successor's creation event into a handle with a usable proof.

    When the execution result does not embed the provenance blob, one point
    lookup by id is made to fetch it.

    Raises:
        NotFoundError: The secondary lookup found no creation event.
    """
    if not event.provenance_blob:
        logger.debug("Fetching disclosure for %s", event.resource_id)
        fetched = await client.lookup_by_id(event.resource_id)
        if fetched is None:
            raise NotFoundError(
                f"Creation event for {event.resource_id} not found",
                resource_id=event.resource_id,
                resource_kind=event.resource_kind,
                code=ErrorCode.CONTRACT_NOT_FOUND,
            )
        event = fetched

    return AggregateHandle(
        resource_id=event.resource_id,
        resource_kind=event.resource_kind,
        provenance_blob=event.provenance_blob,
        shard_id=event.shard_id,
    )
