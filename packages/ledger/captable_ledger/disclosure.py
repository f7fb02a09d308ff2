"""Disclosure proof assembly.

Upstream lookups sometimes return placeholder proofs (an empty provenance
blob) for resources the submitting party can already see. Submitting those
makes the ledger reject the whole request, so they are dropped here before a
request is compiled.
"""

import logging
from typing import Iterable, List, Optional

from .errors import ErrorCode, ProtocolError
from .schemas.ledger import DisclosureProof

logger = logging.getLogger(__name__)


def filter_valid_proofs(proofs: Iterable[Optional[DisclosureProof]]) -> List[DisclosureProof]:
    """Keep only proofs with a non-empty provenance blob, in input order."""
    return [p for p in proofs if p is not None and p.is_valid]


def assemble_disclosures(
    aggregate_proof: Optional[DisclosureProof],
    *candidates: Iterable[Optional[DisclosureProof]],
) -> List[DisclosureProof]:
    """Build the deduplicated list of valid proofs for one request.

    Args:
        aggregate_proof: Proof for the targeted aggregate version (may be a
            placeholder when the submitter already sees the aggregate).
        *candidates: Further proof groups (payment context, value inputs,
            caller-supplied extras).

    Returns:
        Valid proofs, one per resource id. The first proof seen for an id wins.

    Raises:
        ProtocolError: A proof carries a provenance blob but no resource id.
    """
    merged: List[Optional[DisclosureProof]] = [aggregate_proof]
    for group in candidates:
        merged.extend(group)

    seen = set()
    result: List[DisclosureProof] = []
    dropped = 0
    for proof in merged:
        if proof is None or not proof.is_valid:
            dropped += 1
            continue
        if not proof.resource_id:
            raise ProtocolError(
                f"Disclosure proof for {proof.resource_kind} has no resource id",
                code=ErrorCode.INVALID_DISCLOSURE,
            )
        if proof.resource_id in seen:
            continue
        seen.add(proof.resource_id)
        result.append(proof)

    if dropped:
        logger.debug("Dropped %d placeholder disclosure(s)", dropped)
    return result
