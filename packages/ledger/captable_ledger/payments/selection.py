"""Greedy largest-first selection of value resources.

This is a cover, not an optimal bin-packing: it keeps the number of inputs
small in the common case but does not minimize leftover change.

Example:
    amounts [100, 60, 10], required 150 → selects [100, 60] (total 160, change 10)
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional, Sequence

from ..errors import ErrorCode, InsufficientResourceError, ValidationError
from ..schemas.ledger import ValueResource
from ..schemas.payment import CoinSelection

logger = logging.getLogger(__name__)


def require_positive_amount(value: Any) -> Decimal:
    """Coerce ``value`` to Decimal, rejecting zero and negative amounts."""
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        amount = None
    if amount is None or not amount.is_finite() or amount <= 0:
        raise ValidationError(
            "required_amount",
            "Must be a positive decimal amount",
            received_value=value,
            code=ErrorCode.INVALID_FORMAT,
        )
    return amount


def select_value_resources(
    resources: Sequence[ValueResource],
    required_amount: Decimal,
    max_inputs: Optional[int] = None,
    principal: Optional[str] = None,
) -> CoinSelection:
    """Select resources, largest first, until their sum covers the amount.

    Ties keep their listing order (the sort is stable).

    Args:
        resources: Candidate value resources.
        required_amount: Amount to cover; must be positive.
        max_inputs: Optional cap on the number of selected resources.
        principal: Owner, used only in error messages.

    Returns:
        CoinSelection with the selected resources in selection order.

    Raises:
        ValidationError: ``required_amount`` is not positive.
        InsufficientResourceError: The resources (or the first
            ``max_inputs`` of them) do not reach the amount; ``shortfall``
            is ``required_amount - total``.
    """
    required = require_positive_amount(required_amount)

    ordered = sorted(resources, key=lambda r: r.effective_amount, reverse=True)
    if max_inputs is not None:
        ordered = ordered[:max_inputs]

    selected: List[ValueResource] = []
    total = Decimal("0")
    for resource in ordered:
        selected.append(resource)
        total += resource.effective_amount
        if total >= required:
            logger.debug(
                "Selected %d of %d value resources: total %s for %s",
                len(selected), len(resources), total, required,
            )
            return CoinSelection(selected=selected, total=total, required=required)

    raise InsufficientResourceError(required, total, principal)
