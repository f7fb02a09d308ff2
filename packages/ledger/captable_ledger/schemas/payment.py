"""Payment context models.

A payment on the ledger references pricing resources (rules, the current
round) and, when it spends value, the value resources it consumes. Each
referenced resource travels with a disclosure proof.
"""

from decimal import Decimal
from typing import List, Optional
from pydantic import Field

from .base import FrozenModel, ResourceId
from .ledger import DisclosureProof, ValueResource


class PaymentContext(FrozenModel):
    """Context for a payment that spends no new value inputs."""

    rules_id: ResourceId
    round_id: ResourceId
    fee_share_right_id: Optional[ResourceId] = Field(
        default=None,
        description="Provider's fee-sharing right, when one exists",
    )


class FundedPaymentContext(PaymentContext):
    """Context for a payment funded by consuming value resources."""

    input_ids: List[ResourceId] = Field(min_length=1)
    required_amount: Decimal
    selected_amount: Decimal


class PaymentContextResult(FrozenModel):
    payment_context: PaymentContext
    disclosed_contracts: List[DisclosureProof] = Field(default_factory=list)


class CoinSelection(FrozenModel):
    """Greedy selection of value resources covering an amount."""

    selected: List[ValueResource]
    total: Decimal
    required: Decimal

    @property
    def change(self) -> Decimal:
        return self.total - self.required

    @property
    def input_ids(self) -> List[str]:
        return [r.id for r in self.selected]
