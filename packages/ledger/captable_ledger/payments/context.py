"""Payment context building.

Payments reference two required pricing-context resources (the pricing rules
and the currently open round) and, when available, the provider's
fee-sharing right. Funded payments also consume value resources chosen by
``select_value_resources``.
"""

import logging
from decimal import Decimal
from typing import List, Optional, Tuple

from ..client import LedgerClient
from ..config import LedgerSettings
from ..disclosure import assemble_disclosures
from ..schemas.base import FrozenModel
from ..schemas.ledger import CreationEvent, DisclosureProof
from ..schemas.payment import FundedPaymentContext, PaymentContext, PaymentContextResult
from .selection import require_positive_amount, select_value_resources

logger = logging.getLogger(__name__)


# =============================================================================
# Optional Lookups
# =============================================================================

class OptionalLookup(FrozenModel):
    """Outcome of a best-effort lookup.

    ``found`` is False both when the resource does not exist and when the
    lookup failed; ``error`` tells the two apart.
    """

    key: str
    resource: Optional[CreationEvent] = None
    error: Optional[Exception] = None

    @property
    def found(self) -> bool:
        return self.resource is not None

    def proofs(self) -> List[DisclosureProof]:
        return [self.resource.to_proof()] if self.resource is not None else []


async def lookup_optional(client: LedgerClient, key: str) -> OptionalLookup:
    """Look up an auxiliary resource; absence and failure both mean "not found".

    Cancellation is not an ``Exception`` subclass and always propagates.
    """
    try:
        resource = await client.lookup_optional_resource(key)
        lookup = OptionalLookup(key=key, resource=resource)
    except Exception as exc:
        logger.warning("Optional lookup of %s failed, treating as absent: %s", key, exc)
        return OptionalLookup(key=key, error=exc)
    if not lookup.found:
        logger.debug("Optional resource %s not present", key)
    return lookup


# =============================================================================
# Builder
# =============================================================================

class PaymentContextBuilder:
    """Resolves the resources and proofs a payment needs.

    Example:
        builder = PaymentContextBuilder(client)
        result = await builder.build_context_with_funding("payer::1220", Decimal("25"), "provider::1220")
        result.payment_context.input_ids  # value resources to consume
        result.disclosed_contracts        # proofs to attach to the request
    """

    def __init__(self, client: LedgerClient, settings: Optional[LedgerSettings] = None):
        self.client = client
        self.settings = settings or LedgerSettings()

    def fee_share_right_key(self, provider: str) -> str:
        return f"{self.settings.fee_share_right_key}:{provider}"

    async def _fee_share(self, provider: Optional[str]) -> OptionalLookup:
        if not provider:
            logger.debug("No provider given, skipping fee-share right lookup")
            return OptionalLookup(key=self.settings.fee_share_right_key)
        return await lookup_optional(self.client, self.fee_share_right_key(provider))

    async def _pricing_resources(self) -> Tuple[CreationEvent, CreationEvent]:
        rules = await self.client.fetch_context_resource(self.settings.pricing_rules_key)
        open_round = await self.client.fetch_context_resource(self.settings.open_round_key)
        return rules, open_round

    async def build_context(self, provider: Optional[str] = None) -> PaymentContextResult:
        """Context for a payment that spends no new value inputs.

        Args:
            provider: Party whose fee-sharing right is looked up. When empty
                the lookup is skipped.

        Returns:
            PaymentContextResult with a ``PaymentContext`` and valid proofs.
        """
        rules, open_round = await self._pricing_resources()
        fee_share = await self._fee_share(provider)

        context = PaymentContext(
            rules_id=rules.resource_id,
            round_id=open_round.resource_id,
            fee_share_right_id=fee_share.resource.resource_id if fee_share.found else None,
        )
        proofs = assemble_disclosures(
            None,
            [rules.to_proof(), open_round.to_proof()],
            fee_share.proofs(),
        )
        return PaymentContextResult(payment_context=context, disclosed_contracts=proofs)

    async def build_context_with_funding(
        self,
        payer: str,
        required_amount: Decimal,
        provider: Optional[str] = None,
    ) -> PaymentContextResult:
        """Context for a payment funded by the payer's value resources.

        Args:
            payer: Owner of the value resources to consume.
            required_amount: Amount to cover; must be positive.
            provider: Party whose fee-sharing right is looked up. When empty
                the lookup is skipped.

        Returns:
            PaymentContextResult with a ``FundedPaymentContext``. Proofs cover
            the pricing resources, every selected input and the fee-share
            right when found.

        Raises:
            ValidationError: ``required_amount`` is not positive (no I/O made).
            InsufficientResourceError: The payer's resources fall short.
        """
        required = require_positive_amount(required_amount)

        resources = await self.client.list_value_resources(payer)
        selection = select_value_resources(
            resources,
            required,
            max_inputs=self.settings.max_value_inputs,
            principal=payer,
        )

        rules, open_round = await self._pricing_resources()
        fee_share = await self._fee_share(provider)

        context = FundedPaymentContext(
            rules_id=rules.resource_id,
            round_id=open_round.resource_id,
            fee_share_right_id=fee_share.resource.resource_id if fee_share.found else None,
            input_ids=selection.input_ids,
            required_amount=selection.required,
            selected_amount=selection.total,
        )
        proofs = assemble_disclosures(
            None,
            [rules.to_proof(), open_round.to_proof()],
            [r.to_proof() for r in selection.selected],
            fee_share.proofs(),
        )
        logger.info(
            "Funded payment context for %s: %d input(s), %s of %s",
            payer, len(selection.selected), selection.total, selection.required,
        )
        return PaymentContextResult(payment_context=context, disclosed_contracts=proofs)
