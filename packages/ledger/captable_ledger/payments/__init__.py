"""Payment contexts and value-resource selection."""

from .context import OptionalLookup, PaymentContextBuilder, lookup_optional
from .selection import require_positive_amount, select_value_resources

__all__ = [
    "OptionalLookup",
    "PaymentContextBuilder",
    "lookup_optional",
    "require_positive_amount",
    "select_value_resources",
]
