"""Ledger client interface.

The network client (transport, auth, retries, timeouts) lives outside this
package. Batches and payment builders only depend on this protocol, so any
object with these coroutines can be plugged in, including test doubles.
"""

from typing import List, Optional, Protocol, runtime_checkable

from .schemas.ledger import CompiledRequest, CreationEvent, ExecutionResult, ValueResource


@runtime_checkable
class LedgerClient(Protocol):
    """Asynchronous access to the versioned ledger."""

    async def submit(self, request: CompiledRequest) -> ExecutionResult:
        """Submit one compiled request.

        Rejections (including a stale aggregate version, reported as
        ``ConflictError``) propagate to the caller unwrapped.
        """
        ...

    async def lookup_by_id(self, resource_id: str) -> Optional[CreationEvent]:
        """Point lookup of a resource's creation event; None when absent."""
        ...

    async def list_active_resources(self, party: str, resource_kind: str) -> List[CreationEvent]:
        """Creation events of every active resource of *resource_kind* visible to *party*."""
        ...

    async def list_value_resources(self, principal: str) -> List[ValueResource]:
        """All spendable value resources owned by *principal*."""
        ...

    async def lookup_optional_resource(self, key: str) -> Optional[CreationEvent]:
        """Best-effort lookup of an auxiliary resource; None when absent."""
        ...

    async def fetch_context_resource(self, key: str) -> CreationEvent:
        """Fetch a required pricing-context resource. Failures propagate."""
        ...
