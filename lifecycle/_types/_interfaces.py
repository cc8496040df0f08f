import typing

from lifecycle import _types


class StorePipeline(typing.Protocol):
    """Batch of independent store commands sent in a single round trip."""

    def set(self, name: str, value: str, ex: int = None) -> typing.Any:
        """Queue a SET command with an expiry in seconds."""

    def get(self, name: str) -> typing.Any:
        """Queue a GET command."""

    async def execute(self, raise_on_error: bool = True) -> typing.List[typing.Any]:
        """Send all queued commands and return their results in queued order."""


class StoreClient(typing.Protocol):
    """
    TTL key-value store consumed by the lifecycle store.

    A `redis.asyncio.Redis` client satisfies this protocol. Test suites swap in
    an in-memory implementation of the same methods.
    """

    async def set(self, name: str, value: str, ex: int = None) -> typing.Any:
        """Set the key to the value, expiring after ex seconds."""

    async def get(self, name: str) -> typing.Any:
        """Get the value of the key or None if it does not exist."""

    async def delete(self, *names: str) -> int:
        """Delete the keys and return how many existed."""

    def pipeline(self, transaction: bool = True) -> StorePipeline:
        """Create a pipeline for batching commands."""


class AuditSink(typing.Protocol):
    """Durable event log of lifecycle transitions."""

    async def save_reconfigure_events(
        self,
        instances: typing.List["_types.InstanceDetails"],
    ) -> typing.Any:
        """Record that reconfiguration was requested for each instance."""

    async def save_unset_reconfigure_events(
        self,
        instance_id: str,
        group: str,
    ) -> typing.Any:
        """Record that the reconfiguration request was cleared for the instance."""

    async def save_shutdown_events(
        self,
        instances: typing.List["_types.InstanceDetails"],
    ) -> typing.Any:
        """Record that shutdown was requested for each instance."""
