import typing
from unittest.mock import AsyncMock
from unittest.mock import MagicMock

from redis import exceptions as redis_exceptions

from lifecycle import _store
from lifecycle import _types


class MemoryPipeline:
    """Queues commands against a MemoryRedis and applies them on execute."""

    def __init__(self, client: "MemoryRedis"):
        self.client = client
        self.commands: typing.List[typing.Tuple[str, tuple, dict]] = []

    def set(self, name: str, value: str, ex: int = None) -> "MemoryPipeline":
        self.commands.append(("set", (name, value), {"ex": ex}))
        return self

    def get(self, name: str) -> "MemoryPipeline":
        self.commands.append(("get", (name,), {}))
        return self

    async def execute(self, raise_on_error: bool = True) -> typing.List[typing.Any]:
        self.client.round_trips += 1
        if self.client.error:
            raise self.client.error
        commands, self.commands = self.commands, []
        return [getattr(self.client, f"_{c}")(*a, **k) for c, a, k in commands]


class MemoryRedis:
    """
    In-memory stand-in for the redis client used by the lifecycle store.

    Expiry is evaluated against a manual clock that tests move forward with
    `advance` instead of sleeping.
    """

    def __init__(self, encoding: str = None):
        self.now = 0.0
        self.values: typing.Dict[str, typing.Tuple[typing.Any, typing.Any]] = {}
        self.round_trips = 0
        self.transactions: typing.List[bool] = []
        self.error: typing.Optional[Exception] = None
        self.encoding = encoding
        self.closed = False

    def advance(self, seconds: float):
        self.now += seconds

    def ttl(self, name: str) -> typing.Optional[float]:
        """Seconds remaining before the key expires or None if it does not exist."""
        if self._get(name) is None:
            return None
        return self.values[name][1] - self.now

    def _set(self, name: str, value: str, ex: int = None) -> bool:
        if ex is not None and ex <= 0:
            raise redis_exceptions.ResponseError("invalid expire time in 'set' command")
        stored = value.encode(self.encoding) if self.encoding else value
        self.values[name] = (stored, self.now + ex if ex is not None else None)
        return True

    def _get(self, name: str) -> typing.Any:
        value, expires_at = self.values.get(name, (None, None))
        if expires_at is not None and expires_at <= self.now:
            del self.values[name]
            return None
        return value

    def _delete(self, *names: str) -> int:
        existing = [n for n in names if self._get(n) is not None]
        for name in existing:
            del self.values[name]
        return len(existing)

    async def _call(self, command: str, *args, **kwargs) -> typing.Any:
        self.round_trips += 1
        if self.error:
            raise self.error
        return getattr(self, f"_{command}")(*args, **kwargs)

    async def set(self, name: str, value: str, ex: int = None) -> bool:
        return await self._call("set", name, value, ex=ex)

    async def get(self, name: str) -> typing.Any:
        return await self._call("get", name)

    async def delete(self, *names: str) -> int:
        return await self._call("delete", *names)

    def pipeline(self, transaction: bool = True) -> MemoryPipeline:
        self.transactions.append(transaction)
        return MemoryPipeline(self)

    async def aclose(self):
        self.closed = True


def make_audit() -> MagicMock:
    """Create a mock audit sink with awaitable save methods."""
    audit = MagicMock()
    audit.save_reconfigure_events = AsyncMock(return_value=True)
    audit.save_unset_reconfigure_events = AsyncMock(return_value=True)
    audit.save_shutdown_events = AsyncMock(return_value=True)
    return audit


def make_context(verbose: bool = True) -> "_types.Context":
    """Create a request context for testing."""
    configs = _types.StoreConfigs(verbose=verbose)
    return _types.Context(configs, request_id="test-request")


def make_store(
    client: MemoryRedis = None,
    audit: MagicMock = None,
    shutdown_ttl: int = 60,
    strict_audit: bool = True,
) -> "_store.InstanceLifecycleStore":
    """Create a lifecycle store backed by an in-memory client for testing."""
    return _store.InstanceLifecycleStore(
        client=client or MemoryRedis(),
        audit=audit or make_audit(),
        shutdown_ttl=shutdown_ttl,
        strict_audit=strict_audit,
    )
