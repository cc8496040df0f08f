import dataclasses
import datetime
import email.utils
import typing

from lifecycle import _configs
from lifecycle import _errors
from lifecycle import _keys
from lifecycle import _types


def _utc_now_string() -> str:
    """Current UTC time as an HTTP date, e.g. "Mon, 01 Jan 2024 00:00:00 GMT"."""
    now = datetime.datetime.now(datetime.timezone.utc)
    return email.utils.format_datetime(now, usegmt=True)


class InstanceLifecycleStore:
    """
    Tracks shutdown, reconfigure and scale-down protection status of instances.

    Each status domain is stored under its own namespaced key per instance and
    every key is written with an expiry, so status left behind by a caller that
    crashed before clearing it disappears on its own. Operations given many
    instances send all of their commands in one pipelined round trip. The
    pipeline is not a transaction and a connection failure part way through a
    batch may leave some of its keys written.
    """

    def __init__(
        self,
        client: "_types.StoreClient",
        audit: "_types.AuditSink",
        shutdown_ttl: int = _configs.DEFAULT_SHUTDOWN_TTL,
        namespace: str = _configs.DEFAULT_NAMESPACE,
        strict_audit: bool = True,
    ):
        """
        :param client:
            Store connection, typically a `redis.asyncio.Redis` client. It is
            shared by all operations and must be safe for concurrent use.
        :param audit:
            Sink that records shutdown and reconfigure transitions.
        :param shutdown_ttl:
            Seconds before shutdown and reconfigure keys expire. Must be a
            positive integer, otherwise a ValueError is raised.
        :param namespace:
            Prefix applied to every key written by this store.
        :param strict_audit:
            When true, audit sink failures are raised as AuditFailure errors
            after the status write has been committed. Otherwise they are
            logged and reported within the returned write result.
        """
        self.client = client
        self.audit = audit
        self.shutdown_ttl = _keys.to_ttl(shutdown_ttl, "shutdown_ttl")
        self.namespace = namespace
        self.strict_audit = strict_audit

    @classmethod
    def from_configs(
        cls,
        configs: "_types.StoreConfigs",
        client: "_types.StoreClient",
        audit: "_types.AuditSink",
    ) -> "InstanceLifecycleStore":
        """Create a store with the TTL, namespace and audit policy of the configs."""
        return cls(
            client=client,
            audit=audit,
            shutdown_ttl=configs.shutdown_ttl,
            namespace=configs.namespace,
            strict_audit=configs.strict_audit,
        )

    def shutdown_key(self, instance_id: str) -> str:
        """Namespaced key holding the shutdown marker for the instance."""
        return _keys.shutdown_key(instance_id, self.namespace)

    def protected_key(self, instance_id: str) -> str:
        """Namespaced key holding the scale-down protection marker for the instance."""
        return _keys.protected_key(instance_id, self.namespace)

    def reconfigure_key(self, instance_id: str) -> str:
        """Namespaced key holding the reconfigure timestamp for the instance."""
        return _keys.reconfigure_key(instance_id, self.namespace)

    async def _run(self, action: str, command: typing.Awaitable) -> typing.Any:
        """Await a single store command, translating client errors."""
        try:
            return await command
        except _errors.STORE_ERRORS as error:
            raise _errors.to_store_error(error, action) from error

    async def _write_batch(
        self,
        ctx: "_types.Context",
        keys: typing.List[str],
        value: str,
        ttl: int,
        action: str,
    ):
        """Write the value to every key with the given expiry in one round trip."""
        pipeline = self.client.pipeline(transaction=False)
        for key in keys:
            ctx.debug(f"Writing {action}", {"key": key, "value": value, "ttl": ttl})
            pipeline.set(key, value, ex=ttl)
        results = await self._run(f"write {action}", pipeline.execute())
        ctx.debug(f"Wrote {action}", {"keys": keys, "results": results})

    async def _read_batch(
        self,
        ctx: "_types.Context",
        keys: typing.List[str],
        action: str,
    ) -> typing.List[typing.Optional[str]]:
        """
        Read the values of all keys in one round trip.

        Results are positionally aligned with the keys and are None for keys
        that do not exist. An error for any one key fails the entire batch.
        """
        if not keys:
            return []

        pipeline = self.client.pipeline(transaction=False)
        for key in keys:
            pipeline.get(key)
        results = await self._run(f"read {action}", pipeline.execute())
        values = [_keys.to_text(r) for r in results]
        ctx.debug(f"Read {action}", {"keys": keys, "values": values})
        return values

    async def _audit(
        self,
        ctx: "_types.Context",
        result: "_types.WriteResult",
        event: str,
        save: typing.Callable[..., typing.Awaitable],
        *args: typing.Any,
    ) -> "_types.WriteResult":
        """Record audit events for a committed write and fold them into the result."""
        try:
            await save(*args)
        except Exception as error:
            failed = dataclasses.replace(result, audited=False, audit_error=error)
            ctx.log(
                "Audit failed",
                {"event": event, "error": f"{type(error).__name__}: {error}"},
            )
            if self.strict_audit:
                raise _errors.AuditFailure(
                    f"Failed to audit {event} events: {error}", failed
                ) from error
            return failed
        return result

    async def set_reconfigure_status(
        self,
        ctx: "_types.Context",
        instances: typing.List["_types.InstanceDetails"],
        status: str = None,
    ) -> "_types.WriteResult":
        """
        Mark the instances as reconfiguring.

        :param ctx:
            Request context used for logging.
        :param instances:
            Instances to mark, all of which are written in a single round trip.
        :param status:
            Value stored for every instance. Defaults to the current UTC time,
            taken once so that the whole batch shares the same value.
        :return:
            The committed write, after one reconfigure audit event per
            instance has been recorded.
        """
        if status is None:
            status = _utc_now_string()

        keys = [self.reconfigure_key(i.instance_id) for i in instances]
        result = _types.WriteResult(committed=True, keys=tuple(keys))
        if not keys:
            return result

        await self._write_batch(
            ctx, keys, status, self.shutdown_ttl, "reconfigure status"
        )
        return await self._audit(
            ctx, result, "reconfigure", self.audit.save_reconfigure_events, instances
        )

    async def unset_reconfigure_status(
        self,
        ctx: "_types.Context",
        instance_id: str,
        group: str,
    ) -> "_types.WriteResult":
        """
        Clear the reconfigure status of the instance.

        Clearing an instance that is not reconfiguring is not an error. An unset
        audit event tagged with the group is recorded either way.
        """
        key = self.reconfigure_key(instance_id)
        removed = await self._run("remove reconfigure value", self.client.delete(key))
        ctx.debug("Remove reconfigure value", {"key": key, "removed": removed})
        result = _types.WriteResult(committed=True, keys=(key,))
        return await self._audit(
            ctx,
            result,
            "unset-reconfigure",
            self.audit.save_unset_reconfigure_events,
            instance_id,
            group,
        )

    async def get_reconfigure_values(
        self,
        ctx: "_types.Context",
        instance_ids: typing.List[str],
    ) -> typing.List[typing.Optional[str]]:
        """Read the stored reconfigure values, None for instances not reconfiguring."""
        keys = [self.reconfigure_key(i) for i in instance_ids]
        return await self._read_batch(ctx, keys, "reconfigure values")

    async def get_reconfigure_value(
        self,
        ctx: "_types.Context",
        instance_id: str,
    ) -> typing.Optional[str]:
        """Read the stored reconfigure value or None if the instance has none."""
        key = self.reconfigure_key(instance_id)
        value = _keys.to_text(
            await self._run("read reconfigure value", self.client.get(key))
        )
        ctx.debug("Read reconfigure value", {"key": key, "value": value})
        return value

    async def get_reconfigure_status(
        self,
        ctx: "_types.Context",
        instance_id: str,
    ) -> bool:
        """Whether a reconfigure value exists for the instance, whatever it holds."""
        return await self.get_reconfigure_value(ctx, instance_id) is not None

    async def set_shutdown_status(
        self,
        ctx: "_types.Context",
        instances: typing.List["_types.InstanceDetails"],
        status: str = _configs.SHUTDOWN_MARKER,
    ) -> "_types.WriteResult":
        """
        Mark the instances as shutting down.

        Every write replaces any existing value and restarts the expiry, so
        repeated calls do not extend the lifetime of the marker beyond the
        configured TTL from the latest call.
        """
        keys = [self.shutdown_key(i.instance_id) for i in instances]
        result = _types.WriteResult(committed=True, keys=tuple(keys))
        if not keys:
            return result

        await self._write_batch(
            ctx, keys, status, self.shutdown_ttl, "shutdown status"
        )
        return await self._audit(
            ctx, result, "shutdown", self.audit.save_shutdown_events, instances
        )

    async def get_shutdown_statuses(
        self,
        ctx: "_types.Context",
        instance_ids: typing.List[str],
    ) -> typing.List[bool]:
        """Whether each instance holds the shutdown marker, aligned with the ids."""
        keys = [self.shutdown_key(i) for i in instance_ids]
        values = await self._read_batch(ctx, keys, "shutdown statuses")
        return [v == _configs.SHUTDOWN_MARKER for v in values]

    async def get_shutdown_status(
        self,
        ctx: "_types.Context",
        instance_id: str,
    ) -> bool:
        """Whether the instance holds the shutdown marker."""
        key = self.shutdown_key(instance_id)
        value = _keys.to_text(
            await self._run("read shutdown status", self.client.get(key))
        )
        ctx.debug("Read shutdown status", {"key": key, "value": value})
        return value == _configs.SHUTDOWN_MARKER

    async def set_scale_down_protected(
        self,
        ctx: "_types.Context",
        instance_id: str,
        protected_ttl: int,
        mode: str = _configs.PROTECTED_MARKER,
    ) -> "_types.WriteResult":
        """
        Protect the instance from scale-down for protected_ttl seconds.

        The TTL is independent of the shutdown TTL configured for the store.
        It must be a positive integer, otherwise a ValueError is raised before
        anything is written. Protection is not audited.
        """
        ttl = _keys.to_ttl(protected_ttl, "protected_ttl")
        key = self.protected_key(instance_id)
        ctx.debug("Writing protected mode", {"key": key, "mode": mode, "ttl": ttl})
        res = await self._run(
            "write protected mode", self.client.set(key, mode, ex=ttl)
        )
        ctx.debug("Wrote protected mode", {"key": key, "result": res})
        return _types.WriteResult(committed=True, keys=(key,))

    async def are_scale_down_protected(
        self,
        ctx: "_types.Context",
        instance_ids: typing.List[str],
    ) -> typing.List[bool]:
        """Whether each instance holds the protection marker, aligned with the ids."""
        keys = [self.protected_key(i) for i in instance_ids]
        values = await self._read_batch(ctx, keys, "protected modes")
        return [v == _configs.PROTECTED_MARKER for v in values]
