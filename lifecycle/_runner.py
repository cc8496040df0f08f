import asyncio
import pathlib
import typing

import redis.asyncio

from lifecycle import _audit
from lifecycle import _configs
from lifecycle import _errors
from lifecycle import _store
from lifecycle import _types
from lifecycle._types import _settings


def _connect(configs: "_types.StoreConfigs") -> "_types.StoreClient":
    """Create the redis client for the configured store URL."""
    return redis.asyncio.from_url(configs.redis_url, decode_responses=True)


def _get_instances(
    configs: "_types.StoreConfigs",
    args: typing.Dict[str, typing.Any],
) -> typing.List["_types.InstanceDetails"]:
    """Create instance details for the instance ids given on the command line."""
    return _types.instances_from_ids(
        args.get("instance_ids") or [],
        group=args.get("group") or configs.group,
    )


async def _status(
    ctx: "_types.Context",
    store: "_store.InstanceLifecycleStore",
    args: typing.Dict[str, typing.Any],
) -> typing.Dict[str, typing.Any]:
    """Read the status of every lifecycle domain for the instances."""
    instance_ids = list(args.get("instance_ids") or [])
    shutdowns = await store.get_shutdown_statuses(ctx, instance_ids)
    reconfigures = await store.get_reconfigure_values(ctx, instance_ids)
    protections = await store.are_scale_down_protected(ctx, instance_ids)
    return {
        instance_id: {
            "shutdown": shutdown,
            "reconfigure": reconfigure,
            "scale_down_protected": protected,
        }
        for instance_id, shutdown, reconfigure, protected in zip(
            instance_ids, shutdowns, reconfigures, protections
        )
    }


async def _shutdown(
    ctx: "_types.Context",
    store: "_store.InstanceLifecycleStore",
    args: typing.Dict[str, typing.Any],
) -> typing.Dict[str, typing.Any]:
    """Mark the instances as shutting down."""
    instances = _get_instances(ctx.configs, args)
    result = await store.set_shutdown_status(ctx, instances)
    return result.to_dict()


async def _reconfigure(
    ctx: "_types.Context",
    store: "_store.InstanceLifecycleStore",
    args: typing.Dict[str, typing.Any],
) -> typing.Dict[str, typing.Any]:
    """Mark the instances as reconfiguring."""
    instances = _get_instances(ctx.configs, args)
    result = await store.set_reconfigure_status(ctx, instances, args.get("status"))
    return result.to_dict()


async def _unset_reconfigure(
    ctx: "_types.Context",
    store: "_store.InstanceLifecycleStore",
    args: typing.Dict[str, typing.Any],
) -> typing.Dict[str, typing.Any]:
    """Clear the reconfigure status of the instance."""
    result = await store.unset_reconfigure_status(
        ctx,
        args["instance_id"],
        args.get("group") or ctx.configs.group,
    )
    return result.to_dict()


async def _protect(
    ctx: "_types.Context",
    store: "_store.InstanceLifecycleStore",
    args: typing.Dict[str, typing.Any],
) -> typing.Dict[str, typing.Any]:
    """Protect the instance from scale-down, using the configured TTL by default."""
    result = await store.set_scale_down_protected(
        ctx,
        args["instance_id"],
        _settings._or(args.get("ttl"), ctx.configs.protected_ttl),
        args.get("mode") or _configs.PROTECTED_MARKER,
    )
    return result.to_dict()


COMMANDS = {
    "status": _status,
    "shutdown": _shutdown,
    "reconfigure": _reconfigure,
    "unset-reconfigure": _unset_reconfigure,
    "protect": _protect,
}


async def _execute(
    configs: "_types.StoreConfigs",
    args: typing.Dict[str, typing.Any],
) -> typing.Dict[str, typing.Any]:
    """Carry out the requested command against the lifecycle store."""
    client = _connect(configs)
    try:
        store = _store.InstanceLifecycleStore.from_configs(
            configs, client, _audit.LogAudit(configs)
        )
        if args.get("request_id"):
            ctx = _types.Context(configs, request_id=args["request_id"])
        else:
            ctx = _types.Context(configs)
        return await COMMANDS[args["command"]](ctx, store, args)
    finally:
        await client.aclose()


def main(
    args: typing.Dict[str, typing.Any],
    config_path_override: typing.Union[str, pathlib.Path] = None,
) -> int:
    """
    Execute a single lifecycle store command and log its result.

    :param args:
        Arguments parsed from the command line. These arguments will take precedence
        over arguments specified by other means during execution.
    :param config_path_override:
        An override for the config path that is only used during non-normal execution
        calls. Most commonly this will be for testing purposes.
    :return:
        Zero when the command succeeded and one when it was given invalid
        values or the store or audit sink failed to carry it out.
    """
    configs = _types.StoreConfigs().load(args, config_path_override)
    configs.log("starting", {"command": args.get("command"), **configs.to_dict()})

    try:
        result = asyncio.run(_execute(configs, args))
    except (_errors.StoreError, _errors.AuditFailure, ValueError) as error:
        configs.log(
            "error",
            {"command": args.get("command"), "error": f"{type(error)}: {error}"},
        )
        return 1

    configs.log(args["command"], result)
    return 0
