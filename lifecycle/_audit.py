import datetime
import typing

from lifecycle import _types


class LogAudit:
    """
    Audit sink that records lifecycle events as structured log output.

    Each event is written as its own log record through the configs logger so
    that the log aggregation pipeline becomes the durable audit trail.
    """

    def __init__(self, configs: "_types.StoreConfigs"):
        self.configs = configs

    def _save(self, event: str, data: typing.Dict[str, typing.Any]):
        self.configs.log(
            "Audit",
            {
                "event": event,
                "timestamp": datetime.datetime.utcnow().isoformat(),
                **data,
            },
        )

    async def save_reconfigure_events(
        self,
        instances: typing.List["_types.InstanceDetails"],
    ) -> bool:
        for instance in instances:
            self._save("reconfigure", instance.to_dict())
        return True

    async def save_unset_reconfigure_events(self, instance_id: str, group: str) -> bool:
        self._save("unset-reconfigure", {"instance_id": instance_id, "group": group})
        return True

    async def save_shutdown_events(
        self,
        instances: typing.List["_types.InstanceDetails"],
    ) -> bool:
        for instance in instances:
            self._save("shutdown", instance.to_dict())
        return True
