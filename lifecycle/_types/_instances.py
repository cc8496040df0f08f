import dataclasses
import typing


def instances_from_ids(
    instance_ids: typing.Iterable[str],
    group: str = None,
) -> typing.List["InstanceDetails"]:
    """Create instance details for identifiers that all share the same group."""
    return [InstanceDetails(instance_id=i, group=group) for i in instance_ids]


@dataclasses.dataclass(frozen=True)
class InstanceDetails:
    """
    Data structure describing a fleet instance supplied by the caller.

    Only the instance identifier is used to derive store keys. The remaining
    fields are passed through to the audit sink so that recorded events can
    be attributed to the group and cloud placement of the instance.
    """

    instance_id: str
    #: Name of the instance group (fleet) the instance belongs to.
    group: typing.Optional[str] = None
    instance_type: typing.Optional[str] = None
    cloud: typing.Optional[str] = None
    region: typing.Optional[str] = None

    def to_dict(self) -> typing.Dict[str, typing.Any]:
        """Convert to a dictionary representation that is JSON serializable for logs."""
        return {
            "instance_id": self.instance_id,
            "group": self.group,
            "instance_type": self.instance_type,
            "cloud": self.cloud,
            "region": self.region,
        }

    @classmethod
    def from_config(cls, data: typing.Dict[str, typing.Any]) -> "InstanceDetails":
        """Create an InstanceDetails instance from config or request data."""
        return cls(
            instance_id=data["instance_id"],
            group=data.get("group"),
            instance_type=data.get("instance_type"),
            cloud=data.get("cloud"),
            region=data.get("region"),
        )
