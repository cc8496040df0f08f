import dataclasses
import typing


@dataclasses.dataclass(frozen=True)
class WriteResult:
    """
    Outcome of a lifecycle status write.

    The store write is the primary effect and the audit record is a secondary
    one. They are tracked separately because the store write is never rolled
    back when the audit sink fails, so the two can legitimately disagree.
    Truthiness follows the primary effect only.
    """

    #: Whether the status was written to (or removed from) the store.
    committed: bool
    #: Whether the audit sink accepted the events for this write. Writes that
    #: are not audited, like scale-down protection, report True.
    audited: bool = True
    #: Error raised by the audit sink when audited is False.
    audit_error: typing.Optional[BaseException] = dataclasses.field(
        default=None, compare=False
    )
    #: Store keys touched by the write.
    keys: typing.Tuple[str, ...] = dataclasses.field(default_factory=lambda: tuple())

    def __bool__(self) -> bool:
        return self.committed

    def to_dict(self) -> typing.Dict[str, typing.Any]:
        """Convert to a dictionary representation that is JSON serializable for logs."""
        return {
            "committed": self.committed,
            "audited": self.audited,
            "audit_error": str(self.audit_error) if self.audit_error else None,
            "keys": list(self.keys),
        }
