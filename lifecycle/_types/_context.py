import dataclasses
import typing
import uuid

from lifecycle import _types


@dataclasses.dataclass(frozen=True)
class Context:
    """
    Request-scoped data passed through each lifecycle store operation.

    Log records written through the context carry its request identifier so
    that reads and writes can be correlated with the caller's request.
    """

    configs: "_types.StoreConfigs"
    request_id: str = dataclasses.field(default_factory=lambda: uuid.uuid4().hex)

    def log(self, message: str, data: typing.Dict[str, typing.Any] = None):
        """Log the message and data tagged with the request identifier."""
        self.configs.log(message, {"request_id": self.request_id, **(data or {})})

    def debug(self, message: str, data: typing.Dict[str, typing.Any] = None):
        """Log the message only when verbose logging is enabled."""
        if self.configs.verbose:
            self.log(message, data)
