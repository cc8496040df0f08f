import dataclasses
import datetime
import json
import os
import pathlib
import typing

import yaml

from lifecycle import _configs
from lifecycle import _keys


def _or(*args: typing.Any, default: typing.Any = None) -> typing.Any:
    """
    Find the first non-None element in the args.

    If none of the values are not None, the default value will be returned instead.
    """
    return next((x for x in args if x is not None), default)


def _or_truthy(*args: typing.Any, default: typing.Any = None) -> typing.Any:
    """
    Find the first truthy element in the args.

    If none of the values are truthy, the default value will be returned instead.
    """
    return next((x for x in args if x), default)


def _load_configs(
    args: typing.Dict[str, typing.Any],
    config_path: typing.Union[str, pathlib.Path] = None,
) -> typing.Dict[str, typing.Any]:
    """
    Load configuration data from the config path.

    Config path lookup is prioritized in the following way:
    - config_path argument specified in this function signature.
    - `--config-path` command line argument.
    - CONFIG_PATH environmental variable.
    - Default value of "/application/config/config.yaml"

    If the config file fails to load because the file is not found, a blank
    configuration will be used instead.
    """
    p = pathlib.Path(
        config_path
        or args.get("config_path")
        or os.environ.get("CONFIG_PATH")
        or "/application/config/config.yaml"
    )
    try:
        return yaml.safe_load(p.resolve().read_text()) or {}
    except FileNotFoundError:
        return {}


@dataclasses.dataclass()
class StoreConfigs:
    """Configuration data structure for the instance lifecycle store."""

    redis_url: str = "redis://localhost:6379/0"
    namespace: str = _configs.DEFAULT_NAMESPACE
    #: Seconds before shutdown and reconfigure keys expire if never cleared.
    shutdown_ttl: int = _configs.DEFAULT_SHUTDOWN_TTL
    #: Seconds of protection applied when the command line gives no TTL.
    protected_ttl: int = _configs.DEFAULT_PROTECTED_TTL
    #: Group recorded in audit events when the command line gives none.
    group: typing.Optional[str] = None
    #: Whether audit sink failures are raised to the caller or only reported
    #: within the write result. Store writes are never rolled back either way.
    strict_audit: bool = True
    verbose: bool = False
    pretty_print: bool = False
    last_loaded_at: datetime.datetime = dataclasses.field(
        default_factory=lambda: datetime.datetime.utcnow()
    )

    def load(
        self,
        args: typing.Dict[str, typing.Any],
        config_path: typing.Union[str, pathlib.Path] = None,
    ) -> "StoreConfigs":
        """
        Populate store config with data from a config file.

        Values given as command line arguments take precedence over environment
        variables, which take precedence over the config file. Config path lookup
        is prioritized in the following way:
        - config_path argument specified in this function signature.
        - `--config-path` command line argument.
        - CONFIG_PATH environmental variable.
        - Default value of "/application/config/config.yaml"

        If none of these exist, the default values will be loaded instead.
        """
        self.last_loaded_at = datetime.datetime.utcnow()
        raw = _load_configs(args, config_path)

        self.redis_url = _or_truthy(
            args.get("redis_url"),
            os.environ.get("REDIS_URL"),
            raw.get("redis_url"),
            default=self.redis_url,
        )
        self.namespace = _or_truthy(
            args.get("namespace"),
            os.environ.get("LIFECYCLE_NAMESPACE"),
            raw.get("namespace"),
            default=_configs.DEFAULT_NAMESPACE,
        )
        self.shutdown_ttl = _keys.to_ttl(
            _or(
                os.environ.get("SHUTDOWN_TTL"),
                raw.get("shutdown_ttl"),
                default=_configs.DEFAULT_SHUTDOWN_TTL,
            ),
            "shutdown_ttl",
        )
        self.protected_ttl = _keys.to_ttl(
            _or(raw.get("protected_ttl"), default=_configs.DEFAULT_PROTECTED_TTL),
            "protected_ttl",
        )
        self.group = _or(raw.get("group"), self.group)
        self.strict_audit = bool(_or(raw.get("strict_audit"), default=True))
        self.verbose = _or_truthy(self.verbose, args.get("verbose"), False)
        self.pretty_print = _or_truthy(
            self.pretty_print, args.get("pretty_print"), False
        )
        return self

    def log(self, message: str, data: dict):
        """Log the message and data for structured output."""
        print(
            json.dumps(
                {"message": message, "data": data},
                indent=2 if self.pretty_print else None,
                default=str,
            )
        )

    def to_dict(self) -> typing.Dict[str, typing.Any]:
        """Convert to a dictionary representation that is JSON serializable for logs."""
        return {
            "redis_url": self.redis_url,
            "namespace": self.namespace,
            "shutdown_ttl": self.shutdown_ttl,
            "protected_ttl": self.protected_ttl,
            "group": self.group,
            "strict_audit": self.strict_audit,
            "verbose": self.verbose,
            "last_loaded_at": str(self.last_loaded_at),
        }
