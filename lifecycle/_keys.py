import typing

from lifecycle import _configs


def to_key(domain: str, instance_id: str, namespace: str = None) -> str:
    """
    Build the store key for the instance within the given lifecycle domain.

    Keys take the form `{namespace}:{domain}:{instance_id}`. The instance
    identifier is used as-is and no structure is assumed within it.
    """
    return f"{namespace or _configs.DEFAULT_NAMESPACE}:{domain}:{instance_id}"


def shutdown_key(instance_id: str, namespace: str = None) -> str:
    """Key holding the shutdown marker for the instance."""
    return to_key(_configs.SHUTDOWN_DOMAIN, instance_id, namespace)


def protected_key(instance_id: str, namespace: str = None) -> str:
    """Key holding the scale-down protection marker for the instance."""
    return to_key(_configs.PROTECTED_DOMAIN, instance_id, namespace)


def reconfigure_key(instance_id: str, namespace: str = None) -> str:
    """Key holding the reconfiguration request timestamp for the instance."""
    return to_key(_configs.RECONFIGURE_DOMAIN, instance_id, namespace)


def to_ttl(value: typing.Any, name: str = "ttl") -> int:
    """
    Convert a TTL into a positive number of whole seconds.

    Keys written without an expiry are never removed by the store, so missing,
    zero and negative values are rejected instead of being passed along.
    """
    message = f'Invalid {name} of "{value}". Must be a positive integer.'
    if value is None or isinstance(value, bool):
        raise ValueError(message)

    try:
        seconds = int(value)
    except (TypeError, ValueError) as error:
        raise ValueError(message) from error

    if seconds <= 0:
        raise ValueError(message)
    return seconds


def to_text(value: typing.Any) -> typing.Optional[typing.Any]:
    """Decode byte responses from clients not created with decode_responses."""
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value
