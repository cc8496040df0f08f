import pathlib

import pytest

from lifecycle import _types


def test_load_defaults(tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch):
    """Should fall back to default values when no config file exists."""
    for name in ("REDIS_URL", "SHUTDOWN_TTL", "LIFECYCLE_NAMESPACE"):
        monkeypatch.delenv(name, raising=False)

    configs = _types.StoreConfigs().load({}, tmp_path.joinpath("missing.yaml"))
    assert configs.redis_url == "redis://localhost:6379/0"
    assert configs.namespace == "instance"
    assert configs.shutdown_ttl == 86400
    assert configs.protected_ttl == 900
    assert configs.strict_audit
    assert not configs.verbose


def test_load_config_file(tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch):
    """Should load values from the config file with arguments taking precedence."""
    for name in ("REDIS_URL", "SHUTDOWN_TTL", "LIFECYCLE_NAMESPACE"):
        monkeypatch.delenv(name, raising=False)

    path = tmp_path.joinpath("config.yaml")
    path.write_text(
        "\n".join(
            [
                "redis_url: redis://cache:6379/1",
                "namespace: staging",
                "shutdown_ttl: 300",
                "protected_ttl: 30",
                "group: primary",
                "strict_audit: false",
            ]
        )
    )
    configs = _types.StoreConfigs().load({"namespace": "canary", "verbose": True}, path)
    assert configs.redis_url == "redis://cache:6379/1"
    assert configs.namespace == "canary"
    assert configs.shutdown_ttl == 300
    assert configs.protected_ttl == 30
    assert configs.group == "primary"
    assert not configs.strict_audit
    assert configs.verbose
    assert configs.to_dict()["namespace"] == "canary"


def test_load_environment(tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch):
    """Should prefer environment variables over config file values."""
    monkeypatch.setenv("REDIS_URL", "redis://env:6379/0")
    monkeypatch.setenv("SHUTDOWN_TTL", "45")
    monkeypatch.delenv("LIFECYCLE_NAMESPACE", raising=False)

    path = tmp_path.joinpath("config.yaml")
    path.write_text("redis_url: redis://file:6379/0\nshutdown_ttl: 300\n")
    configs = _types.StoreConfigs().load({}, path)
    assert configs.redis_url == "redis://env:6379/0"
    assert configs.shutdown_ttl == 45


def test_load_invalid_ttl(tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch):
    """Should reject TTL values that would never expire keys."""
    monkeypatch.delenv("SHUTDOWN_TTL", raising=False)
    path = tmp_path.joinpath("config.yaml")
    path.write_text("shutdown_ttl: 0\n")
    with pytest.raises(ValueError):
        _types.StoreConfigs().load({}, path)
