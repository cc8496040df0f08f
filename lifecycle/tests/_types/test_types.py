from unittest.mock import MagicMock

from lifecycle import _types


def test_write_result_truthiness():
    """Should be truthy only when the store write was committed."""
    assert _types.WriteResult(committed=True, audited=False)
    assert not _types.WriteResult(committed=False)


def test_instance_details_from_config():
    """Should create instance details from config data."""
    instance = _types.InstanceDetails.from_config(
        {"instance_id": "i-1", "group": "primary", "cloud": "aws"}
    )
    assert instance == _types.InstanceDetails("i-1", group="primary", cloud="aws")
    assert instance.to_dict()["region"] is None


def test_context_debug():
    """Should only log debug records when verbose logging is enabled."""
    configs = MagicMock(verbose=False)
    ctx = _types.Context(configs, request_id="abc")
    ctx.debug("quiet", {"key": "value"})
    assert not configs.log.called

    configs.verbose = True
    ctx.debug("loud", {"key": "value"})
    configs.log.assert_called_once_with(
        "loud", {"request_id": "abc", "key": "value"}
    )
