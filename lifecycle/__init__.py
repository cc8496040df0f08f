"""Instance lifecycle store package."""
import argparse as _argparse

from lifecycle import _runner
from lifecycle._audit import LogAudit  # noqa: F401
from lifecycle._errors import AuditFailure  # noqa: F401
from lifecycle._errors import StoreError  # noqa: F401
from lifecycle._errors import StoreUnavailable  # noqa: F401
from lifecycle._store import InstanceLifecycleStore  # noqa: F401
from lifecycle._types import Context  # noqa: F401
from lifecycle._types import InstanceDetails  # noqa: F401
from lifecycle._types import StoreConfigs  # noqa: F401
from lifecycle._types import WriteResult  # noqa: F401


def parse(raw_args: list = None) -> dict:
    """Parse command line arguments to invoke the lifecycle store."""
    parser = _argparse.ArgumentParser(prog="lifecycle-store")
    parser.add_argument("--redis-url")
    parser.add_argument("--namespace")
    parser.add_argument("--request-id")
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--pretty-print", action="store_true")
    parser.add_argument("--config-path")

    commands = parser.add_subparsers(dest="command", required=True)

    status = commands.add_parser("status")
    status.add_argument("instance_ids", nargs="+")

    shutdown = commands.add_parser("shutdown")
    shutdown.add_argument("instance_ids", nargs="+")
    shutdown.add_argument("--group")

    reconfigure = commands.add_parser("reconfigure")
    reconfigure.add_argument("instance_ids", nargs="+")
    reconfigure.add_argument("--group")
    reconfigure.add_argument("--status")

    unset_reconfigure = commands.add_parser("unset-reconfigure")
    unset_reconfigure.add_argument("instance_id")
    unset_reconfigure.add_argument("--group")

    protect = commands.add_parser("protect")
    protect.add_argument("instance_id")
    protect.add_argument("--ttl", type=int)
    protect.add_argument("--mode")

    return vars(parser.parse_args(raw_args))


def main():
    """Execute the lifecycle store command line."""
    return _runner.main(parse())
