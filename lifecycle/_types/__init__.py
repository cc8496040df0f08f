from lifecycle._types._settings import StoreConfigs  # noqa: F401
from lifecycle._types._context import Context  # noqa: F401
from lifecycle._types._instances import InstanceDetails  # noqa: F401
from lifecycle._types._instances import instances_from_ids  # noqa: F401
from lifecycle._types._interfaces import AuditSink  # noqa: F401
from lifecycle._types._interfaces import StoreClient  # noqa: F401
from lifecycle._types._interfaces import StorePipeline  # noqa: F401
from lifecycle._types._results import WriteResult  # noqa: F401
