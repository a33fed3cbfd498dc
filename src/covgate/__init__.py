from covgate._meta import __version__, logger
from covgate.core import (
    DataCollector,
    FailReason,
    SingleThreshold,
    ThresholdResult,
    check_threshold,
)

__all__ = [
    "DataCollector",
    "FailReason",
    "SingleThreshold",
    "ThresholdResult",
    "__version__",
    "check_threshold",
    "logger",
]
