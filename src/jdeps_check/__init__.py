__version__ = "0.1.0"

from .analysis import Goal, JDKInternalsCheck
from .config import JDepsConfig, load_config
from .consumer import ConsumerState, Phase, consume, consume_line, finalize
from .core import AnalysisTarget, Artifact, Verdict
from .errors import (
    ArgumentError,
    ConfigurationError,
    ConsumerStateError,
    ExecutableResolutionError,
    JDepsError,
    JDepsExecutionError,
    OffendingPackagesError,
)
