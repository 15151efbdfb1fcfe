"""tokengov: token-gated proposal voting with quorum resolution."""

from .errors import TokenGovError
from .governance import GovernanceConfig, GovernanceEngine, QuorumFormula
from .oracle import InMemoryBalanceOracle, ManualClock, SystemClock

__version__ = "0.1.0"

__all__ = [
    "GovernanceEngine",
    "GovernanceConfig",
    "QuorumFormula",
    "InMemoryBalanceOracle",
    "ManualClock",
    "SystemClock",
    "TokenGovError",
    "__version__",
]
