"""Net Aave v3 positions (deposits minus borrows) for one account across chains."""
from .aggregator import get_balances
from .errors import DecodeError, PositionsError, RemoteCallError, UsageError
from .networks import NETWORKS, NetworkConfig

__version__ = "1.0.0"

__all__ = [
    "NETWORKS",
    "NetworkConfig",
    "get_balances",
    "PositionsError",
    "UsageError",
    "RemoteCallError",
    "DecodeError",
]
