# /src/aave_positions/networks.py
import os
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional

from .errors import UsageError

DEFAULT_RPC_TIMEOUT = 20


@dataclass(frozen=True)
class NetworkConfig:
    name: str
    rpc_url: str
    pool_address: str


# Aave v3 uses the same Pool address on every chain listed here
AAVE_V3_POOL = "0x794a61358D6845594F94dc1DB02A252b5b4814aD"

NETWORKS: Mapping[str, NetworkConfig] = MappingProxyType({
    cfg.name: cfg for cfg in (
        NetworkConfig("optimism", "https://mainnet.optimism.io", AAVE_V3_POOL),
        NetworkConfig("arbitrum", "https://arb1.arbitrum.io/rpc", AAVE_V3_POOL),
        NetworkConfig("polygon", "https://polygon-rpc.com/", AAVE_V3_POOL),
        NetworkConfig("fantom", "https://rpc.ftm.tools/", AAVE_V3_POOL),
        NetworkConfig("avalanche", "https://api.avax.network/ext/bc/C/rpc", AAVE_V3_POOL),
        NetworkConfig("harmony", "https://api.harmony.one", AAVE_V3_POOL),
    )
})


def rpc_env_var(name: str) -> str:
    return f"{name.upper()}_RPC_URL"


def load_networks(env: Optional[Mapping[str, str]] = None,
                  only: Optional[Iterable[str]] = None) -> Dict[str, NetworkConfig]:
    """
    Registry in declared order, with endpoints overridable through
    <NAME>_RPC_URL (e.g. POLYGON_RPC_URL) and an optional name filter.
    """
    env = os.environ if env is None else env

    wanted = None
    if only:
        wanted = set(only)
        unknown = sorted(wanted - set(NETWORKS))
        if unknown:
            raise UsageError(f"Unknown network(s): {', '.join(unknown)}. "
                             f"Known: {', '.join(NETWORKS)}")

    out: Dict[str, NetworkConfig] = {}
    for name, cfg in NETWORKS.items():
        if wanted is not None and name not in wanted:
            continue
        rpc_url = env.get(rpc_env_var(name)) or cfg.rpc_url
        out[name] = NetworkConfig(name, rpc_url, cfg.pool_address)
    return out


def rpc_timeout(env: Optional[Mapping[str, str]] = None) -> int:
    env = os.environ if env is None else env
    raw = env.get("RPC_TIMEOUT")
    if not raw:
        return DEFAULT_RPC_TIMEOUT
    try:
        timeout = int(raw)
    except ValueError:
        raise UsageError(f"RPC_TIMEOUT must be an integer number of seconds, got {raw!r}")
    if timeout <= 0:
        raise UsageError(f"RPC_TIMEOUT must be positive, got {timeout}")
    return timeout
