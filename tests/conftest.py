"""Shared fixtures: an in-memory stand-in for a Web3 connection."""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Tuple

import pytest
from web3.exceptions import BadFunctionCallOutput

from aave_positions.networks import AAVE_V3_POOL

ZERO = "0x" + "0" * 40
ACCOUNT = "0x" + "ab" * 20
POOL = AAVE_V3_POOL


def addr(n: int) -> str:
    return "0x" + f"{n:040x}"


class FakeCall:
    def __init__(self, chain: "FakeWeb3", address: str, name: str, args: Tuple[Any, ...]) -> None:
        self.chain = chain
        self.address = address
        self.name = name
        self.args = args

    def call(self) -> Any:
        self.chain.calls.append((self.address.lower(), self.name, self.args))
        methods = self.chain.contracts.get(self.address.lower())
        if methods is None or self.name not in methods:
            raise BadFunctionCallOutput(f"Could not decode output of {self.name} at {self.address}")
        impl = methods[self.name]
        return impl(*self.args) if callable(impl) else impl


class _Functions:
    def __init__(self, chain: "FakeWeb3", address: str) -> None:
        self._chain = chain
        self._address = address

    def __getattr__(self, name: str) -> Callable[..., FakeCall]:
        return lambda *args: FakeCall(self._chain, self._address, name, args)


class FakeContract:
    def __init__(self, chain: "FakeWeb3", address: str, abi: List[Dict[str, Any]]) -> None:
        self.address = address
        self.abi = abi
        self.functions = _Functions(chain, address)


class _Eth:
    def __init__(self, chain: "FakeWeb3") -> None:
        self._chain = chain

    def contract(self, address: str, abi: List[Dict[str, Any]]) -> FakeContract:
        return FakeContract(self._chain, address, abi)


class FakeWeb3:
    """Answers contract reads from plain dicts and records every call made."""

    def __init__(self) -> None:
        self.contracts: Dict[str, Dict[str, Any]] = {}
        self.calls: List[Tuple[str, str, Tuple[Any, ...]]] = []
        self.eth = _Eth(self)

    def add_contract(self, address: str, **methods: Any) -> None:
        self.contracts.setdefault(address.lower(), {}).update(methods)

    def add_token(self, address: str, symbol: Any = None, decimals: Any = None,
                  balances: Dict[str, int] | None = None) -> None:
        methods: Dict[str, Any] = {}
        if symbol is not None:
            methods["symbol"] = symbol
        if decimals is not None:
            methods["decimals"] = decimals
        if balances is not None:
            held = {k.lower(): v for k, v in balances.items()}
            methods["balanceOf"] = lambda who: held.get(who.lower(), 0)
        self.add_contract(address, **methods)

    def add_pool(self, pool: str, reserves: List[Tuple[str, str, str, str]]) -> None:
        data = {asset.lower(): (a, s, v) for asset, a, s, v in reserves}

        def get_reserve_data(asset: str) -> tuple:
            a, s, v = data[asset.lower()]
            # 15-field v3 layout, token addresses at 8..10
            return (0, 0, 0, 0, 0, 0, 0, 0, a, s, v, ZERO, 0, 0, 0)

        self.add_contract(
            pool,
            getReservesList=[asset for asset, _, _, _ in reserves],
            getReserveData=get_reserve_data,
        )

    def add_reserve(self, pool_reserves: List[Tuple[str, str, str, str]], n: int, symbol: str,
                    decimals: int, deposit: int = 0, stable: int = 0, variable: int = 0,
                    account: str = ACCOUNT) -> None:
        """Register the underlying and its three position tokens under ids n, n+1, n+2, n+3."""
        asset, a_token, s_debt, v_debt = addr(n), addr(n + 1), addr(n + 2), addr(n + 3)
        self.add_token(asset, symbol=symbol, decimals=decimals)
        self.add_token(a_token, balances={account: deposit})
        self.add_token(s_debt, balances={account: stable})
        self.add_token(v_debt, balances={account: variable})
        pool_reserves.append((asset, a_token, s_debt, v_debt))

    def call_count(self) -> int:
        return len(self.calls)


@pytest.fixture()
def fake_w3() -> FakeWeb3:
    return FakeWeb3()


@pytest.fixture()
def two_reserve_w3() -> FakeWeb3:
    """TKA (18 decimals, 2 deposited) and TKB (6 decimals, 5 deposited, 1 borrowed)."""
    w3 = FakeWeb3()
    reserves: List[Tuple[str, str, str, str]] = []
    w3.add_reserve(reserves, 0x100, "TKA", 18, deposit=2 * 10**18)
    w3.add_reserve(reserves, 0x200, "TKB", 6, deposit=5 * 10**6, variable=1 * 10**6)
    w3.add_pool(POOL, reserves)
    return w3


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """No .env file in cwd and no address/endpoint variables from the host."""
    monkeypatch.chdir(tmp_path)
    names = ["MY_ADDRESS", "RPC_TIMEOUT"] + [
        f"{n}_RPC_URL" for n in ("OPTIMISM", "ARBITRUM", "POLYGON",
                                 "FANTOM", "AVALANCHE", "HARMONY")
    ]
    for name in names:
        # set first so anything load_dotenv writes is undone at teardown
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
