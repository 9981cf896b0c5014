# /src/aave_positions/readers.py
import logging
from typing import Any, NamedTuple

from requests.exceptions import RequestException
from web3 import Web3
from web3.exceptions import BadFunctionCallOutput, ContractLogicError, Web3Exception

from .abis import (
    ATOKEN_ABI,
    ERC20_ABI,
    POOL_ABI,
    RESERVE_DATA_ATOKEN,
    RESERVE_DATA_STABLE_DEBT,
    RESERVE_DATA_VARIABLE_DEBT,
    STABLE_DEBT_TOKEN_ABI,
    VARIABLE_DEBT_TOKEN_ABI,
)
from .errors import DecodeError, RemoteCallError

logger = logging.getLogger(__name__)


class ReserveInfo(NamedTuple):
    symbol: str
    decimals: int


class ReserveAddresses(NamedTuple):
    a_token: str
    stable_debt_token: str
    variable_debt_token: str


def call(fn, what: str) -> Any:
    """Run a contract read, translating web3/transport failures into our errors."""
    try:
        return fn.call()
    except (ContractLogicError, BadFunctionCallOutput) as e:
        raise DecodeError(f"{what}: {e}") from e
    except (Web3Exception, RequestException, OSError) as e:
        raise RemoteCallError(f"{what}: {e}") from e
    except ValueError as e:
        # JSON-RPC error responses surface as ValueError on older web3 releases
        raise RemoteCallError(f"{what}: {e}") from e


def _contract(w3, address: str, abi):
    return w3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)


def _is_zero(address: str) -> bool:
    return int(address, 16) == 0


def get_reserve_info(w3, token: str) -> ReserveInfo:
    erc = _contract(w3, token, ERC20_ABI)
    symbol = call(erc.functions.symbol(), f"symbol() on {token}")
    decimals = call(erc.functions.decimals(), f"decimals() on {token}")
    if not isinstance(symbol, str) or not isinstance(decimals, int) or decimals < 0:
        raise DecodeError(f"Unexpected token metadata from {token}: {symbol!r}, {decimals!r}")
    return ReserveInfo(symbol=symbol, decimals=int(decimals))


def get_reserves_list(w3, pool_address: str) -> list:
    pool = _contract(w3, pool_address, POOL_ABI)
    reserves = call(pool.functions.getReservesList(), f"getReservesList() on {pool_address}")
    return [Web3.to_checksum_address(a) for a in reserves]


def get_reserve_addresses(w3, pool_address: str, asset: str) -> ReserveAddresses:
    pool = _contract(w3, pool_address, POOL_ABI)
    rd = call(pool.functions.getReserveData(Web3.to_checksum_address(asset)),
              f"getReserveData({asset})")
    try:
        return ReserveAddresses(
            a_token=Web3.to_checksum_address(rd[RESERVE_DATA_ATOKEN]),
            stable_debt_token=Web3.to_checksum_address(rd[RESERVE_DATA_STABLE_DEBT]),
            variable_debt_token=Web3.to_checksum_address(rd[RESERVE_DATA_VARIABLE_DEBT]),
        )
    except (IndexError, TypeError, ValueError) as e:
        raise DecodeError(f"Malformed reserve data for {asset}: {e}") from e


def _balance_of(w3, token: str, abi, account: str) -> int:
    if _is_zero(token):
        return 0
    contract = _contract(w3, token, abi)
    return int(call(contract.functions.balanceOf(Web3.to_checksum_address(account)),
                    f"balanceOf({account}) on {token}"))


def get_deposit(w3, a_token: str, account: str) -> int:
    return _balance_of(w3, a_token, ATOKEN_ABI, account)


def get_borrow(w3, stable_debt_token: str, variable_debt_token: str, account: str) -> int:
    """Stable plus variable debt, in raw units of the underlying asset."""
    stable = _balance_of(w3, stable_debt_token, STABLE_DEBT_TOKEN_ABI, account)
    variable = _balance_of(w3, variable_debt_token, VARIABLE_DEBT_TOKEN_ABI, account)
    return stable + variable
