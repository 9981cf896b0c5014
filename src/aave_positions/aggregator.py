# /src/aave_positions/aggregator.py
import logging
from decimal import Decimal, getcontext
from typing import Dict

from .readers import get_borrow, get_deposit, get_reserve_addresses, get_reserve_info, get_reserves_list

logger = logging.getLogger(__name__)

# =========================
# Precision configuration
# =========================
getcontext().prec = 120  # high precision for intermediate math


def D(x) -> Decimal:
    return x if isinstance(x, Decimal) else Decimal(str(x))


def to_units(raw: int, decimals: int) -> Decimal:
    if decimals <= 0:
        return D(raw)
    return D(raw) / (Decimal(10) ** decimals)


def net_position(deposit: int, borrow: int) -> int:
    # signed, never clamped
    return int(deposit) - int(borrow)


def get_balances(w3, pool_address: str, account: str) -> Dict[str, float]:
    """
    Net balance (deposit minus stable and variable debt) of `account` for
    every reserve of the pool, keyed by the reserve token symbol.

    Reserves are read one after another in the order the pool lists them.
    Any failed read aborts the whole network: no partial report is returned.
    """
    reserves = get_reserves_list(w3, pool_address)
    logger.debug("Pool %s lists %d reserves", pool_address, len(reserves))

    result: Dict[str, float] = {}
    for reserve in reserves:
        info = get_reserve_info(w3, reserve)
        addrs = get_reserve_addresses(w3, pool_address, reserve)
        deposit = get_deposit(w3, addrs.a_token, account)
        borrow = get_borrow(w3, addrs.stable_debt_token, addrs.variable_debt_token, account)

        balance = net_position(deposit, borrow)
        logger.debug("%s (%s): deposit=%d borrow=%d net=%d",
                     info.symbol, reserve, deposit, borrow, balance)

        if info.symbol in result:
            logger.warning("Symbol %s listed twice in pool %s; keeping %s",
                           info.symbol, pool_address, reserve)
        result[info.symbol] = float(to_units(balance, info.decimals))
    return result
