# /src/aave_positions/handler.py
import argparse
import functools
import json
import logging
import os
import sys
import time
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Tuple

from dotenv import load_dotenv
from web3 import Web3

from . import __version__
from .aggregator import get_balances
from .errors import PositionsError, UsageError
from .logging_setup import configure_logging
from .networks import NETWORKS, NetworkConfig, load_networks, rpc_timeout
from .schema import validate_snapshot

logger = logging.getLogger(__name__)

USAGE = "Usage: aave-positions ADDRESS"

ConnectFn = Callable[[NetworkConfig], Any]


def _load_env() -> None:
    load_dotenv(dotenv_path=os.path.join(os.getcwd(), ".env"), override=True)


def checksum_account(addr: str) -> str:
    try:
        return Web3.to_checksum_address(addr.strip())
    except (ValueError, TypeError) as e:
        raise UsageError(f"Invalid address '{addr}'. {e}") from e


# =========================
# Connection
# =========================
def connect(network: NetworkConfig, timeout: Optional[int] = None) -> Web3:
    if timeout is None:
        timeout = rpc_timeout()
    logger.debug("Connecting to %s at %s", network.name, network.rpc_url)
    return Web3(Web3.HTTPProvider(network.rpc_url, request_kwargs={"timeout": timeout}))


# =========================
# Per-network iteration
# =========================
def iter_network_balances(
    account: str,
    networks: Mapping[str, NetworkConfig],
    connect_fn: ConnectFn = connect,
    keep_going: bool = False,
) -> Iterator[Tuple[str, Optional[Dict[str, float]], Optional[PositionsError]]]:
    """
    Yield (network, report, error) in registry order.

    By default the first failure propagates and later networks are never
    queried. With keep_going the failure is logged, yielded as `error`, and
    the loop moves on to the next network.
    """
    for name, cfg in networks.items():
        w3 = connect_fn(cfg)
        try:
            report = get_balances(w3, cfg.pool_address, account)
        except PositionsError as e:
            if not keep_going:
                raise
            logger.error("%s: %s", name, e)
            yield name, None, e
            continue
        logger.info("%s: %d reserves", name, len(report))
        yield name, report, None


def run(
    account: str,
    networks: Optional[Mapping[str, NetworkConfig]] = None,
    connect_fn: ConnectFn = connect,
    keep_going: bool = False,
    out: Callable[..., None] = print,
) -> Dict[str, str]:
    """
    Print one `<network> <report>` line per network. Returns the per-network
    error messages collected with keep_going (always empty otherwise).
    """
    if not account:
        out(USAGE)
        return {}

    networks = NETWORKS if networks is None else networks
    errors: Dict[str, str] = {}
    for name, report, error in iter_network_balances(account, networks, connect_fn, keep_going):
        if error is not None:
            errors[name] = str(error)
            out(name, f"ERROR: {error}")
        else:
            out(name, report)
    return errors


# =========================
# Snapshot (JSON) output
# =========================
def build_snapshot(
    account: str,
    networks: Optional[Mapping[str, NetworkConfig]] = None,
    connect_fn: ConnectFn = connect,
    keep_going: bool = False,
) -> Dict[str, Any]:
    t0 = time.perf_counter()
    networks = NETWORKS if networks is None else networks

    reports: Dict[str, Dict[str, float]] = {}
    errors: Dict[str, str] = {}
    for name, report, error in iter_network_balances(account, networks, connect_fn, keep_going):
        if error is not None:
            errors[name] = str(error)
        else:
            reports[name] = report

    snapshot = {
        "address": account,
        "timestamp": int(time.time()),
        "networks": reports,
        "errors": errors,
        "meta": {
            "data_provider": "aave-v3",
            "latency_ms": int((time.perf_counter() - t0) * 1000),
            "version": __version__,
        },
    }
    problems = validate_snapshot(snapshot)
    if problems:
        raise RuntimeError("Snapshot does not match schema: " + "; ".join(problems))
    return snapshot


# =========================
# Serverless-style entrypoint
# =========================
def handler(event: Dict[str, Any], connect_fn: ConnectFn = connect) -> Dict[str, Any]:
    """
    Called with JSON like:
      { "address": "0xYourWallet", "networks": ["polygon"], "keep_going": true }

    `networks` and `keep_going` are optional; the address falls back to
    MY_ADDRESS from .env or the environment.
    """
    _load_env()

    addr = event.get("address") or os.environ.get("MY_ADDRESS")
    if not addr:
        raise UsageError("Missing 'address'. Provide wallet address in request or MY_ADDRESS in .env.")
    account = checksum_account(addr)
    networks = load_networks(only=event.get("networks"))
    return build_snapshot(account, networks, connect_fn, keep_going=bool(event.get("keep_going")))


# =========================
# CLI
# =========================
def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="aave-positions",
        description="Net Aave v3 position (deposits minus borrows) per reserve on every supported chain",
    )
    parser.add_argument("address", nargs="?", help="Wallet address (checksum or hex).")
    parser.add_argument("--network", dest="networks", action="append", choices=list(NETWORKS),
                        help="Only query this network (repeatable). Default: all.")
    parser.add_argument("--json-only", action="store_true",
                        help="Print ONLY the JSON snapshot to stdout.")
    parser.add_argument("--keep-going", action="store_true",
                        help="Report a failing network and continue with the next one.")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level for stderr (default: WARNING)")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    _load_env()
    args = _parse_args(argv)
    configure_logging(args.log_level)

    addr = args.address or os.environ.get("MY_ADDRESS")
    if not addr:
        run("")
        return 0

    try:
        account = checksum_account(addr)
        networks = load_networks(only=args.networks)
        timeout = rpc_timeout()
    except UsageError as e:
        raise SystemExit(f"Error: {e}")

    connect_fn = functools.partial(connect, timeout=timeout)
    if args.json_only:
        snapshot = build_snapshot(account, networks, connect_fn, keep_going=args.keep_going)
        print(json.dumps(snapshot, ensure_ascii=False))
        return 1 if snapshot["errors"] else 0

    errors = run(account, networks, connect_fn, keep_going=args.keep_going)
    return 1 if errors else 0


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
