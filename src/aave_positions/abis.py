# /src/aave_positions/abis.py
from types import MappingProxyType

# =========================
# Minimal ABIs
# =========================
POOL_ABI = [
    {"name": "getReservesList", "inputs": [], "outputs": [{"type": "address[]", "name": ""}],
     "stateMutability": "view", "type": "function"},
    {"name": "getReserveData", "inputs": [{"name": "asset", "type": "address"}], "outputs": [
        {"name": "configuration", "type": "uint256"},
        {"name": "liquidityIndex", "type": "uint128"},
        {"name": "currentLiquidityRate", "type": "uint128"},
        {"name": "variableBorrowIndex", "type": "uint128"},
        {"name": "currentVariableBorrowRate", "type": "uint128"},
        {"name": "currentStableBorrowRate", "type": "uint128"},
        {"name": "lastUpdateTimestamp", "type": "uint40"},
        {"name": "id", "type": "uint16"},
        {"name": "aTokenAddress", "type": "address"},
        {"name": "stableDebtTokenAddress", "type": "address"},
        {"name": "variableDebtTokenAddress", "type": "address"},
        {"name": "interestRateStrategyAddress", "type": "address"},
        {"name": "accruedToTreasury", "type": "uint128"},
        {"name": "unbacked", "type": "uint128"},
        {"name": "isolationModeTotalDebt", "type": "uint128"},
    ], "stateMutability": "view", "type": "function"},
]

# Positions of the token addresses inside getReserveData's output tuple
RESERVE_DATA_ATOKEN = 8
RESERVE_DATA_STABLE_DEBT = 9
RESERVE_DATA_VARIABLE_DEBT = 10

_BALANCE_OF = {"name": "balanceOf", "inputs": [{"name": "user", "type": "address"}],
               "outputs": [{"type": "uint256"}], "stateMutability": "view", "type": "function"}
_UNDERLYING = {"name": "UNDERLYING_ASSET_ADDRESS", "inputs": [], "outputs": [{"type": "address"}],
               "stateMutability": "view", "type": "function"}
_SCALED_BALANCE_OF = {"name": "scaledBalanceOf", "inputs": [{"name": "user", "type": "address"}],
                      "outputs": [{"type": "uint256"}], "stateMutability": "view", "type": "function"}

ATOKEN_ABI = [_BALANCE_OF, _SCALED_BALANCE_OF, _UNDERLYING]

STABLE_DEBT_TOKEN_ABI = [
    _BALANCE_OF,
    _UNDERLYING,
    {"name": "getUserStableRate", "inputs": [{"name": "user", "type": "address"}],
     "outputs": [{"type": "uint256"}], "stateMutability": "view", "type": "function"},
]

VARIABLE_DEBT_TOKEN_ABI = [_BALANCE_OF, _SCALED_BALANCE_OF, _UNDERLYING]

ERC20_ABI = [
    {"name": "symbol", "inputs": [], "outputs": [{"type": "string"}],
     "stateMutability": "view", "type": "function"},
    {"name": "decimals", "inputs": [], "outputs": [{"type": "uint8"}],
     "stateMutability": "view", "type": "function"},
    {"name": "balanceOf", "inputs": [{"name": "owner", "type": "address"}],
     "outputs": [{"type": "uint256"}], "stateMutability": "view", "type": "function"},
    {"name": "totalSupply", "inputs": [], "outputs": [{"type": "uint256"}],
     "stateMutability": "view", "type": "function"},
]

ABIS = MappingProxyType({
    "Pool": POOL_ABI,
    "AToken": ATOKEN_ABI,
    "StableDebtToken": STABLE_DEBT_TOKEN_ABI,
    "VariableDebtToken": VARIABLE_DEBT_TOKEN_ABI,
    "ERC20": ERC20_ABI,
})
