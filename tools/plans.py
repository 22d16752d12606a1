"""
Plan Executors
--------------
Default executors for chain and analytics intents.

They do not sign or broadcast anything. Each one returns the exact
action the signing or analytics collaborator has to carry out on the
Monad testnet, so a host can swap in a real handler per intent.
"""

from decimal import Decimal
from typing import Any, Dict

from .registry import ExecutorOutput

CHAIN_ID = 10143
NATIVE_SYMBOL = "MON"
EXPLORER_URL = "https://testnet.monadexplorer.com"
UNISWAP_ROUTER = "0xCa810D095e90Daae6e867c19DF6D9A8C56db2c89"
WRAPPED_MON = "0x760AfE86e5de5fa0Ee542fc7B7B713e1c5425701"

WEI_PER_MON = Decimal(10) ** 18


def format_amount(amount: float) -> str:
    """2.0 -> '2', 2.50 -> '2.5', 1e-06 -> '0.000001'."""
    return format(Decimal(repr(amount)).normalize(), "f")


def to_wei(amount: float) -> int:
    return int(Decimal(repr(amount)) * WEI_PER_MON)


def plan_swap(params: Dict[str, Any]) -> ExecutorOutput:
    amount = params["amount"]
    token = params["contractAddress"]

    return ExecutorOutput(
        text=f"Swap prepared: {format_amount(amount)} {NATIVE_SYMBOL} to {token}",
        data={
            "chainId": CHAIN_ID,
            "method": "swapExactETHForTokens",
            "router": UNISWAP_ROUTER,
            "path": [WRAPPED_MON, token],
            "amountOutMin": 0,
            "valueWei": str(to_wei(amount)),
        },
    )


def plan_send(params: Dict[str, Any]) -> ExecutorOutput:
    amount = params["amount"]
    to_address = params["toAddress"]

    return ExecutorOutput(
        text=f"Transfer prepared: {format_amount(amount)} {NATIVE_SYMBOL} to {to_address}",
        data={
            "chainId": CHAIN_ID,
            "to": to_address,
            "valueWei": str(to_wei(amount)),
            "gasLimit": 21000,
        },
    )


def plan_token_analysis(params: Dict[str, Any]) -> ExecutorOutput:
    token = params["tokenAddress"]

    return ExecutorOutput(
        text=f"Token analysis requested for {token}",
        data={
            "chainId": CHAIN_ID,
            "tokenAddress": token,
            "explorer": f"{EXPLORER_URL}/token/{token}",
            "report": f"token_analysis_{token}.json",
        },
    )


def plan_address_analysis(params: Dict[str, Any]) -> ExecutorOutput:
    address = params["address"]

    return ExecutorOutput(
        text=f"Address analysis requested for {address}",
        data={
            "chainId": CHAIN_ID,
            "address": address,
            "explorer": f"{EXPLORER_URL}/address/{address}",
            "report": f"address_analysis_{address}.json",
        },
    )
