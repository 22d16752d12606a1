#!/usr/bin/env python3
"""
MCP Tool Server
---------------
Exposes the command interpreter to MCP clients over stdio.

Tools:
    interpret-command  any natural-language command
    swap-mon           swap phrasings only
    check-twitter      username history for a handle
    analyze-token      token analysis for a contract address
    analyze-address    wallet analysis for an address
    list-intents       recognized intents and their phrasings

Usage:
    python -m infra.mcp_server --config config.yaml
"""

from typing import Any, Dict, List, Optional
import argparse
import logging
import re
import sys
from pathlib import Path

# Ensure project root is in path
sys.path.insert(0, str(Path(__file__).parent.parent))

from mcp.server.fastmcp import FastMCP

from commands import ActionDescriptor, Intent
from commands.slots import ADDRESS
from core.errors import InterpreterError, create_validation_error
from core.orchestrator import CommandResult, Orchestrator, create_orchestrator
from infra.config import ConfigManager
from infra.logging import TurnContext, configure_logging

SERVER_NAME = "Monad MCP AIO"

SWAP_HELP = "Could not understand the command. Please specify the amount and contract address."

_ADDRESS = re.compile(f"^{ADDRESS.regex}$", re.IGNORECASE)


class MonadTools:
    """
    Tool implementations, independent of the MCP runtime.
    Each tool returns the text shown to the MCP client.
    """

    def __init__(self, orchestrator: Orchestrator):
        self._orchestrator = orchestrator
        self._logger = logging.getLogger("monad.infra.mcp")

    @staticmethod
    def _render(result: CommandResult) -> str:
        if result.success:
            return result.output or "Done."
        return f"Error: {result.error}"

    def _invalid(self, field: str, message: str) -> str:
        error = create_validation_error(message, field)
        return f"Error: {self._orchestrator.error_handler.handle(error)}"

    def _run(self, intent: Intent, params: Dict[str, Any]) -> str:
        with TurnContext() as turn_id:
            result = self._orchestrator.execute(
                ActionDescriptor(intent, params),
                text=f"{intent.value} {params}",
                turn_id=turn_id,
            )
        return self._render(result)

    def interpret_command(self, command: str) -> str:
        return self._render(self._orchestrator.process_text(command))

    def swap_mon(self, command: str) -> str:
        try:
            action = self._orchestrator.interpret(command)
        except InterpreterError as e:
            self._logger.info(f"swap-mon could not interpret '{command}': {e}")
            return SWAP_HELP

        if action.intent != Intent.SWAP:
            return SWAP_HELP

        with TurnContext() as turn_id:
            result = self._orchestrator.execute(action, text=command, turn_id=turn_id)
        return self._render(result)

    def check_twitter(self, screen_name: str) -> str:
        return self._run(Intent.CHECK_TWITTER, {"screenName": screen_name.strip()})

    def analyze_token(self, token_address: str) -> str:
        token_address = token_address.strip()
        if not _ADDRESS.match(token_address):
            return self._invalid("token_address", f"Invalid token address: {token_address}")
        return self._run(Intent.ANALYZE_TOKEN, {"tokenAddress": token_address})

    def analyze_address(self, address: str) -> str:
        address = address.strip()
        if not _ADDRESS.match(address):
            return self._invalid("address", f"Invalid address: {address}")
        return self._run(Intent.ANALYZE_ADDRESS, {"address": address})

    def list_intents(self) -> List[Dict[str, Any]]:
        registry = self._orchestrator.interpreter.registry
        return [
            {
                "intent": intent.value,
                "description": registry.get_definition(intent).description,
                "patterns": [p.template for p in registry.patterns_for_intent(intent)],
            }
            for intent in registry.all_intents_in_priority_order()
        ]


def create_mcp_server(orchestrator: Orchestrator) -> FastMCP:
    """Register every tool on a FastMCP server."""
    mcp = FastMCP(name=SERVER_NAME)
    tools = MonadTools(orchestrator)

    @mcp.tool(name="interpret-command", description="Interpret and run a natural-language command")
    def interpret_command(command: str) -> str:
        return tools.interpret_command(command)

    @mcp.tool(name="swap-mon", description="Swap MON for a token, e.g. 'swap 2 MON to 0x...'")
    def swap_mon(command: str) -> str:
        return tools.swap_mon(command)

    @mcp.tool(name="check-twitter", description="Check username change history of a Twitter account")
    def check_twitter(screen_name: str) -> str:
        return tools.check_twitter(screen_name)

    @mcp.tool(name="analyze-token", description="Analyze a token contract on Monad testnet")
    def analyze_token(token_address: str) -> str:
        return tools.analyze_token(token_address)

    @mcp.tool(name="analyze-address", description="Analyze a wallet address on Monad testnet")
    def analyze_address(address: str) -> str:
        return tools.analyze_address(address)

    @mcp.tool(name="list-intents", description="List recognized commands and their phrasings")
    def list_intents() -> List[Dict[str, Any]]:
        return tools.list_intents()

    return mcp


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Monad MCP tool server (stdio)")
    parser.add_argument("--config", default="config.yaml", help="Path to config file")
    parser.add_argument("--dry-run", action="store_true", help="Describe actions instead of running them")
    args = parser.parse_args(argv)

    config = ConfigManager(args.config)
    # stdout carries the MCP protocol; log to file only
    configure_logging(
        level=getattr(logging, str(config.get("logging.level", "INFO")).upper(), logging.INFO),
        log_dir=config.get("logging.dir"),
        console=False,
    )

    orchestrator = create_orchestrator(config, dry_run=True if args.dry_run else None)
    create_mcp_server(orchestrator).run("stdio")


if __name__ == "__main__":
    main()
