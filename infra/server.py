#!/usr/bin/env python3
"""
Monad Command Server
--------------------
Runs the FastAPI service bus with an orchestrator.

Usage:
    python -m infra.server --port 4000
    python -m infra.server --dry-run --config config.yaml
"""

import argparse
import logging
import sys
from pathlib import Path

# Ensure project root is in path
sys.path.insert(0, str(Path(__file__).parent.parent))

import uvicorn
from rich.console import Console

from api.client import create_anthropic_client
from api.llm import LLMClient
from core.orchestrator import create_orchestrator
from infra.config import ConfigManager
from infra.logging import configure_logging
from infra.service_bus import ServiceBus

console = Console()


def create_llm(config: ConfigManager) -> LLMClient:
    """Build the language model client from the llm config section."""
    llm = config.get_section("llm")
    client = create_anthropic_client(
        base_url=llm["base_url"],
        api_key_env=llm["api_key_env"],
        timeout_seconds=float(llm["timeout_seconds"]),
    )
    return LLMClient(client, model=llm["model"], max_tokens=int(llm["max_tokens"]))


def main(argv=None):
    parser = argparse.ArgumentParser(description="Monad Command Server")
    parser.add_argument("--config", default="config.yaml", help="Path to config file")
    parser.add_argument("--host", default=None, help="Host to bind to (default from config)")
    parser.add_argument("--port", type=int, default=None, help="Port to bind to (default from config)")
    parser.add_argument("--dry-run", action="store_true", help="Describe actions instead of running them")
    parser.add_argument("--log-level", default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    args = parser.parse_args(argv)

    config = ConfigManager(args.config)
    log_level = args.log_level or config.get("logging.level", "INFO")
    configure_logging(
        level=getattr(logging, str(log_level).upper(), logging.INFO),
        log_dir=config.get("logging.dir"),
        file=bool(config.get("logging.file", True)),
    )

    host = args.host or config.get("server.host", "127.0.0.1")
    port = args.port or int(config.get("server.port", 4000))

    console.print("[dim]Creating orchestrator...[/dim]")
    orchestrator = create_orchestrator(config, dry_run=True if args.dry_run else None)

    llm = create_llm(config)
    if not llm.is_configured:
        console.print(f"[yellow]{config.get('llm.api_key_env')} not set; /ask will fail[/yellow]")

    bus = ServiceBus(orchestrator, llm)
    app = bus.create_app()

    console.print("\n[bold green]Monad Command Server[/bold green]")
    console.print(f"Running on http://{host}:{port}")
    console.print(f"Ask endpoint: POST http://{host}:{port}/ask with {{\"prompt\": \"your question\"}}")
    console.print(f"Command endpoint: POST http://{host}:{port}/command with {{\"command\": \"swap 2 MON to 0x...\"}}")
    console.print("[dim]Press Ctrl+C to stop[/dim]\n")

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=str(log_level).lower()
    )


if __name__ == "__main__":
    main()
