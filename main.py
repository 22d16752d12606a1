#!/usr/bin/env python3
"""
Monad Commands - Natural-Language Actions for the Monad Testnet
===============================================================

Main entry point for the command-line interface.

Usage:
    python main.py swap 2 MON to 0x...        # Interpret and execute once
    python main.py --interpret-only cek twitter @elonmusk
    python main.py --test                     # Interactive text mode
    python main.py --help                     # Show help

Exit codes: 0 success, 1 failure, 2 command not recognized.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Ensure project root is in path
sys.path.insert(0, str(Path(__file__).parent))

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from commands import ActionDescriptor
from core.errors import ErrorCategory, InterpreterError
from core.orchestrator import CommandResult, Orchestrator, create_orchestrator
from infra.config import ConfigManager
from infra.logging import configure_logging

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_NOT_RECOGNIZED = 2

# Setup rich console
console = Console()


def setup_logging(config: ConfigManager, level: Optional[str] = None) -> None:
    """Configure logging from config, with an optional level override."""
    level = level or config.get("logging.level", "INFO")
    configure_logging(
        level=getattr(logging, str(level).upper(), logging.INFO),
        log_dir=config.get("logging.dir"),
        file=bool(config.get("logging.file", True)),
        rich_console=Console(stderr=True),
    )


def print_banner(dry_run: bool = False) -> None:
    """Print the welcome banner."""
    banner = Text()
    banner.append("MONAD TESTNET", style="bold green")
    banner.append(" - Natural-Language Commands\n", style="dim")

    if dry_run:
        banner.append("Mode: Dry run\n\n", style="yellow")
    else:
        banner.append("Mode: Live\n\n", style="green")

    banner.append("Type ", style="dim")
    banner.append("help", style="bold green")
    banner.append(" for examples | ", style="dim")
    banner.append("quit", style="bold red")
    banner.append(" to exit", style="dim")

    console.print(Panel(banner, title="Welcome", border_style="blue"))


def print_status(orchestrator: Orchestrator) -> None:
    """Print current system status."""
    status = orchestrator.get_status()
    errors = sum(status["errors"].values())

    console.print(f"[dim]Intents: {status['intents_loaded']} | "
                  f"Patterns: {status['patterns_loaded']} | "
                  f"Executors: {status['executors_loaded']} | "
                  f"Dry run: {'✓' if status['dry_run'] else '○'} | "
                  f"Errors: {errors}[/dim]")


def print_intents(orchestrator: Orchestrator) -> None:
    """Print intents in priority order with their phrasings."""
    registry = orchestrator.interpreter.registry

    table = Table(title="Recognized commands")
    table.add_column("Intent", style="cyan")
    table.add_column("Patterns")

    for intent in registry.all_intents_in_priority_order():
        templates = [pattern.template for pattern in registry.patterns_for_intent(intent)]
        table.add_row(intent.value, "\n".join(templates))

    console.print(table)


def on_command(action: ActionDescriptor) -> None:
    """Callback for interpreted commands."""
    console.print(f"[bold yellow]Command:[/bold yellow] {action.intent.value}")
    if action.params:
        console.print(f"[dim]Parameters: {action.params}[/dim]")


def on_result(result: CommandResult) -> None:
    """Callback for command results."""
    if result.success:
        console.print(f"[bold green]Result:[/bold green] {result.output}")
    else:
        console.print(f"[bold red]Error:[/bold red] {result.error}")

    if result.execution_time_ms > 0:
        console.print(f"[dim]Execution time: {result.execution_time_ms:.1f}ms[/dim]")


def exit_code_for(result: CommandResult) -> int:
    if result.success:
        return EXIT_OK
    if result.error_category == ErrorCategory.NO_MATCH:
        return EXIT_NOT_RECOGNIZED
    return EXIT_FAILED


def run_interpret_only(orchestrator: Orchestrator, text: str) -> int:
    """Print the action descriptor as JSON without executing it."""
    try:
        action = orchestrator.interpret(text)
    except InterpreterError as e:
        console.print(f"[bold red]Error:[/bold red] {orchestrator.error_handler.handle_exception(e)}")
        return EXIT_NOT_RECOGNIZED if e.category == ErrorCategory.NO_MATCH else EXIT_FAILED

    console.print_json(json.dumps(action.to_dict()))
    return EXIT_OK


def run_once(orchestrator: Orchestrator, text: str) -> int:
    """Interpret and execute a single command."""
    orchestrator.on_command(on_command)
    orchestrator.on_result(on_result)
    return exit_code_for(orchestrator.process_text(text))


def run_text_mode(orchestrator: Orchestrator) -> None:
    """Run in text input mode."""
    orchestrator.on_command(on_command)
    orchestrator.on_result(on_result)

    print_banner(orchestrator.config.dry_run)
    print_status(orchestrator)

    while True:
        try:
            text = console.input("\n[bold cyan]>[/bold cyan] ").strip()

            if not text:
                continue

            if text.lower() in ("quit", "exit", "q"):
                break

            if text.lower() == "status":
                print_status(orchestrator)
                continue

            if text.lower() == "intents":
                print_intents(orchestrator)
                continue

            if text.lower() == "help":
                console.print("""
[bold]Example commands:[/bold]
  - swap 2 MON to 0x...      (tukar 2 MON ke 0x...)
  - send 0.5 MON to 0x...    (kirim 0.5 MON ke 0x...)
  - analyze token 0x...      (analisis token 0x...)
  - analyze wallet 0x...     (cek wallet 0x...)
  - check twitter @handle    (cek twitter @handle)

[bold]System commands:[/bold]
  - help      (show this)
  - intents   (list recognized phrasings)
  - status    (show system status)
  - quit      (exit)
""")
                continue

            orchestrator.process_text(text)

        except KeyboardInterrupt:
            break
        except EOFError:
            break

    console.print("\n[yellow]Shutting down...[/yellow]")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Monad testnet natural-language commands"
    )
    parser.add_argument(
        "command",
        nargs="*",
        help="Command text, e.g. swap 2 MON to 0x..."
    )
    parser.add_argument(
        "--test", "-t",
        action="store_true",
        help="Run in interactive text mode"
    )
    parser.add_argument(
        "--interpret-only", "-i",
        action="store_true",
        help="Print the interpreted action as JSON without executing it"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Describe actions instead of running them"
    )
    parser.add_argument(
        "--config", "-c",
        default="config.yaml",
        help="Path to configuration file"
    )
    parser.add_argument(
        "--log-level", "-l",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default from config)"
    )

    args = parser.parse_args(argv)

    if not args.test and not args.command:
        parser.print_help()
        return EXIT_FAILED

    config = ConfigManager(args.config)
    setup_logging(config, args.log_level)
    logger = logging.getLogger("monad.main")

    try:
        orchestrator = create_orchestrator(config, dry_run=True if args.dry_run else None)

        if args.test:
            run_text_mode(orchestrator)
            return EXIT_OK

        text = " ".join(args.command)
        if args.interpret_only:
            return run_interpret_only(orchestrator, text)
        return run_once(orchestrator, text)

    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        return 130
    except Exception as e:
        logger.exception("Fatal error")
        console.print(f"[bold red]Error:[/bold red] {e}")
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
