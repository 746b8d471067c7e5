#!/usr/bin/env python3
"""
Run the tagger dashboard.

Usage:
    python run_server.py
    python run_server.py --port 8080 --debug
"""

import argparse

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from tritag import TaggerConfig
from tritag.suffix import UnknownHandler
from web.app import app


def banner(host: str, port: int) -> Panel:
    defaults = TaggerConfig()
    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("Dashboard", f"http://{host}:{port}")
    table.add_row("Unknown word handlers", ", ".join(h.value for h in UnknownHandler))
    table.add_row("Default handler", defaults.unknown_handler)
    table.add_row("Default beam factor", f"{defaults.beam_factor:g}")
    table.add_row("Suffix length", str(defaults.suffix.max_suffix_len))
    return Panel(table, title="[bold blue]Trigram HMM Tagger[/bold blue]", border_style="blue")


def main():
    parser = argparse.ArgumentParser(description='Run the trigram HMM tagger dashboard')
    parser.add_argument('--host', default='127.0.0.1', help='Host to bind to')
    parser.add_argument('--port', type=int, default=5000, help='Port to bind to')
    parser.add_argument('--debug', action='store_true', help='Enable debug mode')
    args = parser.parse_args()

    Console().print(banner(args.host, args.port))
    app.run(host=args.host, port=args.port, debug=args.debug, threaded=True)


if __name__ == '__main__':
    main()
