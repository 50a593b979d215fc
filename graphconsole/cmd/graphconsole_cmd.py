#!/usr/bin/env python3
"""
GraphConsole Command Line Interface

Interactive REPL for querying pyoxigraph repositories with SPARQL.
Commands and queries end with a semicolon and may span several lines.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from prompt_toolkit import prompt
from prompt_toolkit.history import FileHistory
from prompt_toolkit.shortcuts import CompleteStyle
from tabulate import tabulate

from graphconsole import __version__
from graphconsole.config.config_loader import ConfigurationError, GraphConsoleConfig
from graphconsole.console.console_io import ConsoleIO
from graphconsole.console.console_parameters import ConsoleParameters
from graphconsole.console.console_state import ConsoleState
from graphconsole.console.query_evaluator import QueryEvaluator
from graphconsole.repository.repository import GraphRepository
from graphconsole.repository.repository_errors import GraphConsoleError

logger = logging.getLogger(__name__)

QUERY_KEYWORDS = ('select', 'construct', 'describe', 'ask', 'prefix', 'base', 'sparql', 'serql')


class GraphConsoleREPL:
    """GraphConsole REPL implementation with repository management."""

    def __init__(self, config: GraphConsoleConfig, console_io: Optional[ConsoleIO] = None):
        self.config = config
        self.console_io = console_io or ConsoleIO()
        self.state = ConsoleState()
        self.parameters = ConsoleParameters.from_config(config.get_console_config())
        self.query_evaluator = QueryEvaluator(self.console_io, self.state, self.parameters)

    def parse_command(self, command_line: str) -> tuple[str, list[str]]:
        """Parse a command line into command and arguments."""
        # Remove trailing semicolon if present
        if command_line.strip().endswith(';'):
            command_line = command_line.strip()[:-1]

        parts = command_line.strip().split()
        if not parts:
            return "", []

        return parts[0].lower(), parts[1:]

    def execute_command(self, command_line: str) -> bool:
        """Execute a REPL command. Returns False if should exit."""
        if not command_line.strip():
            return True

        command, args = self.parse_command(command_line)

        if command in QUERY_KEYWORDS:
            return self.cmd_query(command_line.strip().rstrip(';'))
        elif command in ['exit', 'quit']:
            return self.cmd_exit(args)
        elif command == 'open':
            return self.cmd_open(args)
        elif command == 'close':
            return self.cmd_close(args)
        elif command == 'load':
            return self.cmd_load(args)
        elif command == 'namespace':
            return self.cmd_namespace(args)
        elif command == 'set':
            return self.cmd_set(args)
        elif command == 'info':
            return self.cmd_info(args)
        elif command in ['help', '?']:
            return self.cmd_help(args)
        else:
            self.console_io.writeln(f"Unknown command: {command}")
            self.console_io.writeln("Type 'help;' or '?;' for available commands.")
            return True

    def cmd_exit(self, args: List[str]) -> bool:
        """Exit the REPL."""
        self.close_repository()
        self.console_io.writeln("Bye")
        return False

    def cmd_open(self, args: List[str]) -> bool:
        """Open an in-memory repository, or an on-disk one at the given directory."""
        if self.state.is_open():
            self.console_io.writeln("Repository already open. Use 'close;' first.")
            return True

        repository_config = self.config.get_repository_config()
        data_dir = args[0] if args else repository_config.get('path')
        repository = GraphRepository(
            data_dir=data_dir,
            parser_config=self.config.get_parser_config(),
            namespaces=self.config.get_namespaces(),
            with_default_namespaces=bool(repository_config.get('default_namespaces', True))
        )
        try:
            repository.init()
            for data_file in repository_config.get('data_files') or []:
                with repository.get_connection() as con:
                    con.load_file(data_file)
        except GraphConsoleError as e:
            repository.shut_down()
            self.console_io.write_error(str(e))
            return True

        self.state.set_repository(repository)
        self.console_io.writeln(f"Opened repository '{repository.name}'")
        return True

    def cmd_close(self, args: List[str]) -> bool:
        """Close the current repository."""
        if not self.state.is_open():
            self.console_io.writeln("No repository is open.")
            return True
        name = self.state.get_repository().name
        self.close_repository()
        self.console_io.writeln(f"Closed repository '{name}'")
        return True

    def cmd_load(self, args: List[str]) -> bool:
        """Load an RDF file into the current repository."""
        repository = self.state.get_repository()
        if repository is None:
            self.console_io.write_unopened_error()
            return True
        if not args:
            self.console_io.writeln("Usage: load <file>;")
            return True

        try:
            with repository.get_connection() as con:
                added = con.load_file(args[0])
            self.console_io.writeln(f"Loaded {added} statements from {args[0]}")
        except GraphConsoleError as e:
            self.console_io.write_error(str(e))
        return True

    def cmd_namespace(self, args: List[str]) -> bool:
        """List namespaces, or declare one with 'namespace <prefix> <iri>;'."""
        repository = self.state.get_repository()
        if repository is None:
            self.console_io.write_unopened_error()
            return True

        with repository.get_connection() as con:
            if not args:
                rows = [[ns.prefix, ns.name] for ns in con.get_namespaces()]
                if not rows:
                    self.console_io.writeln("(No namespaces declared)")
                else:
                    self.console_io.writeln(tabulate(rows, headers=["Prefix", "Namespace"]))
            elif len(args) == 2:
                prefix = args[0].rstrip(':')
                con.set_namespace(prefix, args[1].strip('<>'))
                self.console_io.writeln(f"Namespace {prefix}: set to {args[1].strip('<>')}")
            else:
                self.console_io.writeln("Usage: namespace [<prefix> <namespace>];")
        return True

    def cmd_set(self, args: List[str]) -> bool:
        """Show or change console parameters."""
        if not args:
            for key, value in self.parameters.as_dict().items():
                self.console_io.writeln(f"{key}: {value}")
            return True

        key, _, value = " ".join(args).partition('=')
        key = key.strip().lower()
        value = value.strip().lower()
        try:
            if key == 'width':
                self.parameters.set_width(int(value))
            elif key == 'showprefix':
                self.parameters.show_prefix = self._parse_switch(value)
            elif key == 'queryprefix':
                self.parameters.query_prefix = self._parse_switch(value)
            elif key == 'overflow':
                self.parameters.set_overflow(value)
            else:
                self.console_io.writeln(f"Unknown parameter: {key}")
                return True
        except ValueError as e:
            self.console_io.write_error(f"Invalid value for {key}: {e}")
        return True

    def cmd_info(self, args: List[str]) -> bool:
        """Show information about the current repository."""
        repository = self.state.get_repository()
        if repository is None:
            self.console_io.write_unopened_error()
            return True

        with repository.get_connection() as con:
            rows = [
                ["Repository", repository.name],
                ["Statements", con.size()],
                ["Namespaces", len(list(con.get_namespaces()))],
            ]
        self.console_io.writeln(tabulate(rows, tablefmt="plain"))
        return True

    def cmd_query(self, query_text: str) -> bool:
        """Evaluate a query and report typed failures."""
        try:
            self.query_evaluator.evaluate(query_text)
        except GraphConsoleError as e:
            self.console_io.write_error(str(e))
        except KeyboardInterrupt:
            self.console_io.writeln()
            self.console_io.write_error("Query interrupted")
        return True

    def cmd_help(self, args: List[str]) -> bool:
        """Show help information."""
        self.console_io.writeln("""
GraphConsole Commands:

Repository:
  open [dir];               - Open a repository (in memory without dir)
  close;                    - Close the current repository
  load <file>;              - Load an RDF file into the repository
  info;                     - Show repository information

Namespaces:
  namespace;                - List known namespaces
  namespace <p> <iri>;      - Declare a namespace prefix

Parameters:
  set;                      - Show console parameters
  set width=<n>;            - Set the display width
  set showprefix=on|off;    - Abbreviate IRIs with known prefixes
  set queryprefix=on|off;   - Add known PREFIX declarations to queries
  set overflow=overflow|truncate;  - Policy for cells wider than a column

Queries:
  select ...;               - SPARQL SELECT, rendered as a table
  construct ...; describe ...;  - SPARQL graph queries, one triple per line
  ask ...;                  - SPARQL ASK
  sparql <query>;           - Query with an explicit language

General:
  help; ?;                  - Show this help message
  exit; quit;               - Exit the console

Repository Status: {}
""".format(self.state.get_repository().name if self.state.is_open() else "none open"))
        return True

    def close_repository(self) -> None:
        repository = self.state.get_repository()
        if repository is not None:
            repository.shut_down()
            self.state.set_repository(None)

    def _parse_switch(self, value: str) -> bool:
        if value in ('on', 'true', 'yes'):
            return True
        if value in ('off', 'false', 'no'):
            return False
        raise ValueError("expected on or off")

    def read_command(self, history: FileHistory) -> str:
        """Read lines until one ends with a semicolon."""
        lines = []
        while True:
            if lines:
                prompt_text = "  -> "
            elif self.state.is_open():
                prompt_text = f"{self.state.get_repository().name}> "
            else:
                prompt_text = "> "
            line = prompt(prompt_text, history=history, complete_style=CompleteStyle.READLINE_LIKE)
            lines.append(line)
            if line.rstrip().endswith(';') or (len(lines) == 1 and not line.strip()):
                return "\n".join(lines)

    def run_repl(self) -> None:
        """Run the interactive REPL."""
        self.console_io.writeln(f"GraphConsole {__version__}")
        self.console_io.writeln("Type 'help;' or '?;' for commands, 'exit;' to quit, or Ctrl+D to exit.")
        self.console_io.writeln()

        history_file = Path.home() / ".graphconsole_history"
        history = FileHistory(str(history_file))

        while True:
            try:
                command_line = self.read_command(history)
                if not self.execute_command(command_line):
                    break
            except EOFError:
                # Ctrl+D pressed
                self.console_io.writeln()
                self.cmd_exit([])
                break
            except KeyboardInterrupt:
                continue


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments for GraphConsole."""
    parser = argparse.ArgumentParser(
        description="GraphConsole - Interactive SPARQL console",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  graphconsole                                  # Start with default settings
  graphconsole --config /path/to/config.yaml    # Use custom config file
  graphconsole --repository ./data -e "select * where { ?s ?p ?o } limit 10;"
        """
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        help="Path to GraphConsole configuration file (default: auto-detected from project structure)"
    )

    parser.add_argument(
        "--repository", "-r",
        type=str,
        help="Open the repository in this directory on start-up"
    )

    parser.add_argument(
        "--execute", "-e",
        type=str,
        help="Execute one command or query and exit"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"GraphConsole {__version__}"
    )

    return parser.parse_args(argv)


def get_config_path(config_path: Optional[str]) -> Optional[Path]:
    """Get the config file path (from CLI arg or default, None if no default exists)."""
    if config_path:
        return Path(config_path)
    script_dir = Path(__file__).resolve().parent.parent.parent  # Go up to project root
    default_path = script_dir / "graphconsole_config" / "graphconsole-config.yaml"
    return default_path if default_path.exists() else None


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for GraphConsole."""
    load_dotenv()
    args = parse_args(argv)

    try:
        config_path = get_config_path(args.config)
        config = GraphConsoleConfig(str(config_path) if config_path else None)
        config.validate_config()
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(
        level=str(config.get_app_config()['log_level']).upper(),
        format='%(levelname)s:%(name)s:%(message)s'
    )

    repl_instance = GraphConsoleREPL(config)
    if args.repository:
        repl_instance.cmd_open([args.repository])

    if args.execute:
        repl_instance.execute_command(args.execute)
        repl_instance.close_repository()
        return

    try:
        repl_instance.run_repl()
    except KeyboardInterrupt:
        print("\nBye")
    finally:
        repl_instance.close_repository()


if __name__ == "__main__":
    main()
