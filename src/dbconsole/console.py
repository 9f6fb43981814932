"""Command-line entry point for the database console."""

from __future__ import annotations

import argparse
import logging
import os
import readline
import sys
from pathlib import Path
from typing import TextIO

from dbconsole.database import Database, PostgresDatabase, SQLiteDatabase
from dbconsole.dispatcher import CommandDispatcher
from dbconsole.errors import CatalogError, DatabaseError
from dbconsole.hotel import HOTEL_CATALOG
from dbconsole.parsing import load_catalog, parse_catalog
from dbconsole.prompter import ConsoleReader, LineReader, StreamReader
from dbconsole.renderer import STYLES, ResultRenderer
from dbconsole.types import Catalog

logger = logging.getLogger(__name__)

HISTORY_FILE = Path.home() / ".dbconsole_history"


def greeting(out: TextIO) -> None:
    """Print the startup banner."""
    print(
        "\n\n*******************************************************\n"
        "              User Interface\n"
        "*******************************************************\n",
        file=out,
    )


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr; DEBUG when verbose, else WARNING."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def open_catalog(path: Path | None) -> Catalog:
    """Load the catalog file, or the built-in hotel catalog."""
    if path is None:
        return parse_catalog(HOTEL_CATALOG)
    catalog = load_catalog(path)
    logger.info("loaded %d commands from %s", len(catalog), path)
    return catalog


def make_database(args: argparse.Namespace) -> Database:
    """Create an unopened database handle from the command-line arguments."""
    if args.driver == "sqlite":
        return SQLiteDatabase(args.dbname)
    return PostgresDatabase(
        dbname=args.dbname,
        port=args.port,
        user=args.user,
        password=args.password,
        host=args.host,
    )


def run_console(
    catalog: Catalog,
    database: Database,
    reader: LineReader,
    out: TextIO,
    style: str = "tab",
    echo: bool = False,
) -> int:
    """Connect, run the menu loop, and always disconnect.

    Returns:
        0 after EXIT or end of input, 1 if the connection cannot be opened.
    """
    print("Connecting to database...", end="", file=out)
    try:
        database.open()
    except DatabaseError as e:
        print(file=out)
        print(f"Error - Unable to Connect to Database: {e}", file=sys.stderr)
        return 1
    print("Done", file=out)

    with database:
        dispatcher = CommandDispatcher(
            catalog,
            database,
            reader,
            out=out,
            renderer=ResultRenderer(out, style=style),
            echo=echo,
        )
        try:
            result = dispatcher.run()
        finally:
            print("Disconnecting from database...", end="", file=out)
    print("Done\n\nBye !", file=out)
    return result


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    arg_parser = argparse.ArgumentParser(
        prog="dbconsole",
        description="Menu-driven SQL console",
    )
    arg_parser.add_argument(
        "dbname",
        help="Database name (postgres) or database file path (sqlite)",
    )
    arg_parser.add_argument("port", nargs="?", default=None, help="Server port (postgres)")
    arg_parser.add_argument("user", nargs="?", default=None, help="User name (postgres)")
    arg_parser.add_argument(
        "--driver",
        choices=("postgres", "sqlite"),
        default="postgres",
        help="Database driver (default: postgres)",
    )
    arg_parser.add_argument(
        "--host",
        default=os.environ.get("PGHOST", "localhost"),
        help="Server host (default: $PGHOST or localhost)",
    )
    arg_parser.add_argument(
        "--password",
        default=os.environ.get("PGPASSWORD", ""),
        help="Password (default: $PGPASSWORD or empty)",
    )
    arg_parser.add_argument(
        "--catalog",
        type=Path,
        default=None,
        help="Command catalog file (default: built-in hotel catalog)",
    )
    arg_parser.add_argument(
        "-f", "--file",
        type=Path,
        help="Read operator input from a file instead of the keyboard",
    )
    arg_parser.add_argument(
        "--echo",
        action="store_true",
        help="Print each statement before executing it",
    )
    arg_parser.add_argument(
        "--style",
        choices=STYLES,
        default="tab",
        help="Result layout (default: tab)",
    )
    arg_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )

    args = arg_parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.driver == "postgres" and (args.port is None or args.user is None):
        print("Error: postgres needs <dbname> <port> <user>", file=sys.stderr)
        return 1

    try:
        catalog = open_catalog(args.catalog)
    except OSError as e:
        print(f"Error reading catalog: {e}", file=sys.stderr)
        return 1
    except (SyntaxError, CatalogError) as e:
        print(f"Error in catalog: {e}", file=sys.stderr)
        return 1

    out = sys.stdout
    database = make_database(args)

    # Handle file input
    if args.file:
        if not args.file.exists():
            print(f"Error: File not found: {args.file}", file=sys.stderr)
            return 1
        greeting(out)
        with args.file.open(encoding="utf-8") as script:
            reader = StreamReader(script, out, echo=True)
            return run_console(catalog, database, reader, out, args.style, args.echo)

    greeting(out)
    try:
        readline.read_history_file(HISTORY_FILE)
    except OSError:
        pass
    try:
        return run_console(catalog, database, ConsoleReader(), out, args.style, args.echo)
    finally:
        try:
            readline.set_history_length(1000)
            readline.write_history_file(HISTORY_FILE)
        except OSError as e:
            logger.warning("could not save history: %s", e)


if __name__ == "__main__":
    sys.exit(main())
