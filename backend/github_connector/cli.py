#!/usr/bin/env python3
"""Command-line entry point for the GitHub connector.

Usage:
    github-connector                 # interactive menu
    github-connector interactive
    github-connector serve --port 5001

The interactive menu manages connections and pushes content by hand. ``serve``
starts the webhook that lets a Microsoft 365 app enable and disable the
connector.
"""

import argparse
import asyncio
import re
import sys
from collections.abc import Callable
from dataclasses import dataclass

import uvicorn
from pydantic import ValidationError

from github_connector.config import Settings
from github_connector.errors import ConfigurationError, ConnectorError
from github_connector.github.repository_service import RepositoryService
from github_connector.graph.client import GraphClient
from github_connector.graph.connections import ConnectionRegistryClient
from github_connector.graph.items import ItemBuilder, ItemPusher
from github_connector.graph.schemas import schema_for
from github_connector.models.connection import CONNECTION_ID_PATTERN, ExternalConnection, ItemType
from github_connector.services.content_sync import ContentSync


# ANSI color codes
class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"


def colorize(text: str, color: str) -> str:
    """Apply ANSI color to text."""
    return f"{color}{text}{Colors.RESET}"


def print_error(message: str) -> None:
    print(colorize(message, Colors.RED))


def print_success(message: str) -> None:
    print(colorize(message, Colors.GREEN))


MENU_PROMPTS = [
    "Create a connection",
    "Select existing connection",
    "Delete current connection",
    "Register schema for current connection",
    "Push items to current connection",
]
ITEM_TYPE_PROMPTS = ["Issues", "Repositories"]
ITEM_TYPES = [ItemType.ISSUES, ItemType.REPOSITORIES]

NO_CONNECTION_MESSAGE = (
    "No connection selected. Please create a new connection or select an existing connection."
)

InputFunc = Callable[[str], str]


@dataclass
class MenuSession:
    """State carried through the interactive loop."""

    registry: ConnectionRegistryClient
    sync: ContentSync
    current_connection: ExternalConnection | None = None
    input_func: InputFunc = input


# =============================================================================
# Prompts
# =============================================================================


def select_option(
    input_func: InputFunc, options: list[str], prompt: str, cancel: str | None = "CANCEL"
) -> int:
    """Show numbered options and return the chosen index, or -1 for cancel."""
    for i, option in enumerate(options, start=1):
        print(f"[{i}] {option}")
    if cancel:
        print(f"[0] {cancel}")

    while True:
        answer = input_func(f"{prompt} [{'0-' if cancel else '1-'}{len(options)}]: ").strip()
        if answer.isdigit():
            choice = int(answer)
            if cancel and choice == 0:
                return -1
            if 1 <= choice <= len(options):
                return choice - 1
        print_error("Invalid choice!")


def ask(input_func: InputFunc, question: str, pattern: str | None = None, message: str = "") -> str:
    """Ask until the answer matches ``pattern`` (any answer if no pattern)."""
    while True:
        answer = input_func(question).strip()
        if pattern is None or re.match(pattern, answer):
            return answer
        print_error(message or "Invalid input")


def confirm(input_func: InputFunc, question: str = "Are you sure?") -> bool:
    while True:
        answer = input_func(f"{question} [y/n]: ").strip().lower()
        if answer in ("y", "yes"):
            return True
        if answer in ("n", "no"):
            return False


def select_item_type(input_func: InputFunc) -> ItemType | None:
    index = select_option(input_func, ITEM_TYPE_PROMPTS, "What type of data?")
    return ITEM_TYPES[index] if index >= 0 else None


# =============================================================================
# Menu actions
# =============================================================================


async def create_connection_interactively(session: MenuSession) -> ExternalConnection | None:
    read = session.input_func
    connection_id = ask(
        read,
        "Enter a unique ID for the new connection (3-32 alphanumeric characters): ",
        pattern=CONNECTION_ID_PATTERN,
        message="ID must be alphanumeric and 3 to 32 characters long",
    )
    name = ask(read, "Enter a name for the new connection: ", pattern=r".+", message="Name is required")
    description = ask(read, "Enter a description for the new connection (OPTIONAL): ")
    item_type = select_item_type(read)
    if item_type is None:
        return None

    try:
        connection = await session.registry.create_connection(
            connection_id, name, item_type, description or None
        )
    except (ConnectorError, ValidationError) as e:
        print_error(f"Error creating connection: {e}")
        return None

    print_success(f"New connection created - Name: {connection.name}, Id: {connection.id}")
    return connection


async def select_connection_interactively(session: MenuSession) -> ExternalConnection | None:
    print("Getting existing connections...")
    try:
        connections = await session.registry.list_connections()
    except ConnectorError as e:
        print_error(f"Error getting connections: {e}")
        return None

    if not connections:
        print("No connections exist. Please create a new connection.")
        return None

    names = [c.name or "No name" for c in connections]
    index = select_option(session.input_func, names, "Choose one of the following connections")
    return connections[index] if index >= 0 else None


async def delete_connection_interactively(session: MenuSession, connection_id: str) -> bool:
    if not confirm(session.input_func):
        return False
    try:
        await session.registry.delete_connection(connection_id)
    except ConnectorError as e:
        print_error(f"Error deleting connection: {e}")
        return False
    print_success("Connection deleted successfully.")
    return True


async def register_schema_interactively(session: MenuSession, connection_id: str) -> None:
    item_type = select_item_type(session.input_func)
    if item_type is None:
        return

    print("Registering schema, this may take some time...")
    try:
        await session.registry.register_schema(connection_id, schema_for(item_type))
    except ConnectorError as e:
        print_error(f"Error registering schema: {e}")
        return
    print_success("Schema registered successfully.")


async def push_items_interactively(session: MenuSession, connection_id: str) -> None:
    item_type = select_item_type(session.input_func)
    if item_type is None:
        return

    if item_type == ItemType.ISSUES:
        pushed = await session.sync.push_all_issues(connection_id)
        print_success(f"Pushed {pushed} issue(s)")
    else:
        pushed = await session.sync.push_all_repositories(connection_id)
        print_success(f"Pushed {pushed} repositories")


async def run_menu(session: MenuSession) -> None:
    """Run the interactive menu until the user exits."""
    while True:
        current = session.current_connection
        print(colorize(f"Current connection: {current.name if current else 'NONE'}", Colors.CYAN))
        choice = select_option(session.input_func, MENU_PROMPTS, "Select an option", cancel="Exit")

        if choice == -1:
            print("Goodbye...")
            return

        if choice == 0:
            session.current_connection = await create_connection_interactively(session)
        elif choice == 1:
            session.current_connection = await select_connection_interactively(session)
        elif current is None:
            print_error(NO_CONNECTION_MESSAGE)
        elif choice == 2:
            if await delete_connection_interactively(session, current.id):
                session.current_connection = None
        elif choice == 3:
            await register_schema_interactively(session, current.id)
        elif choice == 4:
            await push_items_interactively(session, current.id)


async def run_interactive(settings: Settings) -> None:
    async with GraphClient.from_settings(settings) as graph:
        registry = ConnectionRegistryClient(graph, settings.github_owner, settings.github_repo)
        sync = ContentSync(
            RepositoryService.from_settings(settings),
            ItemBuilder(settings.placeholder_user_id),
            ItemPusher(graph),
        )
        await run_menu(MenuSession(registry=registry, sync=sync))


def serve(settings: Settings, host: str, port: int | None) -> None:
    uvicorn.run("github_connector.main:app", host=host, port=port or settings.port)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="github-connector",
        description="Sync GitHub issues and repositories into Microsoft Search",
    )
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("interactive", help="Manage connections from an interactive menu")

    serve_parser = subparsers.add_parser(
        "serve", help="Run the webhook for Microsoft 365 app connector notifications"
    )
    serve_parser.add_argument("--host", default="localhost", help="Interface to bind")
    serve_parser.add_argument("--port", type=int, default=None, help="Port (default: PORT_NUMBER)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        print_error(str(e))
        return 1

    if args.command == "serve":
        serve(settings, args.host, args.port)
        return 0

    try:
        asyncio.run(run_interactive(settings))
    except KeyboardInterrupt:
        print("\nGoodbye...")
    return 0


if __name__ == "__main__":
    sys.exit(main())
