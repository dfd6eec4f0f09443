"""Tests for the interactive command-line menu."""

from unittest.mock import MagicMock

import pytest

from conftest import FakeRegistry
from github_connector import cli
from github_connector.cli import (
    NO_CONNECTION_MESSAGE,
    MenuSession,
    ask,
    build_parser,
    confirm,
    run_menu,
    select_option,
)
from github_connector.config import Settings
from github_connector.graph.schemas import REPOS_SCHEMA
from github_connector.models.connection import CONNECTION_ID_PATTERN, ExternalConnection, ItemType


def scripted(*answers: str):
    """An input function that replays answers in order."""
    remaining = iter(answers)
    return lambda prompt: next(remaining)


class FakeSync:
    def __init__(self):
        self.pushed: list[tuple[str, str]] = []

    async def push_all_issues(self, connection_id):
        self.pushed.append(("issues", connection_id))
        return 3

    async def push_all_repositories(self, connection_id):
        self.pushed.append(("repositories", connection_id))
        return 1


def make_session(*answers: str, connections=None, current=None) -> MenuSession:
    return MenuSession(
        registry=FakeRegistry(connections),
        sync=FakeSync(),
        current_connection=current,
        input_func=scripted(*answers),
    )


class TestPrompts:
    def test_select_option(self):
        assert select_option(scripted("2"), ["a", "b"], "Pick") == 1

    def test_select_option_cancel(self):
        assert select_option(scripted("0"), ["a", "b"], "Pick") == -1

    def test_select_option_retries_invalid(self, capsys):
        assert select_option(scripted("9", "x", "1"), ["a", "b"], "Pick") == 0
        assert capsys.readouterr().out.count("Invalid choice!") == 2

    def test_ask_validates(self, capsys):
        answer = ask(scripted("no", "ok123"), "Id: ", pattern=CONNECTION_ID_PATTERN, message="bad id")
        assert answer == "ok123"
        assert "bad id" in capsys.readouterr().out

    def test_confirm(self):
        assert confirm(scripted("maybe", "Y")) is True
        assert confirm(scripted("n")) is False


class TestRunMenu:
    @pytest.mark.asyncio
    async def test_exit(self, capsys):
        await run_menu(make_session("0"))
        assert "Goodbye" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_actions_need_connection(self, capsys):
        await run_menu(make_session("3", "4", "5", "0"))
        assert capsys.readouterr().out.count(NO_CONNECTION_MESSAGE) == 3

    @pytest.mark.asyncio
    async def test_create_connection(self):
        session = make_session("1", "bad id", "conn1", "My connection", "", "2", "0")

        await run_menu(session)

        assert session.current_connection is not None
        assert session.current_connection.id == "conn1"
        assert session.registry.created[0]["item_type"] == ItemType.REPOSITORIES
        assert session.registry.created[0]["description"] is None

    @pytest.mark.asyncio
    async def test_create_failure_leaves_no_connection(self, capsys):
        session = make_session("1", "conn1", "My connection", "desc", "1", "0")
        session.registry.fail_create = True

        await run_menu(session)

        assert session.current_connection is None
        assert "Error creating connection" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_select_connection(self):
        connections = [ExternalConnection(id="one", name="One"), ExternalConnection(id="two", name="Two")]
        session = make_session("2", "2", "0", connections=connections)

        await run_menu(session)

        assert session.current_connection.id == "two"

    @pytest.mark.asyncio
    async def test_select_with_no_connections(self, capsys):
        session = make_session("2", "0")

        await run_menu(session)

        assert session.current_connection is None
        assert "No connections exist" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_delete_connection(self):
        current = ExternalConnection(id="conn1", name="Mine")
        session = make_session("3", "y", "0", connections=[current], current=current)

        await run_menu(session)

        assert session.registry.deleted == ["conn1"]
        assert session.current_connection is None

    @pytest.mark.asyncio
    async def test_delete_declined(self):
        current = ExternalConnection(id="conn1", name="Mine")
        session = make_session("3", "n", "0", connections=[current], current=current)

        await run_menu(session)

        assert session.registry.deleted == []
        assert session.current_connection is current

    @pytest.mark.asyncio
    async def test_register_schema(self):
        current = ExternalConnection(id="conn1", name="Mine")
        session = make_session("4", "2", "0", current=current)

        await run_menu(session)

        assert session.registry.schemas == [("conn1", REPOS_SCHEMA)]

    @pytest.mark.asyncio
    async def test_push_items(self, capsys):
        current = ExternalConnection(id="conn1", name="Mine")
        session = make_session("5", "1", "0", current=current)

        await run_menu(session)

        assert session.sync.pushed == [("issues", "conn1")]
        assert "Pushed 3 issue(s)" in capsys.readouterr().out


class TestParser:
    def test_default_is_interactive(self):
        assert build_parser().parse_args([]).command is None

    def test_serve_runs_uvicorn(self, monkeypatch):
        fake_uvicorn = MagicMock()
        monkeypatch.setattr(cli, "uvicorn", fake_uvicorn)
        settings = Settings.from_env(
            {
                "CLIENT_ID": "c",
                "TENANT_ID": "t",
                "CLIENT_SECRET": "s",
                "GITHUB_REPO_OWNER": "octo-org",
                "GITHUB_REPO": "widgets",
                "GITHUB_TOKEN": "tok",
                "PLACEHOLDER_USER_ID": "u",
                "PORT_NUMBER": "6000",
            }
        )

        cli.serve(settings, "localhost", None)

        fake_uvicorn.run.assert_called_once_with(
            "github_connector.main:app", host="localhost", port=6000
        )

    def test_serve_port(self):
        args = build_parser().parse_args(["serve", "--port", "8080"])
        assert args.command == "serve"
        assert args.port == 8080
        assert args.host == "localhost"
