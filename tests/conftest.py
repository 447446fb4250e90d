"""Pytest configuration and fixtures for rpcshell tests."""

import io
import json
from typing import Any

import pytest

from rpcshell.config import Config
from rpcshell.environment import SchemaEnvironment
from rpcshell.registry import build_registry
from rpcshell.repl import UI, Repl
from rpcshell.schema import Schema
from rpcshell.session import Session

SAMPLE_SCHEMA: dict[str, Any] = {
    "packages": [
        {
            "name": "helloworld",
            "messages": [
                {"name": "HelloRequest", "fields": [{"name": "name", "type": "string"}]},
                {"name": "HelloReply", "fields": [{"name": "message", "type": "string"}]},
                {
                    "name": "CountRequest",
                    "fields": [
                        {"name": "n", "type": "int32"},
                        {"name": "ratio", "type": "double"},
                        {"name": "verbose", "type": "bool"},
                        {"name": "tags", "type": "string", "repeated": True},
                    ],
                },
            ],
            "services": [
                {
                    "name": "Greeter",
                    "rpcs": [
                        {"name": "SayHello", "request": "HelloRequest", "response": "HelloReply"},
                        {"name": "Count", "request": "CountRequest", "response": "HelloReply"},
                    ],
                },
                {"name": "Admin", "rpcs": []},
            ],
        },
        {
            "name": "library",
            "messages": [{"name": "Book", "fields": [{"name": "isbn", "type": "string"}]}],
            "services": [
                {
                    "name": "Shelf",
                    "rpcs": [{"name": "GetBook", "request": "Book", "response": "Book"}],
                }
            ],
        },
    ]
}


class ScriptedFieldReader:
    """Field reader that answers prompts from a fixed list.

    Setting ``error`` makes the next prompt raise it instead, the way Ctrl-C
    or Ctrl-D surface from prompt_toolkit.
    """

    def __init__(self, answers: list[str] | None = None) -> None:
        self.answers = list(answers or [])
        self.prompts: list[str] = []
        self.error: type[BaseException] | None = None

    def read_field(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error()
        return self.answers.pop(0) if self.answers else ""


class RecordingTransport:
    """Transport that records invocations and echoes a canned response."""

    def __init__(self, response: dict[str, Any] | None = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    def invoke(self, target: str, method: str, request: dict[str, Any]) -> dict[str, Any]:
        self.calls.append((target, method, request))
        if self.error is not None:
            raise self.error
        return self.response if self.response is not None else dict(request)


class ScriptedReader:
    """Line reader that replays lines, then raises the given terminator."""

    def __init__(self, lines: list[str], terminator: type[BaseException] = EOFError) -> None:
        self.lines = list(lines)
        self.terminator = terminator
        self.prompts: list[str] = []

    def prompt(self, message: str) -> str:
        self.prompts.append(message)
        if not self.lines:
            raise self.terminator()
        return self.lines.pop(0)


@pytest.fixture
def schema():
    return Schema.from_dict(SAMPLE_SCHEMA)


@pytest.fixture
def schema_file(tmp_path):
    path = tmp_path / "schema.json"
    path.write_text(json.dumps(SAMPLE_SCHEMA), encoding="utf-8")
    return path


@pytest.fixture
def session():
    return Session(host="localhost", port="50051")


@pytest.fixture
def field_reader():
    return ScriptedFieldReader()


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def env(schema, session, field_reader, transport):
    return SchemaEnvironment(schema, session, field_reader=field_reader, transport=transport)


@pytest.fixture
def registry(env):
    return build_registry(env)


@pytest.fixture
def ui():
    return UI(writer=io.StringIO(), err_writer=io.StringIO())


@pytest.fixture
def make_repl(env, ui):
    """Build a Repl fed by a scripted reader."""

    def _make(lines: list[str], terminator: type[BaseException] = EOFError, **config: Any) -> Repl:
        cfg = Config(host="localhost", port="50051", **config)
        return Repl(cfg, env, ui=ui, reader=ScriptedReader(lines, terminator))

    return _make
