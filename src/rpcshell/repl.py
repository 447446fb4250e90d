"""Interactive shell: prompt, splash screen, read-eval-print loop."""

import logging
import os
import sys
import time
import traceback
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Protocol, TextIO

from prompt_toolkit import PromptSession, print_formatted_text
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.history import FileHistory, History, InMemoryHistory

from rpcshell.completer import CommandCompleter
from rpcshell.config import Config
from rpcshell.environment import Environment
from rpcshell.errors import AppError
from rpcshell.evaluator import Evaluator, tokenize
from rpcshell.logging_utils import log_event, summarize_command_args
from rpcshell.path_utils import map_path
from rpcshell.registry import build_registry

FAREWELL = "Good Bye :)"
CANCELLED = "[Operation Cancelled]"
ERROR_STYLE = "ansired"


class ReplState(str, Enum):
    """Shell lifecycle states."""

    IDLE = "idle"
    READING = "reading"
    EVALUATING = "evaluating"
    PRINTING = "printing"
    CLOSING = "closing"
    TERMINATED = "terminated"


class LineReader(Protocol):
    """The part of prompt_toolkit's PromptSession the loop depends on."""

    def prompt(self, message: str) -> str: ...


@dataclass
class UI:
    """Output sinks for normal text and errors."""

    writer: TextIO = field(default_factory=lambda: sys.stdout)
    err_writer: TextIO = field(default_factory=lambda: sys.stderr)


def build_prompt(host: str, port: str, dsn: str = "") -> str:
    """Return '<host>:<port>> ', prefixed with '<dsn>@' when dsn is set."""
    prompt = f"{host}:{port}> "
    if dsn:
        prompt = f"{dsn}@{prompt}"
    return prompt


def _build_history(history_path: Optional[str]) -> History:
    if not history_path:
        return InMemoryHistory()
    path = Path(map_path(history_path))
    path.parent.mkdir(parents=True, exist_ok=True)
    return FileHistory(str(path))


def create_prompt_session(completer: CommandCompleter, history_path: Optional[str]) -> PromptSession:
    """Create the prompt_toolkit session used for line input."""
    return PromptSession(
        history=_build_history(history_path),
        completer=completer,
        complete_while_typing=True,
    )


class Repl:
    """Owns the registry, the evaluator and the read-eval-print loop."""

    def __init__(
        self,
        config: Config,
        env: Environment,
        ui: Optional[UI] = None,
        reader: Optional[LineReader] = None,
    ) -> None:
        self.config = config
        self.env = env
        self.ui = ui or UI()
        self.registry = build_registry(env)
        self.evaluator = Evaluator(self.registry)
        self.completer = CommandCompleter(self.registry)
        self._reader = reader
        self.state = ReplState.IDLE

    def get_prompt(self) -> str:
        return build_prompt(self.config.host, self.config.port, self.env.get_dsn())

    def wrapped_print(self, text: str) -> None:
        self.ui.writer.write(f"{text}\n")
        self.ui.writer.flush()

    def wrapped_error(self, error: Exception) -> None:
        print_formatted_text(
            FormattedText([(ERROR_STYLE, f"{error}\n")]),
            file=self.ui.err_writer,
        )

    def print_splash(self, path: Optional[str]) -> None:
        """Print the splash file verbatim; missing or unreadable files are ignored."""
        if not path:
            return
        try:
            content = Path(map_path(path)).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError, ValueError):
            return
        self.wrapped_print(content)

    def handle_line(self, line: str) -> None:
        """Evaluate one line and print its output or error."""
        tokens = tokenize(line)
        command = tokens[0] if tokens else ""
        args_summary = summarize_command_args(tokens[1:])

        self.state = ReplState.EVALUATING
        started = time.perf_counter()
        try:
            output = self.evaluator.evaluate(line)
        except AppError as e:
            log_event(
                "command_error",
                level=logging.WARNING,
                command=command,
                args_summary=args_summary,
                error_type=type(e).__name__,
                error=str(e),
            )
            self.state = ReplState.PRINTING
            self.wrapped_error(e)
            return
        except Exception as e:
            log_event(
                "repl_error",
                level=logging.ERROR,
                command=command,
                args_summary=args_summary,
                error_type=type(e).__name__,
                error=str(e),
            )
            logging.error("Unexpected command error (command=%s): %s", command, e, exc_info=True)
            self.state = ReplState.PRINTING
            self.wrapped_error(e)
            if os.getenv("RPCSHELL_DEBUG"):
                traceback.print_exc(file=self.ui.err_writer)
            return
        except KeyboardInterrupt:
            log_event(
                "command_cancelled",
                level=logging.INFO,
                command=command,
                args_summary=args_summary,
            )
            self.state = ReplState.PRINTING
            self.wrapped_print(CANCELLED)
            return

        if command:
            log_event(
                "command_exec",
                level=logging.INFO,
                command=command,
                args_summary=args_summary,
                elapsed_ms=round((time.perf_counter() - started) * 1000, 1),
                dsn=self.env.get_dsn(),
            )

        self.state = ReplState.PRINTING
        if output:
            self.wrapped_print(output)

    def _read_line(self) -> str:
        if self._reader is None:
            self._reader = create_prompt_session(self.completer, self.config.history_path)
        return self._reader.prompt(self.get_prompt())

    def start(self) -> str:
        """Print the splash and run the loop until end-of-input or interrupt.

        Returns:
            The termination reason ("eof" or "interrupt")
        """
        self.print_splash(self.config.splash_text_path)

        while True:
            self.state = ReplState.READING
            try:
                line = self._read_line()
            except EOFError:
                reason = "eof"
                break
            except KeyboardInterrupt:
                reason = "interrupt"
                break

            self.handle_line(line)

        self.state = ReplState.CLOSING
        return reason

    def close(self) -> None:
        """Print the farewell message."""
        self.wrapped_print(FAREWELL)
        self.state = ReplState.TERMINATED
