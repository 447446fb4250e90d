"""Context-sensitive completion for the shell prompt."""

from typing import Iterable

from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document

from rpcshell.commands import Suggestion
from rpcshell.errors import AppError
from rpcshell.evaluator import HELP_COMMAND, HELP_SYNOPSIS
from rpcshell.registry import Registry


def _split_buffer(text: str) -> tuple[list[str], str]:
    """Return (completed tokens, word under the cursor)."""
    tokens = text.split()
    if not tokens or text[-1].isspace():
        return tokens, ""
    return tokens[:-1], tokens[-1]


def _command_words(registry: Registry) -> list[Suggestion]:
    """Every word the evaluator accepts first: names, their aliases, then help."""
    words = []
    for name in registry.names():
        synopsis = registry.commands[name].synopsis()
        words.append(Suggestion(name, synopsis))
        words.extend(
            Suggestion(alias, synopsis)
            for alias, target in registry.aliases.items()
            if target == name
        )
    words.append(Suggestion(HELP_COMMAND, HELP_SYNOPSIS))
    return words


def suggest(text: str, registry: Registry) -> list[Suggestion]:
    """Suggestions for the buffer text before the cursor.

    First word: command names and aliases with the typed prefix, annotated
    with their synopsis, plus ``help``. Second word: the command's own
    candidates filtered by prefix. Anything else (unknown command, extra
    words) yields nothing.
    """
    done, word = _split_buffer(text)

    if not done:
        return [s for s in _command_words(registry) if s.text.startswith(word)]

    if len(done) != 1:
        return []

    cmd = registry.get(done[0])
    if cmd is None:
        return []

    try:
        candidates = cmd.candidates()
    except AppError:
        return []
    return [s for s in candidates if s.text.startswith(word)]


class CommandCompleter(Completer):
    """prompt_toolkit adapter over ``suggest``."""

    def __init__(self, registry: Registry) -> None:
        self.registry = registry

    def get_completions(
        self, document: Document, complete_event: CompleteEvent
    ) -> Iterable[Completion]:
        text = document.text_before_cursor
        _, word = _split_buffer(text)
        for suggestion in suggest(text, self.registry):
            yield Completion(
                suggestion.text,
                start_position=-len(word),
                display_meta=suggestion.description,
            )
