"""User interaction adapters for interactive command flows."""

from typing import Protocol

from prompt_toolkit import prompt as pt_prompt


class FieldReader(Protocol):
    """Minimal interaction contract used to collect request fields."""

    def read_field(self, prompt: str) -> str:
        """Prompt for one field value and return the raw text."""


class ConsoleFieldReader:
    """Console adapter backed by prompt_toolkit's one-shot prompt."""

    def read_field(self, prompt: str) -> str:
        return pt_prompt(prompt)
