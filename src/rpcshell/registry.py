"""Command registration metadata and registry builder."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Iterator, Mapping

from rpcshell.commands import (
    CallCommand,
    Command,
    DescCommand,
    PackageCommand,
    ServiceCommand,
    ShowCommand,
)
from rpcshell.environment import Environment


@dataclass(frozen=True, slots=True)
class CommandSpec:
    """One command registration entry."""

    name: str
    factory: Callable[[Environment], Command]
    aliases: tuple[str, ...] = ()


COMMAND_SPECS: tuple[CommandSpec, ...] = (
    CommandSpec("call", CallCommand),
    CommandSpec("desc", DescCommand, aliases=("describe",)),
    CommandSpec("package", PackageCommand),
    CommandSpec("service", ServiceCommand),
    CommandSpec("show", ShowCommand),
)


@dataclass(frozen=True)
class Registry:
    """Read-only command lookup, fixed for the lifetime of the shell."""

    commands: Mapping[str, Command]
    aliases: Mapping[str, str]

    def get(self, name: str) -> Command | None:
        """Return the command registered under a name or alias."""
        return self.commands.get(self.aliases.get(name, name))

    def names(self) -> list[str]:
        """Primary command names in registration order."""
        return list(self.commands)

    def __iter__(self) -> Iterator[str]:
        return iter(self.commands)

    def __len__(self) -> int:
        return len(self.commands)


def build_registry(env: Environment) -> Registry:
    """Instantiate every command once against the given environment."""
    commands: dict[str, Command] = {}
    aliases: dict[str, str] = {}

    for spec in COMMAND_SPECS:
        commands[spec.name] = spec.factory(env)
        for alias in spec.aliases:
            aliases[alias] = spec.name

    return Registry(commands=MappingProxyType(commands), aliases=MappingProxyType(aliases))
