"""Shell commands: one class per action, all sharing the Environment."""

from dataclasses import dataclass
from typing import Protocol

from rpcshell.environment import Environment
from rpcshell.errors import ArgumentRequiredError, UnknownTargetError
from rpcshell.listing import Listing


@dataclass(frozen=True)
class Suggestion:
    """One completion candidate."""

    text: str
    description: str = ""


class Command(Protocol):
    """Contract every shell command implements."""

    def synopsis(self) -> str:
        """One-line description shown in help and completion."""

    def help(self) -> str:
        """Usage text."""

    def validate(self, args: list[str]) -> None:
        """Check argument shape; raise ArgumentRequiredError when one is missing."""

    def run(self, args: list[str]) -> str:
        """Perform the action and return user-facing text."""

    def candidates(self) -> list[Suggestion]:
        """Argument candidates for completion (read-only)."""


def _require_args(args: list[str], field: str) -> None:
    if not args:
        raise ArgumentRequiredError(field)


@dataclass
class EnvCommand:
    env: Environment

    def candidates(self) -> list[Suggestion]:
        return []


class CallCommand(EnvCommand):
    def synopsis(self) -> str:
        return "call a RPC"

    def help(self) -> str:
        return "usage: call <rpc name>"

    def validate(self, args: list[str]) -> None:
        _require_args(args, "rpc name")

    def run(self, args: list[str]) -> str:
        return self.env.call(args[0])

    def candidates(self) -> list[Suggestion]:
        return [Suggestion(name, "rpc") for name in self.env.rpc_names()]


class DescCommand(EnvCommand):
    def synopsis(self) -> str:
        return "describe the passed message structure"

    def help(self) -> str:
        return "usage: desc <message name>"

    def validate(self, args: list[str]) -> None:
        _require_args(args, "message name")

    def run(self, args: list[str]) -> str:
        message = self.env.get_message(args[0])
        rows = tuple(
            (f.name, f"repeated {f.type}" if f.repeated else f.type) for f in message.fields
        )
        return str(Listing(("field", "type"), rows))

    def candidates(self) -> list[Suggestion]:
        return [Suggestion(name, "message") for name in self.env.message_names()]


class PackageCommand(EnvCommand):
    def synopsis(self) -> str:
        return "set a package as the currently selected package"

    def help(self) -> str:
        return "usage: package <package name>"

    def validate(self, args: list[str]) -> None:
        _require_args(args, "package name")

    def run(self, args: list[str]) -> str:
        self.env.use_package(args[0])
        return ""

    def candidates(self) -> list[Suggestion]:
        return [Suggestion(name, "package") for name in self.env.package_names()]


class ServiceCommand(EnvCommand):
    def synopsis(self) -> str:
        return "set the service as the current selected service"

    def help(self) -> str:
        return "usage: service <service name>"

    def validate(self, args: list[str]) -> None:
        _require_args(args, "service name")

    def run(self, args: list[str]) -> str:
        self.env.use_service(args[0])
        return ""

    def candidates(self) -> list[Suggestion]:
        return [Suggestion(name, "service") for name in self.env.service_names()]


SHOW_TARGETS: dict[str, str] = {
    "p": "package",
    "package": "package",
    "packages": "package",
    "s": "service",
    "svc": "service",
    "service": "service",
    "services": "service",
    "m": "message",
    "msg": "message",
    "message": "message",
    "messages": "message",
    "a": "rpc",
    "r": "rpc",
    "rpc": "rpc",
    "rpcs": "rpc",
    "api": "rpc",
}
_SHOW_DESCRIPTIONS = (
    ("package", "show all package names"),
    ("service", "show services in the current package"),
    ("message", "show messages in the current package"),
    ("rpc", "show RPCs of the current service"),
)


class ShowCommand(EnvCommand):
    def synopsis(self) -> str:
        return "show package, service or RPC names"

    def help(self) -> str:
        return "usage: show <package | service | message | rpc>"

    def validate(self, args: list[str]) -> None:
        _require_args(args, "target type (package, service, message, rpc)")

    def run(self, args: list[str]) -> str:
        target = args[0]
        kind = SHOW_TARGETS.get(target.lower())

        if kind == "package":
            return str(self.env.get_packages())
        if kind == "service":
            return str(self.env.get_services())
        if kind == "message":
            return str(self.env.get_messages())
        if kind == "rpc":
            return str(self.env.get_rpcs())

        raise UnknownTargetError(target)

    def candidates(self) -> list[Suggestion]:
        return [Suggestion(name, description) for name, description in _SHOW_DESCRIPTIONS]
