"""Session state container for the rpcshell runtime."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Selection:
    """Currently selected package and service."""

    package: str = ""
    service: str = ""


@dataclass
class Session:
    """In-memory runtime state for one shell session.

    The package/service pair lives in a single immutable ``Selection`` and is
    only ever replaced as a whole, so readers (the completer) always observe a
    consistent pair.
    """

    host: str = "127.0.0.1"
    port: str = "50051"
    selection: Selection = field(default_factory=Selection)

    @property
    def package(self) -> str:
        return self.selection.package

    @property
    def service(self) -> str:
        return self.selection.service

    def select_package(self, package: str) -> None:
        """Select a package, clearing the service when the package changes."""
        if self.selection.package == package:
            return
        self.selection = Selection(package=package)

    def select_service(self, package: str, service: str) -> None:
        """Select a service (and its package) in one assignment."""
        self.selection = Selection(package=package, service=service)

    def dsn(self) -> str:
        """Return 'package.Service', 'package', or '' for prompt decoration."""
        current = self.selection
        if current.package and current.service:
            return f"{current.package}.{current.service}"
        return current.package

    @property
    def target(self) -> str:
        return f"{self.host}:{self.port}"
