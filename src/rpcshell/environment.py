"""Schema/reflection environment consumed by shell commands.

``Environment`` is the contract commands are written against. The shipped
implementation, ``SchemaEnvironment``, answers every query from an in-memory
``Schema`` and hands request payloads built in ``call`` to a pluggable
``Transport``.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

from rpcshell.errors import (
    CallCancelledError,
    CallError,
    FieldValueError,
    PackageNotSelectedError,
    SchemaError,
    ServiceNotSelectedError,
    UnknownTargetError,
)
from rpcshell.interaction import ConsoleFieldReader, FieldReader
from rpcshell.listing import Listing
from rpcshell.logging_utils import log_event
from rpcshell.schema import Message, MessageField, Package, Schema, Service, split_qualified_name
from rpcshell.session import Session

_INT_TYPES = frozenset(
    (
        "int32",
        "int64",
        "uint32",
        "uint64",
        "sint32",
        "sint64",
        "fixed32",
        "fixed64",
        "sfixed32",
        "sfixed64",
    )
)
_FLOAT_TYPES = frozenset(("float", "double"))
_TRUE_VALUES = frozenset(("true", "t", "yes", "y", "1"))
_FALSE_VALUES = frozenset(("false", "f", "no", "n", "0"))


class Environment(Protocol):
    """Schema introspection and remote-call contract."""

    def use_package(self, name: str) -> None: ...

    def use_service(self, name: str) -> None: ...

    def get_packages(self) -> Listing: ...

    def get_services(self) -> Listing: ...

    def get_messages(self) -> Listing: ...

    def get_rpcs(self) -> Listing: ...

    def get_message(self, name: str) -> Message: ...

    def call(self, name: str) -> str: ...

    def get_dsn(self) -> str: ...

    def package_names(self) -> list[str]: ...

    def service_names(self) -> list[str]: ...

    def message_names(self) -> list[str]: ...

    def rpc_names(self) -> list[str]: ...


class Transport(Protocol):
    """Performs one unary invocation and returns the decoded response."""

    def invoke(self, target: str, method: str, request: dict[str, Any]) -> dict[str, Any]: ...


class EchoTransport:
    """Dry-run transport: no network I/O, the request is returned as the response."""

    def invoke(self, target: str, method: str, request: dict[str, Any]) -> dict[str, Any]:
        return dict(request)


def convert_field_value(field: MessageField, raw: str) -> Any:
    """Convert raw text to the Python value for a scalar field type."""
    try:
        if field.type in _INT_TYPES:
            return int(raw, 0)
        if field.type in _FLOAT_TYPES:
            return float(raw)
    except ValueError as e:
        raise FieldValueError(field.name, field.type, raw) from e

    if field.type == "bool":
        lowered = raw.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise FieldValueError(field.name, field.type, raw)

    return raw


class SchemaEnvironment:
    """Environment backed by an in-memory schema and a session."""

    def __init__(
        self,
        schema: Schema,
        session: Session,
        field_reader: FieldReader | None = None,
        transport: Transport | None = None,
    ) -> None:
        self.schema = schema
        self.session = session
        self.field_reader = field_reader or ConsoleFieldReader()
        self.transport = transport or EchoTransport()

    # -- selection -----------------------------------------------------------

    def use_package(self, name: str) -> None:
        if self.schema.find_package(name) is None:
            raise UnknownTargetError(name)
        self.session.select_package(name)

    def use_service(self, name: str) -> None:
        package_name, service_name = self._resolve_service(name)
        self.session.select_service(package_name, service_name)

    def _resolve_service(self, name: str) -> tuple[str, str]:
        package_name, short = split_qualified_name(name)
        if package_name:
            package = self.schema.find_package(package_name)
            if package is None or package.find_service(short) is None:
                raise UnknownTargetError(name)
            return package.name, short

        if self.session.package:
            package = self._current_package()
            if package.find_service(name) is None:
                raise UnknownTargetError(name)
            return package.name, name

        matches = [p.name for p in self.schema.packages if p.find_service(name) is not None]
        if len(matches) != 1:
            raise UnknownTargetError(name)
        return matches[0], name

    def _current_package(self) -> Package:
        package_name = self.session.package
        if not package_name:
            raise PackageNotSelectedError()
        package = self.schema.find_package(package_name)
        if package is None:
            raise UnknownTargetError(package_name)
        return package

    def _current_service(self) -> Service:
        package = self._current_package()
        if not self.session.service:
            raise ServiceNotSelectedError()
        service = package.find_service(self.session.service)
        if service is None:
            raise UnknownTargetError(self.session.service)
        return service

    # -- listings ------------------------------------------------------------

    def get_packages(self) -> Listing:
        return Listing(("package",), tuple((p.name,) for p in self.schema.packages))

    def get_services(self) -> Listing:
        package = self._current_package()
        rows: list[tuple[str, ...]] = []
        for service in package.services:
            if not service.rpcs:
                rows.append((service.name, "", "", ""))
            for rpc in service.rpcs:
                rows.append((service.name, rpc.name, rpc.request, rpc.response))
        return Listing(("service", "rpc", "request type", "response type"), tuple(rows))

    def get_messages(self) -> Listing:
        package = self._current_package()
        return Listing(("message",), tuple((m.name,) for m in package.messages))

    def get_rpcs(self) -> Listing:
        service = self._current_service()
        return Listing(
            ("rpc", "request type", "response type"),
            tuple((r.name, r.request, r.response) for r in service.rpcs),
        )

    def get_message(self, name: str) -> Message:
        package_name, short = split_qualified_name(name)
        if package_name:
            package = self.schema.find_package(package_name)
        else:
            package = self._current_package()
        message = package.find_message(short) if package is not None else None
        if message is None:
            raise UnknownTargetError(name)
        return message

    def get_dsn(self) -> str:
        return self.session.dsn()

    # -- completion sources --------------------------------------------------

    def package_names(self) -> list[str]:
        return [p.name for p in self.schema.packages]

    def service_names(self) -> list[str]:
        package = self.schema.find_package(self.session.package)
        if package is not None:
            return [s.name for s in package.services]
        return [f"{p.name}.{s.name}" for p in self.schema.packages for s in p.services]

    def message_names(self) -> list[str]:
        package = self.schema.find_package(self.session.package)
        if package is None:
            return []
        return [m.name for m in package.messages]

    def rpc_names(self) -> list[str]:
        package = self.schema.find_package(self.session.package)
        if package is None:
            return []
        service = package.find_service(self.session.service)
        if service is None:
            return []
        return [r.name for r in service.rpcs]

    # -- invocation ----------------------------------------------------------

    def call(self, name: str) -> str:
        """Prompt for request fields, invoke the RPC, and render the response."""
        service = self._current_service()
        rpc = service.find_rpc(name)
        if rpc is None:
            raise UnknownTargetError(name)

        request_type = self._resolve_request_type(rpc.request)
        try:
            request = self._read_request(request_type)
        except (EOFError, KeyboardInterrupt) as e:
            raise CallCancelledError(rpc.name) from e
        method = f"/{self.session.package}.{service.name}/{rpc.name}"

        log_event(
            "rpc_call",
            level=logging.INFO,
            target=self.session.target,
            method=method,
            field_count=len(request),
        )
        try:
            response = self.transport.invoke(self.session.target, method, request)
        except CallError:
            raise
        except Exception as e:
            raise CallError(f"{method}: {e}") from e

        return json.dumps(response, indent=2, ensure_ascii=False)

    def _resolve_request_type(self, type_name: str) -> Message:
        try:
            return self.get_message(type_name)
        except UnknownTargetError as e:
            raise SchemaError(f"Unknown request type: {type_name}") from e

    def _read_request(self, message: Message) -> dict[str, Any]:
        request: dict[str, Any] = {}
        for field in message.fields:
            label = f"repeated {field.type}" if field.repeated else field.type
            raw = self.field_reader.read_field(f"{field.name} ({label}) => ").strip()
            if not raw:
                continue
            if field.repeated:
                request[field.name] = [
                    convert_field_value(field, part.strip())
                    for part in raw.split(",")
                    if part.strip()
                ]
            else:
                request[field.name] = convert_field_value(field, raw)
        return request
