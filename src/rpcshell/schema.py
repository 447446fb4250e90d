"""In-memory service schema model and JSON descriptor loading."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from rpcshell.errors import SchemaError


def _require_name(payload: Mapping[str, Any], kind: str) -> str:
    name = payload.get("name")
    if not isinstance(name, str) or not name:
        raise SchemaError(f"{kind} must have a non-empty string 'name'")
    return name


def _require_list(payload: Mapping[str, Any], key: str, owner: str) -> list[Any]:
    value = payload.get(key, [])
    if not isinstance(value, list):
        raise SchemaError(f"{owner}: '{key}' must be an array")
    for i, item in enumerate(value):
        if not isinstance(item, Mapping):
            raise SchemaError(f"{owner}: {key}[{i}] is not a valid object")
    return value


@dataclass(frozen=True)
class MessageField:
    """One field of a message type."""

    name: str
    type: str
    repeated: bool = False

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "MessageField":
        name = _require_name(payload, "Field")
        field_type = payload.get("type", "string")
        if not isinstance(field_type, str) or not field_type:
            raise SchemaError(f"Field {name}: 'type' must be a non-empty string")
        return cls(name=name, type=field_type, repeated=bool(payload.get("repeated", False)))


@dataclass(frozen=True)
class Message:
    name: str
    fields: tuple[MessageField, ...] = ()

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Message":
        name = _require_name(payload, "Message")
        raw_fields = _require_list(payload, "fields", f"Message {name}")
        return cls(name=name, fields=tuple(MessageField.from_dict(f) for f in raw_fields))


@dataclass(frozen=True)
class RPC:
    name: str
    request: str
    response: str
    client_streaming: bool = False
    server_streaming: bool = False

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "RPC":
        name = _require_name(payload, "RPC")
        request = payload.get("request")
        response = payload.get("response")
        if not isinstance(request, str) or not isinstance(response, str):
            raise SchemaError(f"RPC {name}: 'request' and 'response' must be strings")
        return cls(
            name=name,
            request=request,
            response=response,
            client_streaming=bool(payload.get("client_streaming", False)),
            server_streaming=bool(payload.get("server_streaming", False)),
        )


@dataclass(frozen=True)
class Service:
    name: str
    rpcs: tuple[RPC, ...] = ()

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Service":
        name = _require_name(payload, "Service")
        raw_rpcs = _require_list(payload, "rpcs", f"Service {name}")
        return cls(name=name, rpcs=tuple(RPC.from_dict(r) for r in raw_rpcs))

    def find_rpc(self, name: str) -> RPC | None:
        for rpc in self.rpcs:
            if rpc.name == name:
                return rpc
        return None


@dataclass(frozen=True)
class Package:
    name: str
    services: tuple[Service, ...] = ()
    messages: tuple[Message, ...] = ()

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Package":
        name = _require_name(payload, "Package")
        owner = f"Package {name}"
        return cls(
            name=name,
            services=tuple(
                Service.from_dict(s) for s in _require_list(payload, "services", owner)
            ),
            messages=tuple(
                Message.from_dict(m) for m in _require_list(payload, "messages", owner)
            ),
        )

    def find_service(self, name: str) -> Service | None:
        for service in self.services:
            if service.name == name:
                return service
        return None

    def find_message(self, name: str) -> Message | None:
        for message in self.messages:
            if message.name == name:
                return message
        return None


@dataclass(frozen=True)
class Schema:
    """Packages known to the shell, in descriptor order."""

    packages: tuple[Package, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Schema":
        if not isinstance(payload, Mapping):
            raise SchemaError("Schema root must be an object")
        raw_packages = _require_list(payload, "packages", "Schema")
        packages = tuple(Package.from_dict(p) for p in raw_packages)

        seen: set[str] = set()
        for package in packages:
            if package.name in seen:
                raise SchemaError(f"Duplicate package: {package.name}")
            seen.add(package.name)

        return cls(packages=packages)

    def find_package(self, name: str) -> Package | None:
        for package in self.packages:
            if package.name == name:
                return package
        return None


def split_qualified_name(name: str) -> tuple[str, str]:
    """Split 'pkg.sub.Name' into ('pkg.sub', 'Name'); no dot gives ('', name)."""
    package, _, short = name.rpartition(".")
    return package, short


def load_schema(path: str) -> Schema:
    """Load a schema descriptor from a JSON file.

    Raises:
        SchemaError: If the file is missing, not JSON, or structurally invalid
    """
    schema_path = Path(path)
    try:
        with open(schema_path, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except FileNotFoundError as e:
        raise SchemaError(f"Schema file not found: {schema_path}") from e
    except json.JSONDecodeError as e:
        raise SchemaError(f"Invalid JSON in schema file: {e}") from e
    except OSError as e:
        raise SchemaError(f"Could not read schema file: {e}") from e

    return Schema.from_dict(payload)
