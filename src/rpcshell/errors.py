"""Custom exception hierarchy for rpcshell."""


class AppError(Exception):
    """Base exception for app-specific failures."""


class UnknownCommandError(AppError):
    def __init__(self, name: str) -> None:
        super().__init__(f"unknown command: {name}")
        self.name = name


class ArgumentRequiredError(ValueError, AppError):
    """A mandatory command argument is missing."""

    def __init__(self, field: str) -> None:
        super().__init__(f"argument required: {field}")
        self.field = field


class UnknownTargetError(ValueError, AppError):
    """A command received an argument value it cannot resolve."""

    def __init__(self, target: str) -> None:
        super().__init__(f"unknown target: {target}")
        self.target = target


class PackageNotSelectedError(AppError):
    def __init__(self) -> None:
        super().__init__("no package selected (use 'package <name>')")


class ServiceNotSelectedError(AppError):
    def __init__(self) -> None:
        super().__init__("no service selected (use 'service <name>')")


class FieldValueError(ValueError, AppError):
    def __init__(self, field: str, field_type: str, raw: str) -> None:
        super().__init__(f"invalid value for {field} ({field_type}): {raw!r}")
        self.field = field


class CallError(AppError):
    """Remote invocation failures."""


class CallCancelledError(CallError):
    def __init__(self, rpc: str) -> None:
        super().__init__(f"call cancelled: {rpc}")
        self.rpc = rpc


class ConfigError(ValueError, AppError):
    """Config file validation errors."""


class SchemaError(ValueError, AppError):
    """Schema descriptor load/validation errors."""
