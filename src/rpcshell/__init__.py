"""rpcshell - interactive shell for exploring and calling RPC services."""

__version__ = "0.1.0"
