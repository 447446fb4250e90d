"""Single-line evaluation: tokenize, resolve, validate, run."""

from rpcshell.errors import UnknownCommandError
from rpcshell.registry import Registry

HELP_COMMAND = "help"
HELP_SYNOPSIS = "list available commands"
HELP_FLAGS = frozenset(("-h", "--help"))


def tokenize(line: str) -> list[str]:
    """Split a line on whitespace. No quoting or escaping."""
    return line.split()


def render_help(registry: Registry) -> str:
    """Render the command table: names padded to the longest, then synopsis."""
    rows = [(name, registry.commands[name].synopsis()) for name in registry.names()]
    width = max((len(name) for name, _ in rows), default=0)

    lines = ["Available commands:"]
    for name, synopsis in rows:
        lines.append(f"  {name.ljust(width)}    {synopsis}")
    lines.append("")
    lines.append("Show more details:")
    lines.append("  <command> --help")
    return "\n".join(lines)


class Evaluator:
    """Turns one raw input line into output text or a raised AppError."""

    def __init__(self, registry: Registry) -> None:
        self.registry = registry

    def evaluate(self, line: str) -> str:
        """Evaluate one line and return the text to print ("" prints nothing)."""
        tokens = tokenize(line)
        if not tokens:
            return ""

        name, args = tokens[0], tokens[1:]
        if name == HELP_COMMAND:
            return render_help(self.registry)

        cmd = self.registry.get(name)
        if cmd is None:
            raise UnknownCommandError(name)

        if args and args[0] in HELP_FLAGS:
            return cmd.help()

        cmd.validate(args)
        return cmd.run(args)
