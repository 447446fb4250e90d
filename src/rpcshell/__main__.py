"""Entry point for running rpcshell as a module."""

# No try/except here. main() in cli.py handles startup errors and the
# Repl loop is the error boundary for individual lines.

from rpcshell.cli import main

if __name__ == "__main__":
    main()
