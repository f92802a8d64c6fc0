"""vnode CLI package"""

import click

from vnode.cli.run import run_command
from vnode.cli.resolve import resolve_command


@click.group()
def main():
    """vnode CLI - run Python modules on demand."""
    pass


main.add_command(run_command, "run")
main.add_command(resolve_command, "resolve")

__all__ = [
    "main",
    "run_command",
    "resolve_command",
]
