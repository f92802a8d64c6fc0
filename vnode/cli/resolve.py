"""Resolve command for vnode CLI."""

import json
import os

import click

from vnode.runtime.utils import normalize_id, to_file_path


@click.command()
@click.argument('identifier')
@click.option('--root', type=click.Path(file_okay=False), default=None, help='Project root (defaults to cwd)')
@click.option('--base', default=None, help='Base prefix stripped from identifiers')
@click.option('--json-output', '-j', 'json_output', is_flag=True, help='Output as JSON')
def resolve_command(identifier, root, base, json_output):
    """Show the normalized identifier and cache path for IDENTIFIER."""
    root = os.path.abspath(root or os.getcwd())
    normalized = normalize_id(identifier, base)
    output = {
        "identifier": normalized,
        "path": to_file_path(normalized, root),
    }

    if json_output:
        click.echo(json.dumps(output, indent=2))
    else:
        click.echo(f"Identifier: {output['identifier']}")
        click.echo(f"  Path: {output['path']}")
