"""Run command for vnode CLI."""

import asyncio
import json
import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict

import click

from vnode.runtime.runner import Runner, RunnerOptions


def to_jsonable(value: Any) -> Any:
    """Best-effort JSON view of an exported value."""
    try:
        json.dumps(value)
        return value
    except (TypeError, ValueError):
        return repr(value)


def export_summary(exports: Any) -> Dict[str, Any]:
    keys = exports.keys() if hasattr(exports, "keys") else [
        k for k in dir(exports) if not k.startswith("_")
    ]
    summary = {}
    for key in keys:
        try:
            value = exports[key] if hasattr(exports, "__getitem__") else getattr(exports, key)
        except Exception as e:
            value = f"<error: {e}>"
        summary[key] = to_jsonable(value)
    return summary


def _parse_stubs(stubs) -> Dict[str, Any]:
    parsed = {}
    for item in stubs:
        identifier, sep, raw = item.partition("=")
        if not sep:
            raise click.BadParameter(f"expected ID=JSON, got {item!r}", param_hint="--stub")
        try:
            parsed[identifier] = json.loads(raw)
        except json.JSONDecodeError as e:
            raise click.BadParameter(f"invalid JSON for {identifier}: {e}", param_hint="--stub")
    return parsed


@click.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
@click.option('--root', type=click.Path(exists=True, file_okay=False), default=None,
              help='Project root (defaults to cwd)')
@click.option('--base', default=None, help='Base prefix stripped from identifiers')
@click.option('--interpret-default/--no-interpret-default', default=True,
              help='Wrap external modules exposing a default value')
@click.option('--stub', 'stubs', multiple=True, help='Stub a module: ID=JSON')
@click.option('--timeout', type=float, default=None, help='Give up after SECONDS')
@click.option('--json-output', '-j', 'json_output', is_flag=True, help='Output as JSON')
@click.option('--verbose', '-v', is_flag=True, help='Debug logging')
def run_command(file, root, base, interpret_default, stubs, timeout, json_output, verbose):
    """Run FILE and print its exports."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    options = RunnerOptions(
        base=base,
        request_stubs=_parse_stubs(stubs),
        interpret_default=interpret_default,
    )
    if root:
        options.root = root
    runner = Runner(options)

    start = time.time()
    try:
        exports = asyncio.run(asyncio.wait_for(runner.run(file), timeout))
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    elapsed = (time.time() - start) * 1000

    summary = export_summary(exports)
    if json_output:
        output = {
            "success": True,
            "file": str(Path(file).resolve()),
            "execution_time_ms": elapsed,
            "modules": len(runner.module_cache),
            "exports": summary,
        }
        click.echo(json.dumps(output, indent=2))
    else:
        click.echo(f"✓ Ran {file}")
        click.echo(f"  Execution time: {elapsed:.2f}ms")
        click.echo(f"  Modules loaded: {len(runner.module_cache)}")
        click.echo(f"  Exports: {', '.join(summary) or '(none)'}")
