"""CLI adapter for ``lib_hash_config`` built on ``lib_cli_exit_tools``.

Purpose
-------
Let operators inspect configuration files and wire payloads without writing
Python: look up a key, render merged files, and convert between the line
format and the wire format.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command that wires global traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata.
* :func:`cli_get` – prints one value from merged files.
* :func:`cli_dump` – renders merged files as line format or JSON.
* :func:`cli_serialize` / :func:`cli_deserialize` – wire format conversion.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
The CLI lives in the outermost layer. It only calls :mod:`lib_hash_config.core`
and the adapters' string helpers; ``lib_cli_exit_tools`` owns exit codes.
"""

from __future__ import annotations

import sys
from importlib import metadata
from pathlib import Path
from typing import Final, Optional, Sequence, TextIO

import lib_cli_exit_tools
import rich_click as click

from .adapters.line_format.default import dumps
from .core import deserialize, read_files, serialize
from .domain.config import ConfigStore

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000

FORMAT_CHOICES: Final[tuple[str, ...]] = ("line", "json")

_FILES_ARGUMENT = click.argument(
    "files",
    nargs=-1,
    required=True,
    type=click.Path(path_type=Path, exists=True, file_okay=True, dir_okay=False, readable=True),
)


def _resolve_version() -> str:
    """Return the installed package version, or ``"0.0.0"`` for source checkouts."""

    try:
        return metadata.version("lib_hash_config")
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Case-insensitive key/value configuration store",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="lib_hash_config",
    message="lib_hash_config version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command configuring traceback handling for all subcommands.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata("lib_hash_config")
    except metadata.PackageNotFoundError:
        click.echo("lib_hash_config (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'lib_hash_config')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("get", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("key")
@_FILES_ARGUMENT
@click.pass_context
def cli_get(ctx: click.Context, key: str, files: Sequence[Path]) -> None:
    """Print the value of KEY from FILES (earlier files win); exit 1 when absent.

    Examples
    --------
    >>> from click.testing import CliRunner
    >>> runner = CliRunner()
    >>> with runner.isolated_filesystem():
    ...     _ = Path("a.cfg").write_text("Mode=fast\\n", encoding="utf-8")
    ...     result = runner.invoke(cli, ["get", "MODE", "a.cfg"])
    >>> result.output
    'fast\\n'
    """

    store, _ = read_files(files)
    value = store.get(key)
    if value is None:
        click.echo(f"{key}: not set", err=True)
        ctx.exit(1)
    click.echo(value)


@cli.command("dump", context_settings=CLICK_CONTEXT_SETTINGS)
@_FILES_ARGUMENT
@click.option(
    "--format",
    "output_format",
    type=click.Choice(FORMAT_CHOICES, case_sensitive=False),
    default="line",
    show_default=True,
    help="Render as key=value lines or as a JSON object",
)
@click.option(
    "--indent",
    type=int,
    default=None,
    help="Pretty-print JSON output with the provided indent size",
)
def cli_dump(files: Sequence[Path], output_format: str, indent: Optional[int]) -> None:
    """Merge FILES (earlier files win) and print the result."""

    store, _ = read_files(files)
    if output_format.lower() == "json":
        click.echo(store.to_json(indent=indent))
        return
    click.echo(dumps(store), nl=False)


@cli.command("serialize", context_settings=CLICK_CONTEXT_SETTINGS)
@_FILES_ARGUMENT
def cli_serialize(files: Sequence[Path]) -> None:
    """Merge FILES and print the wire encoding of the result."""

    store, _ = read_files(files)
    click.echo(serialize(store))


@cli.command("deserialize", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--input",
    "source",
    type=click.File("r", encoding="utf-8"),
    default="-",
    show_default=True,
    help="File holding a wire payload ('-' reads standard input)",
)
def cli_deserialize(source: TextIO) -> None:
    """Decode a wire payload and print it as key=value lines."""

    store = ConfigStore()
    deserialize(store, source.read())
    click.echo(dumps(store), nl=False)


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="lib_hash_config",
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
