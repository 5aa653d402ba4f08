"""
File Explorer command line: an interactive menu loop plus one-shot commands.

Running ``explorer`` with no subcommand starts the menu loop in the start
directory. ``ls``, ``find``, ``init-config`` and ``validate-config`` run once and exit.
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Callable, Dict, Optional

import typer
from pydantic import ValidationError

from explorer.config import (
    ConfigParser,
    ConfigurationError,
    create_config_template,
    load_config,
    validate_config_file,
)
from explorer.models.config import ExplorerConfig, LoggingConfig, LOG_LEVELS
from explorer.models.results import OperationResult
from explorer.models.session import Session
from explorer.tools.listing import format_listing, format_menu
from explorer.tools.navigator import Navigator


logger = logging.getLogger(__name__)

app = typer.Typer(help="Console file explorer", add_completion=False)

EXIT_WORDS = {"0", "exit", "quit"}


@dataclass
class AppState:
    config: ExplorerConfig
    navigator: Navigator
    session: Session
    color: bool


def _echo_result(result: OperationResult) -> None:
    if result.ok:
        if result.message:
            typer.echo(result.message)
    else:
        typer.echo(f"error: {result.message}", err=True)


def _read_line(prompt: str) -> Optional[str]:
    """Prompt and read one line from stdin; None at end of input."""
    typer.echo(prompt, nl=False)
    line = sys.stdin.readline()
    if not line:
        return None
    return line.rstrip("\r\n")


def _read_path(prompt: str) -> Optional[str]:
    """Read a path answer verbatim; a blank answer or end of input cancels."""
    answer = _read_line(prompt)
    if answer is None or not answer.strip():
        return None
    return answer


def _configure_logging(level: int) -> None:
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


class CommandLoop:
    """
    The interactive menu loop.

    Owns the Session and applies navigation results to it; every other
    command is a single navigator call whose result is printed.
    """

    def __init__(self, state: AppState):
        self.state = state
        self.navigator = state.navigator
        self.session = state.session
        self.commands: Dict[str, Callable[[], None]] = {
            "1": self.list_current,
            "2": self.enter_directory,
            "3": self.go_up,
            "4": self.create_file,
            "5": self.create_directory,
            "6": self.delete,
            "7": self.copy,
            "8": self.move,
            "9": self.search,
        }

    def run(self) -> int:
        while True:
            self.show_listing()
            typer.echo(format_menu())
            choice = _read_line("Choose: ")
            if choice is None:
                break
            choice = choice.strip().lower()
            if choice in EXIT_WORDS:
                typer.echo("Goodbye!")
                break
            command = self.commands.get(choice)
            if command is None:
                typer.echo("Invalid choice.")
                continue
            command()
        return 0

    def show_listing(self) -> None:
        directory = self.session.current_directory
        result = self.navigator.list_directory(directory)
        typer.echo(format_listing(directory, result.payload, color=self.state.color))
        if not result.ok:
            _echo_result(result)

    def list_current(self) -> None:
        # The listing is printed at the top of every iteration.
        pass

    def enter_directory(self) -> None:
        raw = _read_path("Enter directory name: ")
        if raw is None:
            return
        result = self.navigator.enter_directory(self.session.current_directory, raw)
        if result.ok:
            self.session.change_to(result.payload)
        else:
            _echo_result(result)

    def go_up(self) -> None:
        result = self.navigator.go_up(self.session.current_directory)
        self.session.change_to(result.payload)

    def create_file(self) -> None:
        raw = _read_path("Enter file path to create: ")
        if raw is not None:
            _echo_result(self.navigator.create_file(self.session.resolve(raw)))

    def create_directory(self) -> None:
        raw = _read_path("Enter directory path to create: ")
        if raw is not None:
            _echo_result(self.navigator.create_directory(self.session.resolve(raw)))

    def delete(self) -> None:
        raw = _read_path("Enter file/directory to delete: ")
        if raw is None:
            return
        target = self.session.resolve(raw)
        if self.state.config.operations.confirm_destructive:
            answer = _read_line(f"Delete {target}? [y/N]: ")
            if answer is None or answer.strip().lower() not in ("y", "yes"):
                typer.echo("Cancelled.")
                return
        _echo_result(self.navigator.delete_path(target))

    def _read_source_and_destination(self) -> Optional[tuple[Path, Path]]:
        src = _read_path("Enter source path: ")
        if src is None:
            return None
        dst = _read_path("Enter destination path: ")
        if dst is None:
            return None
        return self.session.resolve(src), self.session.resolve(dst)

    def copy(self) -> None:
        paths = self._read_source_and_destination()
        if paths is not None:
            _echo_result(self.navigator.copy_path(*paths))

    def move(self) -> None:
        paths = self._read_source_and_destination()
        if paths is not None:
            _echo_result(self.navigator.move_path(*paths))

    def search(self) -> None:
        needle = _read_line("Enter name to search: ")
        if not needle:
            return
        _print_search(self.navigator.search_by_name(self.session.current_directory, needle))


def _print_search(result: OperationResult) -> bool:
    if not result.ok:
        _echo_result(result)
        return False
    count = 0
    for path in result.payload:
        typer.echo(str(path))
        count += 1
    typer.echo(f"{count} match(es).")
    return True


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    config: Annotated[Optional[Path], typer.Option("--config", "-c", help="YAML configuration file")] = None,
    start_dir: Annotated[Optional[Path], typer.Option("--start-dir", "-d", help="Directory to start in")] = None,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable coloured listing output")] = False,
    log_level: Annotated[Optional[str], typer.Option("--log-level", "-l", help="Log level (DEBUG, INFO, WARNING, ERROR)")] = None,
) -> None:
    try:
        result = load_config(config)
    except ConfigurationError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(1)
    explorer_config = result.config

    if log_level is not None:
        try:
            explorer_config.logging = LoggingConfig(level=log_level)
        except ValidationError:
            typer.echo(f"error: invalid log level: {log_level} (choose from {', '.join(LOG_LEVELS)})",
                       err=True)
            raise typer.Exit(1)
    _configure_logging(explorer_config.logging.get_level_number())
    for warning in result.warnings:
        logger.warning(warning)

    try:
        session = Session.start(start_dir or explorer_config.start_directory)
    except OSError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(1)

    ctx.obj = AppState(
        config=explorer_config,
        navigator=Navigator(explorer_config),
        session=session,
        color=explorer_config.display.color and not no_color,
    )

    if ctx.invoked_subcommand is None:
        raise typer.Exit(CommandLoop(ctx.obj).run())


@app.command("ls", help="List a directory once and exit")
def ls_cmd(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="Directory to list (default: start directory)")] = ".",
    as_json: Annotated[bool, typer.Option("--json", help="Print entries as a JSON array")] = False,
) -> None:
    state: AppState = ctx.obj
    directory = state.session.resolve(path)
    result = state.navigator.list_directory(directory)
    if as_json:
        typer.echo(json.dumps([entry.to_dict() for entry in result.payload], indent=2))
    else:
        typer.echo(format_listing(directory, result.payload, color=state.color))
    if not result.ok:
        _echo_result(result)
        raise typer.Exit(1)


@app.command("find", help="Search recursively for names containing NEEDLE")
def find_cmd(
    ctx: typer.Context,
    needle: Annotated[str, typer.Argument(help="Case-sensitive substring to look for")],
    root: Annotated[str, typer.Option("--root", "-r", help="Directory to search (default: start directory)")] = ".",
) -> None:
    state: AppState = ctx.obj
    if not _print_search(state.navigator.search_by_name(state.session.resolve(root), needle)):
        raise typer.Exit(1)


@app.command("init-config", help="Write a commented configuration template")
def init_config_cmd(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Where to write the template")] = Path(".explorer.yaml"),
    force: Annotated[bool, typer.Option("--force", "-f", help="Overwrite an existing file")] = False,
    current: Annotated[bool, typer.Option("--current", help="Write the configuration in effect instead of the defaults")] = False,
) -> None:
    if path.exists() and not force:
        typer.echo(f"error: {path} already exists (use --force to overwrite)", err=True)
        raise typer.Exit(1)
    try:
        if current:
            state: AppState = ctx.obj
            ConfigParser().save_config(state.config, path)
        else:
            create_config_template(path)
    except ConfigurationError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Wrote {path}.")


@app.command("validate-config", help="Check a configuration file and report problems")
def validate_config_cmd(
    path: Annotated[Path, typer.Argument(help="Configuration file to check")],
) -> None:
    errors = validate_config_file(path)
    if errors:
        for error in errors:
            typer.echo(f"error: {error}", err=True)
        raise typer.Exit(1)
    typer.echo(f"{path}: OK.")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
