"""
CLI entry point for packdex.

This module provides the Typer-based command-line interface for packdex.

Commands:
    list        List every pack in the registry
    search      Search packs by name, description and tags
    info        Show one pack's metadata and content
    validate    Check a pack directory or the whole registry
    install     Copy a pack into a destination directory
    doctor      Check the environment and registry layout

Architecture Note:
    The CLI is intentionally thin - it parses arguments and delegates to
    packdex.index and packdex.pack. The index is rebuilt on every command.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated, Any, NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.markup import escape
from rich.table import Table

from packdex import __version__
from packdex.errors import PackdexError, PackWarning
from packdex.index import PackIndex, build_index, search
from packdex.pack import PackInstaller, PackLoader
from packdex.schema import CATEGORY_DIRS, PackType

# Initialize Typer app with metadata
app = typer.Typer(
    name="packdex",
    help="Index, search and install skill, context and prompt packs.",
    add_completion=False,
    no_args_is_help=True,
)

# Rich console for formatted output
console = Console()
err_console = Console(stderr=True)

RootOption = Annotated[
    Path,
    typer.Option(
        "--root",
        "-r",
        help="Registry root containing skills/, contexts/ and prompts/.",
        envvar="PACKDEX_ROOT",
        file_okay=False,
        resolve_path=True,
    ),
]

JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Output in JSON format."),
]

TypeOption = Annotated[
    Optional[PackType],
    typer.Option("--type", "-t", help="Only include packs of this type."),
]


def _configure_logging(verbose: bool) -> None:
    """Send packdex logs to stderr through rich."""
    logger = logging.getLogger("packdex")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    logger.addHandler(RichHandler(console=err_console, show_path=False))
    logger.setLevel(logging.DEBUG if verbose else logging.ERROR)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold]packdex[/bold] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable debug logging on stderr."),
    ] = False,
) -> None:
    """
    packdex - Browse a registry of instructional packs.

    Scans skills/, contexts/ and prompts/ under the registry root, validates
    every pack.yaml, and lists, searches or installs the packs it finds.
    """
    _configure_logging(verbose)


# =============================================================================
# Output Helpers
# =============================================================================


def _output_json(data: dict[str, Any]) -> None:
    print(json.dumps(data, indent=2, default=str))


def _output_json_error(error: PackdexError) -> None:
    """Output an error in JSON format."""
    output = {"error": True, **error.to_dict()}
    _output_json(output)


def _fail(error: PackdexError, json_output: bool) -> NoReturn:
    if json_output:
        _output_json_error(error)
    else:
        console.print(f"[red]Error: {escape(error.message)}[/red]")
        if error.suggestion:
            console.print(f"[dim]{escape(error.suggestion)}[/dim]")
    raise typer.Exit(code=1)


def _display_warnings(warnings: list[PackWarning]) -> None:
    if not warnings:
        return
    console.print()
    console.print(f"[yellow]{len(warnings)} warning(s):[/yellow]")
    for warning in warnings:
        console.print(f"  [yellow]•[/yellow] [bold]{warning.kind}[/bold] {escape(warning.message)}")


def _summary_table(summaries: list[Any]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Version")
    table.add_column("Type")
    table.add_column("Tags")
    table.add_column("Description")

    for s in summaries:
        desc = s.description[:60] + "..." if len(s.description) > 60 else s.description
        table.add_row(
            escape(s.name),
            escape(s.version),
            s.type.value,
            escape(", ".join(s.tags)),
            escape(desc),
        )
    return table


# =============================================================================
# Commands
# =============================================================================


@app.command("list")
def list_packs(
    root: RootOption = Path("."),
    pack_type: TypeOption = None,
    json_output: JsonOption = False,
) -> None:
    """
    List every valid pack in name order.

    Packs with invalid metadata or duplicate names are reported as warnings.

    Example:
        $ packdex list --root ./registry --type skill
    """
    try:
        index = build_index(root)
    except PackdexError as e:
        _fail(e, json_output)

    summaries = search(index, "", pack_type=pack_type)

    if json_output:
        _output_json({
            "root": str(index.root),
            "packs": [s.to_dict() for s in summaries],
            "count": len(summaries),
            "warnings": [w.to_dict() for w in index.warnings],
        })
    else:
        if not summaries:
            console.print("[dim]No packs found.[/dim]")
            console.print()
            console.print(
                "[dim]Packs live in skills/, contexts/ or prompts/ with a pack.yaml file.[/dim]"
            )
        else:
            console.print(f"[bold]Available Packs ({len(summaries)})[/bold]")
            console.print(_summary_table(summaries))
        _display_warnings(index.warnings)

    raise typer.Exit(code=0)


@app.command("search")
def search_packs(
    query: Annotated[
        str,
        typer.Argument(help="Text to match against names, descriptions and tags."),
    ] = "",
    root: RootOption = Path("."),
    pack_type: TypeOption = None,
    tag: Annotated[
        Optional[str],
        typer.Option("--tag", help="Only include packs carrying this tag."),
    ] = None,
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-n", min=1, help="Maximum number of results."),
    ] = None,
    json_output: JsonOption = False,
) -> None:
    """
    Search packs, best matches first.

    Exact name matches rank first, then name substrings, then description
    or tag substrings. Ties are ordered by name.

    Example:
        $ packdex search git --type prompt
    """
    try:
        index = build_index(root)
    except PackdexError as e:
        _fail(e, json_output)

    results = search(index, query, pack_type=pack_type, tag=tag)
    if limit is not None:
        results = results[:limit]

    if json_output:
        _output_json({
            "query": query,
            "results": [s.to_dict() for s in results],
            "count": len(results),
        })
    elif not results:
        console.print(f"[dim]No packs match '{escape(query)}'.[/dim]")
    else:
        console.print(f"[bold]{len(results)} match(es) for '{escape(query)}'[/bold]")
        console.print(_summary_table(results))

    raise typer.Exit(code=0)


@app.command("info")
def info(
    pack_name: Annotated[
        str,
        typer.Argument(help="Exact pack name."),
    ],
    root: RootOption = Path("."),
    json_output: JsonOption = False,
) -> None:
    """Show one pack's metadata and instructional document."""
    try:
        pack = build_index(root).get(pack_name)
    except PackdexError as e:
        _fail(e, json_output)

    metadata = pack.metadata

    if json_output:
        output = pack.summary().to_dict()
        output.update({
            "path": str(pack.path),
            "category": pack.category,
            "content_file": pack.content_path.name,
            "content": pack.content,
        })
        _output_json(output)
        raise typer.Exit(code=0)

    console.print(f"[bold cyan]{escape(metadata.name)}[/bold cyan] v{escape(metadata.version)}")
    console.print()
    console.print(f"[bold]Type:[/bold] {metadata.type.value}")
    if metadata.description:
        console.print(f"[bold]Description:[/bold] {escape(metadata.description)}")
    if metadata.author:
        console.print(f"[bold]Author:[/bold] {escape(metadata.author)}")
    console.print(f"[bold]License:[/bold] {escape(metadata.license)}")
    if metadata.tags:
        console.print(f"[bold]Tags:[/bold] {escape(', '.join(metadata.tags))}")
    console.print()

    if pack.content:
        console.print(Markdown(pack.content))
    else:
        console.print(f"[yellow]No {pack.content_path.name} in this pack.[/yellow]")
    console.print()
    console.print(f"[dim]Pack path: {escape(str(pack.path))}[/dim]")

    raise typer.Exit(code=0)


@app.command("validate")
def validate(
    pack_path: Annotated[
        Optional[Path],
        typer.Argument(
            help="Pack directory to check. Checks the whole registry if omitted.",
            exists=True,
            file_okay=False,
            dir_okay=True,
            resolve_path=True,
        ),
    ] = None,
    root: RootOption = Path("."),
    json_output: JsonOption = False,
) -> None:
    """
    Validate one pack directory, or every pack under the registry root.

    Exits with code 1 if any problem is found.
    """
    if pack_path is not None:
        errors = PackLoader(pack_path).validate_structure()
        if json_output:
            _output_json({
                "valid": not errors,
                "errors": errors,
                "pack_path": str(pack_path),
            })
        elif errors:
            console.print(f"[red]Pack validation failed: {len(errors)} error(s)[/red]")
            console.print()
            for error in errors:
                console.print(f"  [red]•[/red] {escape(error)}")
        else:
            console.print(f"[green]✓[/green] Pack at [cyan]{escape(pack_path.name)}[/cyan] is valid")
        raise typer.Exit(code=0 if not errors else 1)

    try:
        index = build_index(root)
    except PackdexError as e:
        _fail(e, json_output)

    problems = _registry_problems(index)
    ok = not problems and not index.warnings

    if json_output:
        _output_json({
            "valid": ok,
            "root": str(index.root),
            "count": len(index),
            "warnings": [w.to_dict() for w in index.warnings],
            "problems": problems,
        })
    else:
        for name, errors in problems.items():
            for error in errors:
                console.print(f"  [red]•[/red] [cyan]{escape(name)}[/cyan]: {escape(error)}")
        _display_warnings(index.warnings)
        if ok:
            console.print(f"[green]✓[/green] {len(index)} pack(s) valid")
        else:
            console.print()
            console.print("[red]Registry validation failed[/red]")

    raise typer.Exit(code=0 if ok else 1)


def _registry_problems(index: PackIndex) -> dict[str, list[str]]:
    """Structural problems of indexed packs, keyed by pack name."""
    problems: dict[str, list[str]] = {}
    for pack in index.sorted_packs():
        errors = PackLoader(pack.path, category=pack.category).validate_structure()
        if errors:
            problems[pack.name] = errors
    return problems


@app.command("install")
def install(
    pack_name: Annotated[
        str,
        typer.Argument(help="Exact pack name."),
    ],
    dest: Annotated[
        Path,
        typer.Option(
            "--dest",
            "-d",
            help="Directory to install into; the pack lands in DEST/<name>/.",
            file_okay=False,
            resolve_path=True,
        ),
    ],
    root: RootOption = Path("."),
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Replace an existing installation."),
    ] = False,
    json_output: JsonOption = False,
) -> None:
    """
    Copy a pack's metadata and document into a destination directory.

    Example:
        $ packdex install commit-message --dest ~/.agent/skills
    """
    try:
        pack = build_index(root).get(pack_name)
        target = PackInstaller(dest).install(pack, force=force)
    except PackdexError as e:
        _fail(e, json_output)

    if json_output:
        _output_json({
            "installed": True,
            "name": pack.name,
            "version": pack.metadata.version,
            "path": str(target),
        })
    else:
        console.print(
            f"[green]✓[/green] Installed [cyan]{escape(pack.name)}[/cyan] v{escape(pack.metadata.version)} to {escape(str(target))}"
        )

    raise typer.Exit(code=0)


@app.command()
def doctor(
    root: RootOption = Path("."),
    json_output: JsonOption = False,
) -> None:
    """
    Check the environment and registry layout.

    Verifies:
    - Python version (3.11+)
    - The registry root exists and has at least one category directory
    - The registry scans without warnings

    Example:
        $ packdex doctor --root ./registry
    """
    checks = []

    # Check 1: Python version
    py_version = sys.version_info
    py_ok = py_version >= (3, 11)
    checks.append({
        "name": "Python version",
        "ok": py_ok,
        "value": f"{py_version.major}.{py_version.minor}.{py_version.micro}",
        "message": "OK" if py_ok else "Requires Python 3.11+",
    })

    # Check 2: Category directories
    present = [name for name in CATEGORY_DIRS.values() if (root / name).is_dir()]
    layout_ok = bool(present)
    checks.append({
        "name": "Registry layout",
        "ok": layout_ok,
        "value": str(root),
        "message": (
            f"Found {', '.join(p + '/' for p in present)}"
            if layout_ok
            else "No skills/, contexts/ or prompts/ directory"
        ),
    })

    # Check 3: Scan
    try:
        index = build_index(root)
        scan_ok = not index.warnings
        scan_message = f"{len(index)} pack(s), {len(index.warnings)} warning(s)"
    except PackdexError as e:
        scan_ok = False
        scan_message = e.message
    checks.append({
        "name": "Registry scan",
        "ok": scan_ok,
        "value": str(root),
        "message": scan_message,
    })

    all_ok = all(check["ok"] for check in checks)

    if json_output:
        _output_json({
            "ok": all_ok,
            "version": __version__,
            "checks": checks,
        })
    else:
        console.print(f"[bold]packdex doctor[/bold] v{__version__}")
        console.print()
        for check in checks:
            icon = "[green]✓[/green]" if check["ok"] else "[red]✗[/red]"
            if check["ok"]:
                console.print(f"{icon} {check['name']}: [dim]{escape(check['value'])}[/dim] - {escape(check['message'])}")
            else:
                console.print(f"{icon} {check['name']}: [dim]{escape(check['value'])}[/dim]")
                console.print(f"    [red]{escape(check['message'])}[/red]")
        console.print()
        if all_ok:
            console.print("[green]All checks passed![/green]")
        else:
            console.print("[yellow]Some checks failed. See above for details.[/yellow]")

    raise typer.Exit(code=0 if all_ok else 1)


if __name__ == "__main__":
    app()
