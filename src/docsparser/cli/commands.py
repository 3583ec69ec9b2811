"""CLI command implementations"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from docsparser.config import Settings, load_config
from docsparser.core.pipeline import count_by_type, run_build, run_parse
from docsparser.core.parse import resolve_version


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _version(base_dir: Path, settings: Settings) -> str:
    """Configured module version, else the package.json version of base_dir."""
    if settings.module_version:
        return settings.module_version
    try:
        return resolve_version(base_dir)
    except (FileNotFoundError, ValueError) as e:
        _fail("Could not determine the module version; pass --module-version", e)


def _parse_options(settings: Settings, files: Optional[list[str]]) -> dict:
    return {
        "api_dir": settings.api_dir,
        "package_mode": settings.package_mode,
        "use_readme": settings.use_readme,
        "file_list": files or None,
        "website_url": settings.website_url,
        "repo_url": settings.repo_url,
        "rules": settings.parse_rules(),
        "parser_config": settings.parser_config,
    }


def _resolve_dir(path: str) -> Path:
    base_dir = Path(path).resolve()
    if not base_dir.is_dir():
        _fail(f"Resolved directory does not exist: {base_dir}")
    return base_dir


def build_cmd(
    path: Annotated[str, typer.Argument(help="Package root containing the documentation")],
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    out_file: Annotated[Optional[str], typer.Option("--out-file", help="Output JSON file name")] = None,
    version: Annotated[Optional[str], typer.Option("--module-version", help="Version stamped on every container")] = None,
    mode: Annotated[Optional[str], typer.Option("--package-mode", help="single or multi")] = None,
    api_dir: Annotated[Optional[str], typer.Option("--api-dir", help="API docs directory relative to PATH")] = None,
    readme: Annotated[Optional[bool], typer.Option("--readme", help="Parse README.md instead of the API docs")] = None,
    strict: Annotated[Optional[bool], typer.Option("--strict", help="Reject Boolean / Number / String type names")] = None,
    files: Annotated[Optional[list[str]], typer.Option("--file", help="Only parse these file names (repeatable)")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log progress to stderr")] = False,
    ):
    """Parse the documentation under PATH and write the JSON API description."""
    _setup_logging(verbose)
    settings = _settings(overrides={
        "out_dir": out, "out_file": out_file, "module_version": version,
        "package_mode": mode, "api_dir": api_dir, "use_readme": readme,
        "lowercase_primitives": strict,
    })
    base_dir = _resolve_dir(path)
    module_version = _version(base_dir, settings)

    try:
        out_path, containers = run_build(
            base_dir, module_version, Path(settings.out_dir), settings.out_file,
            **_parse_options(settings, files),
        )
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))

    typer.echo(f"Parsed {len(containers)} container(s) for version {module_version}")
    typer.echo(f"API written to {out_path}")


def check_cmd(
    path: Annotated[str, typer.Argument(help="Package root containing the documentation")],
    version: Annotated[Optional[str], typer.Option("--module-version", help="Version stamped on every container")] = None,
    mode: Annotated[Optional[str], typer.Option("--package-mode", help="single or multi")] = None,
    api_dir: Annotated[Optional[str], typer.Option("--api-dir", help="API docs directory relative to PATH")] = None,
    readme: Annotated[Optional[bool], typer.Option("--readme", help="Parse README.md instead of the API docs")] = None,
    strict: Annotated[Optional[bool], typer.Option("--strict", help="Reject Boolean / Number / String type names")] = None,
    files: Annotated[Optional[list[str]], typer.Option("--file", help="Only parse these file names (repeatable)")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log progress to stderr")] = False,
    ):
    """Parse the documentation under PATH without writing output; print container counts."""
    _setup_logging(verbose)
    settings = _settings(overrides={
        "module_version": version, "package_mode": mode, "api_dir": api_dir,
        "use_readme": readme, "lowercase_primitives": strict,
    })
    base_dir = _resolve_dir(path)
    module_version = _version(base_dir, settings)

    try:
        containers = run_parse(base_dir, module_version, **_parse_options(settings, files))
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))

    for container_type, count in sorted(count_by_type(containers).items()):
        typer.echo(f"  {container_type}: {count}")
    typer.echo(f"Check complete - {len(containers)} container(s), no errors")
