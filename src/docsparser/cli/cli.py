"""CLI entrypoint: Typer app definition and command registration"""

import typer

from docsparser.cli.commands import build_cmd, check_cmd


app = typer.Typer(name="docsparser", no_args_is_help=True, help="Markdown API documentation to JSON schema parser")

app.command(name="build")(build_cmd)
app.command(name="check")(check_cmd)
