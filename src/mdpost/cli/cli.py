"""CLI entrypoint: Typer app definition and command registration"""

import logging
from typing import Annotated

import typer

from mdpost.cli.commands import build_cmd, check_cmd, list_cmd


app = typer.Typer(name="mdpost", no_args_is_help=True, help="Blog post frontmatter loader and validator")


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log per-file progress")] = False,
    ):
    """Configure logging before any command runs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )


app.command(name="check")(check_cmd)
app.command(name="list")(list_cmd)
app.command(name="build")(build_cmd)
