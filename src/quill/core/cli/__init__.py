"""Quill CLI — write entries and look at your writing habits from the terminal."""

import click

from quill import __version__


@click.group()
@click.version_option(version=__version__, package_name="quill")
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Config file (YAML or JSON). Defaults to ~/.quill/config.yaml.",
)
@click.option("--data-dir", type=click.Path(file_okay=False), default=None, help="Where entries are stored.")
@click.option("-v", "--verbose", is_flag=True, help="Log at DEBUG level.")
@click.pass_context
def main(ctx: click.Context, config_file: str | None, data_dir: str | None, verbose: bool) -> None:
    """Quill — a quiet place to write every day."""
    from .common import build_config

    ctx.obj = build_config(config_file, data_dir, verbose)


# Register subcommands
from .entry_cmd import delete, search, show, today, write
from .export_cmd import export
from .stats_cmd import heatmap, mood, stats

main.add_command(today)
main.add_command(write)
main.add_command(show)
main.add_command(delete)
main.add_command(search)
main.add_command(stats)
main.add_command(heatmap)
main.add_command(mood)
main.add_command(export)
