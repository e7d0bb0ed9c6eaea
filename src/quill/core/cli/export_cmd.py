"""quill export — write the diary out as text or JSON."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import click

from quill.journal.export import ExportFormat, ExportRange, default_filename, export_entries, select_entries

from .common import parse_day, with_store


@click.command()
@click.option("--format", "fmt", type=click.Choice([f.value for f in ExportFormat]), default="txt")
@click.option("--range", "date_range", type=click.Choice([r.value for r in ExportRange]), default="all")
@click.option("--from", "start", default=None, help="First day for --range custom (YYYY-MM-DD).")
@click.option("--to", "end", default=None, help="Last day for --range custom (YYYY-MM-DD).")
@click.option("--emotions/--no-emotions", default=True, help="Include emotions.")
@click.option("--stats", "include_stats", is_flag=True, help="Include summary statistics.")
@click.option("-o", "--output", type=click.Path(dir_okay=False), default=None, help="Output file ('-' for stdout).")
@click.pass_obj
def export(config, fmt, date_range, start, end, emotions, include_stats, output) -> None:
    """Export entries to a text or JSON file."""
    fmt = ExportFormat(fmt)
    now = datetime.now()

    async def _action(store):
        return select_entries(store.entries, ExportRange(date_range), now, parse_day(start), parse_day(end))

    entries = with_store(config, _action)
    content = export_entries(entries, fmt, include_emotions=emotions, include_stats=include_stats, now=now)

    if output == "-":
        click.echo(content)
        return
    path = Path(output or default_filename(fmt, now))
    path.write_text(content, encoding="utf-8")
    click.echo(f"Exported {len(entries)} entries to {path}")
