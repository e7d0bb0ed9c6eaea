"""quill today / write / show / delete / search — working with entries."""

from __future__ import annotations

import click

from quill.journal.search import DateRange, LengthBand, SearchFilters, SortBy
from quill.journal.search import search as run_search

from .common import format_entry, parse_day, resolve_emotion, with_store


@click.command()
@click.pass_obj
def today(config) -> None:
    """Show today's entry, starting an empty one if needed."""

    async def _action(store):
        return await store.get_or_create_todays_entry()

    entry = with_store(config, _action)
    click.echo(format_entry(entry))


@click.command()
@click.argument("text", required=False)
@click.option("--date", "day", default=None, help="Day to write for (YYYY-MM-DD). Defaults to today.")
@click.option("--append", is_flag=True, help="Add to the existing content instead of replacing it.")
@click.option("--tag", "tags", multiple=True, help="Tag to add (repeatable).")
@click.option("--emotion", "emotions", multiple=True, help="Emotion to add, e.g. happy (repeatable).")
@click.option("--minutes", type=int, default=0, help="Minutes spent writing, added to the total.")
@click.pass_obj
def write(config, text, day, append, tags, emotions, minutes) -> None:
    """Write TEXT into an entry. Reads stdin when TEXT is omitted."""
    if text is None:
        text = click.get_text_stream("stdin").read()
    entry_day = parse_day(day)

    async def _action(store):
        entry = await store.create_entry(entry_day)
        content = f"{entry.content.rstrip()}\n\n{text.strip()}".strip() if append else text.strip()
        new_emotions = list(entry.emotions)
        for name in emotions:
            emotion = resolve_emotion(name)
            if all(e.id != emotion.id for e in new_emotions):
                new_emotions.append(emotion)
        return await store.update_entry(
            entry.id,
            content=content,
            tags=[*entry.tags, *tags],
            emotions=new_emotions,
            writing_time=entry.writing_time + minutes,
        )

    entry = with_store(config, _action)
    click.echo(f"Saved {entry.word_count} words for {entry.day.isoformat()}.")


@click.command()
@click.option("--date", "day", default=None, help="Day to show (YYYY-MM-DD). Defaults to today.")
@click.pass_obj
def show(config, day) -> None:
    """Print the entry for a day."""
    entry_day = parse_day(day)

    async def _action(store):
        if entry_day is None:
            return store.get_todays_entry()
        matches = store.get_entries_by_date_range(entry_day, entry_day)
        return matches[0] if matches else None

    entry = with_store(config, _action)
    if entry is None:
        click.echo("No entry for that day.")
        return
    click.echo(format_entry(entry))


@click.command()
@click.option("--date", "day", required=True, help="Day whose entry to delete (YYYY-MM-DD).")
@click.option("--yes", is_flag=True, help="Don't ask for confirmation.")
@click.pass_obj
def delete(config, day, yes) -> None:
    """Delete the entry for a day."""
    entry_day = parse_day(day)
    if not yes:
        click.confirm(f"Delete the entry for {entry_day.isoformat()}?", abort=True)

    async def _action(store):
        matches = store.get_entries_by_date_range(entry_day, entry_day)
        if not matches:
            return False
        await store.delete_entry(matches[0].id)
        return True

    if with_store(config, _action):
        click.echo(f"Deleted the entry for {entry_day.isoformat()}.")
    else:
        click.echo("No entry for that day.")


@click.command()
@click.argument("query")
@click.option("--range", "date_range", type=click.Choice([r.value for r in DateRange]), default="all")
@click.option("--length", type=click.Choice([b.value for b in LengthBand]), default="all")
@click.option("--emotion", "emotions", multiple=True, help="Only entries with this emotion (repeatable).")
@click.option("--sort", "sort_by", type=click.Choice([s.value for s in SortBy]), default="relevance")
@click.pass_obj
def search(config, query, date_range, length, emotions, sort_by) -> None:
    """Find entries mentioning QUERY in text, tags, emotions or date."""
    filters = SearchFilters(
        query=query,
        date_range=DateRange(date_range),
        length=LengthBand(length),
        emotions=[resolve_emotion(e).name for e in emotions],
        sort_by=SortBy(sort_by),
    )

    async def _action(store):
        return run_search(store.entries, filters)

    hits = with_store(config, _action)
    if not hits:
        click.echo("No matching entries.")
        return
    for hit in hits:
        click.echo(f"{hit.entry.day.isoformat()}  score={hit.score}  {hit.matched_text}")
