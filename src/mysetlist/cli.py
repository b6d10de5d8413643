"""Command-line interface for MySetlist song search."""

from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from mysetlist.config import Settings
from mysetlist.errors import StoreError
from mysetlist.log import setup_logging
from mysetlist.services.song_search import SongSearchService, create_search_service
from mysetlist.storage.database import Database

console = Console()


def get_settings(db: Optional[str]) -> Settings:
    """Load settings from the environment, applying a --db override."""
    settings = Settings.from_env()
    if db:
        settings = settings.model_copy(update={"db_url": db})
    return settings


def get_service(db: Optional[str] = None) -> SongSearchService:
    """Create a SongSearchService from environment variables."""
    try:
        return create_search_service(get_settings(db))
    except StoreError as e:
        raise click.ClickException(str(e)) from e


def get_database(db: Optional[str] = None) -> Database:
    """Open the song store without touching the catalog."""
    database = Database(db_url=get_settings(db).db_url)
    try:
        database.init_db()
    except StoreError as e:
        raise click.ClickException(str(e)) from e
    return database


@click.group()
@click.version_option(package_name="mysetlist")
@click.option("--log-level", default=None, help="Logging level (defaults to MYSETLIST_LOG_LEVEL)")
def main(log_level: Optional[str]):
    """MySetlist - concert setlist tracking.

    Search songs locally and backfill missing ones from Spotify.
    """
    setup_logging(log_level or Settings.from_env().log_level)


@main.command("init-db")
@click.option("--db", default=None, help="Database URL")
def init_db(db: Optional[str]):
    """Create the song tables."""
    database = get_database(db)
    console.print(f"[green]Database ready at {database.db_url}[/green]")


@main.command()
@click.argument("query")
@click.option("--artist", "-a", default=None, help="Artist name filter")
@click.option("--limit", "-l", default=20, help="Max stored matches")
@click.option("--db", default=None, help="Database URL")
def search(query: str, artist: Optional[str], limit: int, db: Optional[str]):
    """Search for songs by title, backfilling from Spotify."""
    service = get_service(db)
    try:
        results = service.search(query=query, artist=artist, limit=limit)
    except StoreError as e:
        raise click.ClickException(str(e)) from e

    if not results:
        console.print(f"[yellow]No songs found matching '{query}'[/yellow]")
        return

    table = Table(title=f"Search Results: {query}")
    table.add_column("Artist", style="cyan")
    table.add_column("Title", style="green")
    table.add_column("Spotify ID", style="dim")

    for song in results:
        table.add_row(song.artist_name, song.title, song.spotify_id or "-")

    console.print(table)


@main.command()
@click.option("--limit", "-l", default=20, help="Max results")
@click.option("--db", default=None, help="Database URL")
def songs(limit: int, db: Optional[str]):
    """List the most recently added songs."""
    database = get_database(db)
    try:
        recent = database.get_recent_songs(limit=limit)
    except StoreError as e:
        raise click.ClickException(str(e)) from e

    if not recent:
        console.print("[yellow]No songs stored yet. Run 'mysetlist search' first.[/yellow]")
        return

    table = Table(title="Recently Added Songs")
    table.add_column("#", style="dim")
    table.add_column("Artist", style="cyan")
    table.add_column("Title", style="green")
    table.add_column("Added", style="yellow")

    for i, song in enumerate(recent, 1):
        table.add_row(
            str(i),
            song.artist_name,
            song.title,
            song.created_at.strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)


@main.command()
@click.option("--db", default=None, help="Database URL")
def stats(db: Optional[str]):
    """Show database statistics."""
    database = get_database(db)
    try:
        db_stats = database.get_stats()
    except StoreError as e:
        raise click.ClickException(str(e)) from e

    table = Table(title="Database Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Total songs", str(db_stats["total_songs"]))
    table.add_row("Linked to Spotify", str(db_stats["catalog_linked_songs"]))
    table.add_row("Without Spotify ID", str(db_stats["unlinked_songs"]))

    console.print(table)


@main.command()
def serve():
    """Run the web server."""
    from mysetlist.web import main as run_web

    run_web()


if __name__ == "__main__":
    main()
