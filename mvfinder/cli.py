"""
Command-line interface for mvfinder.

Implements the CLI with Click; rich-click provides the help colors.

Commands:
    mvfinder search <name>...            Search artists and add their videos
    mvfinder import-text <file>          Search every artist listed in a text file
    mvfinder import-json <file>...       Import JSON (exports, backups, legacy files)
    mvfinder playlist <url>              Search the artists of a YouTube playlist
    mvfinder enrich [--artist <id>]      Fetch artwork, genre, mood and style
    mvfinder delete <artist-id>...       Remove artists and their videos
    mvfinder export [--kind <kind>]...   Write export files
    mvfinder thumbnails [--artwork]      Download video thumbnails (and artwork)
    mvfinder stats                       Show collection counts
    mvfinder reset [--yes]               Remove the whole collection

Global options (before the command):
    --config <path>                      Use this config.yaml
    --verbose                            Show debug messages on the console

Exit codes:
    0    success
    1    configuration error or unexpected error
    2    storage error
    3    remote service error
    4    other mvfinder error
    130  interrupted
"""

import sys
from pathlib import Path
from typing import Callable, Optional

import rich_click as click

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = ""
click.rich_click.MAX_WIDTH = 100
click.rich_click.COMMAND_GROUPS = {
    "cli": [
        {
            "name": "Build the collection",
            "commands": ["search", "import-text", "import-json", "playlist", "enrich"],
        },
        {
            "name": "Maintain and export",
            "commands": ["delete", "export", "thumbnails", "stats", "reset"],
        },
    ],
}

from mvfinder import __version__
from mvfinder.audiodb import AudioDBClient
from mvfinder.collection.deletion import delete_artists
from mvfinder.collection.enrichment import enrich_all, enrich_one
from mvfinder.collection.export import EXPORT_KINDS, export_search_result, write_exports, write_json
from mvfinder.collection.importer import import_json_file, parse_artist_text_file
from mvfinder.collection.search import ArtistSearchService, SearchOutcome, SearchStatus
from mvfinder.core import (
    Config,
    ConfigError,
    MVFinderError,
    SQLiteStorage,
    StorageError,
    TransportError,
    get_logger,
    load_config,
    setup_logging,
    shutdown_logging,
)
from mvfinder.core.progress import AssetProgressBar, EnrichmentProgressBar, SearchProgressBar
from mvfinder.core.store import CollectionStore
from mvfinder.musicbrainz import MusicBrainzClient
from mvfinder.utils import ensure_directory, format_count
from mvfinder.utils.assets import artwork_jobs, download_artist_artwork, download_video_thumbnails
from mvfinder.youtube import ThumbnailSize, YouTubePlaylistClient, extract_artists_from_playlist, extract_playlist_id

logger = get_logger(__name__)


Action = Callable[[Config, CollectionStore], None]


@click.group()
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    metavar="<config.yaml>",
    help="Configuration file (default: ./config.yaml)"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Show debug messages on the console"
)
@click.version_option(__version__, prog_name="mvfinder")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], verbose: bool) -> None:
    """
    mvfinder: build a music video collection from artist names.

    Artists are resolved on MusicBrainz, their music videos come from
    TheAudioDB, and everything is kept in a local collection.

    \b
    BASIC USAGE:
        mvfinder search "Massive Attack" "Portishead"
        mvfinder import-text artists.txt
        mvfinder enrich
        mvfinder export --kind combined
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose


def _run(ctx: click.Context, action: Action) -> None:
    """
    Run one command with configuration, logging and storage set up.

    Maps the mvfinder exception hierarchy to exit codes and always shuts
    logging down.

    Raises:
        SystemExit: On fatal errors (with the matching exit code).
    """
    storage: SQLiteStorage | None = None

    try:
        config = load_config(ctx.obj["config_path"])

        setup_logging(config.output.directory, verbose=ctx.obj["verbose"])
        logger.debug(f"mvfinder {__version__} starting")

        ensure_directory(config.output.directory)
        ensure_directory(config.storage.path.parent)
        storage = SQLiteStorage(config.storage.path)

        action(config, CollectionStore(storage))

    except ConfigError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        sys.exit(1)

    except StorageError as e:
        click.echo(f"Storage error: {e.message}", err=True)
        logger.error(f"Storage error: {e.message}", exc_info=True)
        sys.exit(2)

    except TransportError as e:
        click.echo(f"Service error: {e.message}", err=True)
        if e.is_rate_limit:
            click.echo("The service is rate limiting requests, try again later", err=True)
        logger.error(f"Service error: {e.message}", exc_info=True)
        sys.exit(3)

    except MVFinderError as e:
        click.echo(f"Error: {e.message}", err=True)
        logger.error(f"Error: {e.message}", exc_info=True)
        sys.exit(4)

    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        logger.info("Interrupted by user")
        sys.exit(130)

    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        logger.exception("Unexpected error")
        sys.exit(1)

    finally:
        if storage is not None:
            storage.close()
        shutdown_logging()


def _search_service(config: Config, store: CollectionStore) -> ArtistSearchService:
    return ArtistSearchService(
        store,
        MusicBrainzClient(user_agent=config.network.user_agent, timeout=config.network.timeout),
        AudioDBClient(user_agent=config.network.user_agent, timeout=config.network.timeout),
    )


def _search_names(
    config: Config,
    store: CollectionStore,
    names: list[str],
    on_outcome: Callable[[SearchOutcome], None] | None = None
) -> list[SearchOutcome]:
    """Search names with a progress bar and print a summary."""
    if not names:
        logger.info("No artist names to search")
        return []

    service = _search_service(config, store)

    with SearchProgressBar(total=len(names)) as bar:
        def record(outcome: SearchOutcome) -> None:
            bar.update(outcome.status)
            if outcome.status == SearchStatus.FOUND:
                bar.log(f"[green]✓[/green] {outcome.name}: {format_count(len(outcome.videos), 'video')}")
            if on_outcome is not None:
                on_outcome(outcome)

        outcomes = service.process_names(names, on_outcome=record)

    found = sum(1 for o in outcomes if o.status == SearchStatus.FOUND)
    added = sum(o.added_videos for o in outcomes)
    logger.info(f"Found {found} of {format_count(len(outcomes), 'artist')}, {format_count(added, 'new video')}")
    _print_stats(store)
    return outcomes


@cli.command()
@click.argument("names", nargs=-1, required=True)
@click.option(
    "--save-json",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    metavar="<dir>",
    help="Also write every search result as JSON into this directory"
)
@click.pass_context
def search(ctx: click.Context, names: tuple[str, ...], save_json: Optional[Path]) -> None:
    """Search artists by name and add their music videos."""
    def action(config: Config, store: CollectionStore) -> None:
        def save(outcome: SearchOutcome) -> None:
            if outcome.artist is None or save_json is None:
                return
            path = write_json(
                ensure_directory(save_json) / f"search_{outcome.artist.id}.json",
                export_search_result(outcome.artist, outcome.videos),
            )
            logger.debug(f"Saved search result to {path}")

        _search_names(config, store, list(names), on_outcome=save)

    _run(ctx, action)


@cli.command("import-text")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def import_text(ctx: click.Context, file: Path) -> None:
    """Search every artist listed in a text file (one name per line)."""
    def action(config: Config, store: CollectionStore) -> None:
        names = parse_artist_text_file(file)
        logger.info(f"Read {format_count(len(names), 'artist name')} from {file}")
        _search_names(config, store, names)

    _run(ctx, action)


@cli.command("import-json")
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def import_json(ctx: click.Context, files: tuple[Path, ...]) -> None:
    """Import JSON exports, backups, saved search results or legacy files."""
    def action(config: Config, store: CollectionStore) -> None:
        for path in files:
            result = import_json_file(store, path)
            if result.kind == "Unrecognized":
                logger.warning(f"{path.name}: format not recognized, nothing imported")
            elif not result.modified:
                logger.info(f"{path.name}: nothing new")
        _print_stats(store)

    _run(ctx, action)


@cli.command()
@click.argument("url")
@click.pass_context
def playlist(ctx: click.Context, url: str) -> None:
    """Search the artists named in a YouTube playlist's video titles."""
    try:
        extract_playlist_id(url)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="URL")

    def action(config: Config, store: CollectionStore) -> None:
        client = YouTubePlaylistClient(
            config.youtube.api_key,
            user_agent=config.network.user_agent,
            timeout=config.network.timeout,
        )
        names = extract_artists_from_playlist(client, url)
        logger.info(f"Playlist lists {format_count(len(names), 'artist')}")
        _search_names(config, store, names)

    _run(ctx, action)


@cli.command()
@click.option(
    "--artist", "artist_ids",
    multiple=True,
    metavar="<artist-id>",
    help="Enrich only this TheAudioDB artist id (repeatable)"
)
@click.pass_context
def enrich(ctx: click.Context, artist_ids: tuple[str, ...]) -> None:
    """Fetch artwork, genre, mood and style from TheAudioDB."""
    def action(config: Config, store: CollectionStore) -> None:
        source = AudioDBClient(user_agent=config.network.user_agent, timeout=config.network.timeout)

        if artist_ids:
            for artist_id in artist_ids:
                entry = enrich_one(store, source, artist_id)
                if entry is not None:
                    logger.info(f"Enriched {entry.name_or_placeholder}")
            return

        total = store.stats().artist_count
        if total == 0:
            logger.info("Collection is empty, nothing to enrich")
            return

        with EnrichmentProgressBar(total=total) as bar:
            result = enrich_all(store, source, on_progress=bar.on_progress, delay=config.enrichment.delay)

        logger.info(f"Enriched {result.success} of {format_count(result.total, 'artist')}")

    _run(ctx, action)


@cli.command()
@click.argument("artist_ids", nargs=-1, required=True, metavar="ARTIST_ID...")
@click.pass_context
def delete(ctx: click.Context, artist_ids: tuple[str, ...]) -> None:
    """Remove artists (by TheAudioDB id) together with their videos."""
    def action(config: Config, store: CollectionStore) -> None:
        delete_artists(store, artist_ids)
        _print_stats(store)

    _run(ctx, action)


@cli.command()
@click.option(
    "--kind", "kinds",
    type=click.Choice(sorted(EXPORT_KINDS)),
    multiple=True,
    help="Export kind (repeatable; default: all)"
)
@click.option(
    "--output", "output_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    metavar="<dir>",
    help="Target directory (default: output.export_directory)"
)
@click.pass_context
def export(ctx: click.Context, kinds: tuple[str, ...], output_dir: Optional[Path]) -> None:
    """Write the collection to JSON export files."""
    def action(config: Config, store: CollectionStore) -> None:
        data = store.load()
        paths = write_exports(data, output_dir or config.output.export_directory, kinds or list(EXPORT_KINDS))
        for path in paths:
            click.echo(str(path))

    _run(ctx, action)


@cli.command()
@click.option("--artwork", is_flag=True, help="Also download enriched artist artwork")
@click.option(
    "--size",
    type=click.Choice([s.name.lower() for s in ThumbnailSize]),
    default="high",
    show_default=True,
    help="Thumbnail size"
)
@click.option(
    "--output", "output_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    metavar="<dir>",
    help="Target directory (default: output.export_directory)"
)
@click.pass_context
def thumbnails(ctx: click.Context, artwork: bool, size: str, output_dir: Optional[Path]) -> None:
    """Download video thumbnails and, optionally, artist artwork."""
    def action(config: Config, store: CollectionStore) -> None:
        data = store.load()
        target = output_dir or config.output.export_directory
        video_ids = {v.platform_video_id for v in data.videos}

        with AssetProgressBar(total=len(video_ids), description="Thumbnails") as bar:
            result = download_video_thumbnails(
                data.videos, target,
                size=ThumbnailSize[size.upper()],
                timeout=config.network.timeout,
                on_progress=bar.update,
            )
        logger.info(f"Thumbnails: {result.success} downloaded, {result.skipped} present, {result.failed} failed")

        if artwork:
            total = len(artwork_jobs(data.artists, target))
            with AssetProgressBar(total=total, description="Artwork") as bar:
                result = download_artist_artwork(
                    data.artists, target, timeout=config.network.timeout, on_progress=bar.update
                )
            logger.info(f"Artwork: {result.success} downloaded, {result.skipped} present, {result.failed} failed")

    _run(ctx, action)


@cli.command()
@click.pass_context
def stats(ctx: click.Context) -> None:
    """Show collection counts."""
    _run(ctx, lambda config, store: _print_stats(store))


@cli.command()
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def reset(ctx: click.Context, yes: bool) -> None:
    """Remove the whole collection."""
    if not yes:
        click.confirm("This removes every artist and video. Continue?", abort=True)
    _run(ctx, lambda config, store: store.reset())


def _print_stats(store: CollectionStore) -> None:
    """Log artist and video counts and the time of the last save."""
    data = store.load()
    enriched = sum(1 for a in data.artists if a.is_enriched)
    empty = sum(1 for a in data.artists if a.video_count == 0)

    logger.info("=" * 60)
    logger.info("COLLECTION")
    logger.info("=" * 60)
    logger.info(f"Artists:           {data.artist_count}")
    logger.info(f"  enriched:        {enriched}")
    logger.info(f"  without videos:  {empty}")
    logger.info(f"Videos:            {data.video_count}")
    logger.info(f"Last updated:      {store.last_updated() or '-'}")
    logger.info("=" * 60)


def main() -> None:
    """Entry point of the `mvfinder` console script."""
    cli()


if __name__ == "__main__":
    main()
