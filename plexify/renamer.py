#!/usr/bin/env python3
"""
Plexify - Plex folder renamer

Scans a movie or TV show folder, looks up its IMDb ID, and renames the
folder and its media files to the Plex naming convention.
"""
import argparse
import logging
import sys
from pathlib import Path

from .applier import CreatedDirectory, MovedFile, MovedFolder, PlanApplier
from .cache import CACHE_FILE, ExternalIDCache
from .config import Settings
from .errors import ApplyError, MetadataLookupError, ScanError
from .models import MediaItem, MediaType, RenamePlan, ScanResult
from .parser import extract_title, extract_year, parse_imdb_id
from .planner import build_plan
from .resolver import MetadataResolver
from .scanner import FolderScanner
from .tmdb import TMDBClient

log = logging.getLogger(__name__)


def media_item_from_scan(
    scan: ScanResult,
    title: str | None = None,
    year: int | None = None,
    edition: str | None = None,
    imdb_id: str | None = None,
) -> MediaItem:
    """
    Build the initial MediaItem for a scanned folder.

    Title and year default to what the folder name says. A given
    *imdb_id* is a manual override.
    """
    folder_name = scan.folder_path.name
    return MediaItem(
        source_folder_path=scan.folder_path,
        title=title or extract_title(folder_name),
        year=year if year is not None else extract_year(folder_name),
        external_id=imdb_id,
        external_id_is_manual=imdb_id is not None,
        media_type=scan.media_type,
        edition=edition,
        episodes=scan.episodes,
    )


def prepare(
    folder: Path,
    resolver: MetadataResolver | None = None,
    title: str | None = None,
    year: int | None = None,
    edition: str | None = None,
    imdb_id: str | None = None,
    episode_titles: bool = True,
) -> tuple[ScanResult, MediaItem, RenamePlan]:
    """
    Run scan -> resolve -> plan for one folder.

    Args:
        folder: Folder to process
        resolver: Metadata resolver (None to skip lookups)
        title: Title override
        year: Year override
        edition: Movie edition label
        imdb_id: Manual IMDb ID
        episode_titles: Fetch episode titles for TV shows

    Returns:
        Tuple of (scan_result, media_item, plan)

    Raises:
        ScanError: If the folder cannot be scanned
    """
    scan = FolderScanner().scan(folder)
    item = media_item_from_scan(scan, title, year, edition, imdb_id)

    if resolver is not None:
        item = resolver.resolve_item(item, require_year=item.year is None)
        if episode_titles and item.media_type == MediaType.TV_SHOW:
            item = resolver.enrich_episode_titles(item)
        if not item.external_id:
            log.warning("No IMDb ID found for '%s'", item.title)

    plan = build_plan(item, scan.media_files)
    return scan, item, plan


def print_preview(scan: ScanResult, plan: RenamePlan) -> None:
    """Print the planned folder / file names and all warnings."""
    kind = "TV show" if scan.media_type == MediaType.TV_SHOW else "Movie"
    print(f"{kind}: {plan.source_folder_path.name}")
    print(f"  -> {plan.target_folder_name}")

    for season_folder in plan.season_folders or ():
        print(f"Create: {season_folder.target_name}/")

    for rename in plan.file_renames:
        folder = plan.season_folder(rename.season_number)
        target = f"{folder.target_name}/{rename.target_name}" if folder else rename.target_name
        print("File:")
        print(f"  {rename.source_path.name}")
        print(f"  -> {target}")

    if scan.excluded_items:
        print(f"Excluded: {len(scan.excluded_items)} item(s)")

    for warning in [*scan.warnings, *plan.warnings]:
        print(f"  [WARN] {warning}")


def confirm_proceed(count: int) -> bool:
    """
    Ask user to confirm proceeding with rename.

    Args:
        count: Number of files to rename

    Returns:
        True if user confirms, False otherwise
    """
    while True:
        response = input(f"\nProceed with renaming {count} file(s)? (y/n): ").strip().lower()
        if response in ('y', 'yes'):
            return True
        if response in ('n', 'no'):
            return False
        print("Please enter 'y' or 'n'.")


def build_resolver(settings: Settings, cache_dir: Path | None) -> MetadataResolver:
    """Create a TMDB-backed resolver. Raises MetadataLookupError without an API key."""
    client = TMDBClient(
        api_key=settings.tmdb_api_key or None,
        language=settings.tmdb_language,
        timeout=settings.request_timeout,
    )
    cache_path = cache_dir / CACHE_FILE if cache_dir else settings.cache_file
    return MetadataResolver(client, ExternalIDCache(cache_path))


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="plexify",
        description="Rename a movie or TV show folder to the Plex naming convention."
    )

    parser.add_argument(
        "path",
        type=Path,
        help="Movie or TV show folder to process"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be renamed without actually renaming"
    )
    parser.add_argument(
        "--use-tmdb",
        action="store_true",
        help="Look up the IMDb ID and episode titles on TMDB"
    )
    parser.add_argument(
        "--imdb-id",
        type=str,
        default=None,
        help="Use this IMDb ID (tt1234567 or an IMDb URL) instead of a lookup"
    )
    parser.add_argument(
        "--title",
        type=str,
        default=None,
        help="Title to use instead of the folder name"
    )
    parser.add_argument(
        "--year",
        type=int,
        default=None,
        help="Release / first-air year"
    )
    parser.add_argument(
        "--edition",
        type=str,
        default=None,
        help="Movie edition, e.g. \"Director's Cut\""
    )
    parser.add_argument(
        "--no-episode-titles",
        action="store_true",
        help="Don't fetch episode titles from TMDB"
    )
    parser.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Don't ask for confirmation before renaming"
    )
    parser.add_argument(
        "--cache-dir",
        type=Path,
        default=None,
        help="Directory for the IMDb ID cache (default: app-data directory)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show detailed debug information"
    )

    parsed_args = parser.parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed_args.verbose else logging.WARNING,
        format="  [%(levelname)s] %(name)s: %(message)s",
    )

    imdb_id = None
    if parsed_args.imdb_id:
        imdb_id = parse_imdb_id(parsed_args.imdb_id)
        if imdb_id is None:
            print(f"Error: Not an IMDb ID: {parsed_args.imdb_id}")
            return 1

    resolver = None
    if parsed_args.use_tmdb:
        try:
            resolver = build_resolver(Settings.load(), parsed_args.cache_dir)
        except MetadataLookupError as e:
            print(f"Error: {e}")
            return 1

    try:
        scan, _item, plan = prepare(
            parsed_args.path,
            resolver=resolver,
            title=parsed_args.title,
            year=parsed_args.year,
            edition=parsed_args.edition,
            imdb_id=imdb_id,
            episode_titles=not parsed_args.no_episode_titles,
        )
    except ScanError as e:
        print(f"Error: {e}")
        return 1

    print_preview(scan, plan)
    print()

    applier = PlanApplier()
    try:
        preview = applier.apply(plan, dry_run=True)
    except ApplyError as e:
        print(f"Error: {e}")
        return 1

    if not preview.changed:
        print("-" * 50)
        print("Nothing to rename.")
        return 0

    if parsed_args.dry_run:
        print("-" * 50)
        print(f"Would perform: {len(preview.journal)} step(s)")
        return 0

    file_count = sum(isinstance(entry, MovedFile) for entry in preview.journal)
    if not parsed_args.yes and not confirm_proceed(file_count):
        print("Cancelled.")
        return 0

    try:
        report = applier.apply(plan)
    except ApplyError as e:
        print(f"Error: {e}")
        print("All changes were rolled back.")
        return 1

    moved = sum(isinstance(entry, MovedFile) for entry in report.journal)
    created = sum(isinstance(entry, CreatedDirectory) for entry in report.journal)
    renamed_folder = any(isinstance(entry, MovedFolder) for entry in report.journal)

    print("-" * 50)
    print(
        f"Renamed: {moved} file(s) | Season folders: {created} | "
        f"Folder renamed: {'yes' if renamed_folder else 'no'} | Skipped: {len(report.skipped)}"
    )
    for message in report.skipped:
        print(f"  [SKIP] {message}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
