"""CLI entry point for the candidate dashboard."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from drafted.adapters.local import DirectorySink, StreamClipboard
from drafted.adapters.sqlite_source import SqliteCandidateSource
from drafted.core.config import Settings
from drafted.core.db import init_db
from drafted.core.schemas import VideoFilter
from drafted.pipeline.session import DashboardSession

DEFAULT_CONFIG = "config/settings.yaml"


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG,
        help=f"Path to settings YAML file (default: {DEFAULT_CONFIG}; optional)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )


def _add_filters(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--search", default="", help="Free-text search over name, email, major, university")
    parser.add_argument("--lang", action="append", default=[], help="Programming language (repeatable)")
    parser.add_argument("--spoken", action="append", default=[], help="Spoken language (repeatable)")
    parser.add_argument("--university", action="append", default=[], help="University (repeatable)")
    parser.add_argument("--major", action="append", default=[], help="Major (repeatable)")
    parser.add_argument("--grad-year", action="append", default=[], help="Graduation year (repeatable)")
    parser.add_argument("--culture-tag", action="append", default=[], help="Culture tag (repeatable)")
    parser.add_argument(
        "--video",
        default=VideoFilter.ANY.value,
        choices=[v.value for v in VideoFilter],
        help="Video completion filter (default: any)",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Candidate dashboard - filter, page through and export candidates",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser("import", help="Load candidate documents from JSON")
    import_parser.add_argument("--json", required=True, help="Path to a JSON list of candidate documents")
    _add_common(import_parser)

    stats_parser = subparsers.add_parser("stats", help="Print summary statistics")
    _add_common(stats_parser)

    list_parser = subparsers.add_parser("list", help="Print one page of filtered candidates")
    list_parser.add_argument("--page", type=int, default=1, help="Page number (default: 1)")
    _add_filters(list_parser)
    _add_common(list_parser)

    export_parser = subparsers.add_parser("export", help="Export filtered candidates to CSV")
    export_parser.add_argument(
        "--selected-ids",
        nargs="+",
        default=None,
        help="Export only these candidate ids (among the filtered set)",
    )
    _add_filters(export_parser)
    _add_common(export_parser)

    emails_parser = subparsers.add_parser("emails", help="Print emails of filtered candidates")
    _add_filters(emails_parser)
    _add_common(emails_parser)

    return parser.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def load_settings(path: str) -> Settings:
    """Load settings, falling back to defaults when the default file is absent."""
    if path == DEFAULT_CONFIG and not Path(path).exists():
        return Settings()
    return Settings.from_yaml(path)


def apply_filters(session: DashboardSession, args: argparse.Namespace) -> None:
    session.set_search_query(args.search)
    session.set_filter("programming_langs", args.lang)
    session.set_filter("spoken_langs", args.spoken)
    session.set_filter("universities", args.university)
    session.set_filter("majors", args.major)
    session.set_filter("grad_years", args.grad_year)
    session.set_filter("culture_tags", args.culture_tag)
    session.set_video_filter(args.video)


def cmd_import(args: argparse.Namespace, settings: Settings) -> None:
    path = Path(args.json)
    if not path.exists():
        msg = f"JSON file not found: {path}"
        raise FileNotFoundError(msg)
    documents = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(documents, list):
        msg = "candidate JSON must be a list of documents"
        raise ValueError(msg)

    conn = init_db(settings.database.path)
    try:
        source = SqliteCandidateSource(conn, settings.source)
        inserted, updated = source.import_candidates(documents)
    finally:
        conn.close()
    print(f"Imported {inserted} new and {updated} updated candidates.")


async def _open_session(settings: Settings, source: SqliteCandidateSource, args: argparse.Namespace) -> DashboardSession:
    session = DashboardSession(
        source,
        config=settings.dashboard,
        source_config=settings.source,
        export_config=settings.export,
        clipboard=StreamClipboard(),
    )
    if hasattr(args, "video"):
        apply_filters(session, args)
    if not await session.load():
        msg = f"could not load candidates: {session.error}"
        raise ValueError(msg)
    return session


async def run(args: argparse.Namespace, settings: Settings) -> None:
    conn = init_db(settings.database.path)
    try:
        source = SqliteCandidateSource(conn, settings.source)
        session = await _open_session(settings, source, args)

        if args.command == "stats":
            print_stats(session)
        elif args.command == "list":
            session.set_page(args.page)
            print_page(session)
        elif args.command == "export":
            sink = DirectorySink(settings.export.output_dir)
            if args.selected_ids:
                for candidate_id in args.selected_ids:
                    session.toggle_selection(candidate_id)
                outcome = await session.export_selected(sink)
            else:
                outcome = await session.export_filtered(sink)
            if outcome.ok:
                print(f"Exported {outcome.count} candidates to {outcome.location}")
            else:
                print(outcome.notice)
        elif args.command == "emails":
            session.select_all_filtered()
            outcome = await session.copy_selected_emails()
            if not outcome.ok:
                print(outcome.notice)
    finally:
        conn.close()


def print_stats(session: DashboardSession) -> None:
    stats = session.stats
    if stats is None:
        return
    print(f"Candidates loaded: {session.total_count}")
    print(f"  With video recorded: {stats.total_with_video}")
    print(f"  Universities represented: {stats.total_universities}")
    print(f"  Avg videos per candidate: {stats.avg_videos_per_candidate:.2f}")
    print("  Top majors: " + ", ".join(f"{m.major} ({m.count})" for m in stats.top_majors))
    print("  Top languages: " + ", ".join(
        f"{lang.language} ({lang.count})" for lang in stats.top_programming_languages
    ))
    print("  Top culture tags: " + ", ".join(f"{t.tag} ({t.count})" for t in stats.top_culture_tags))


def print_page(session: DashboardSession) -> None:
    count = session.filtered_count
    if count == 0:
        print("No candidates found")
        return
    start, end = session.display_range()
    plural = "" if count == 1 else "s"
    print(f"Showing {start} - {end} of {count} candidate{plural}")
    for c in session.visible_page():
        name = f"{c.first_name} {c.last_name}".strip() or c.email
        print(
            f"  {name} <{c.email}> | {c.university or 'N/A'} | {c.major or 'N/A'} | "
            f"Grad: {c.graduation_year or 'N/A'} | videos: {c.video_count}/3"
        )
    if session.total_pages > 1:
        window = session.page_window()
        pages = " ".join(
            f"[{p}]" if p == session.current_page else str(p) for p in window.pages
        )
        if window.show_first_page:
            pages = "1 " + ("... " if window.show_leading_ellipsis else "") + pages
        if window.show_last_page:
            pages += (" ..." if window.show_trailing_ellipsis else "") + f" {session.total_pages}"
        print(f"Page {session.current_page}/{session.total_pages}: {pages}")


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = load_settings(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        if args.command == "import":
            cmd_import(args, settings)
        else:
            asyncio.run(run(args, settings))
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
