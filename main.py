#!/usr/bin/env python3
"""
Console client: search a Maven repository and print dependency snippets.

Examples:
    python main.py keyword guava
    python main.py sha1 2a6bd5a27c5fd0d5f5c1e6ed3ee3d4b5c1f8f3c7
    python main.py gav -g org.apache.commons -a commons-lang3
    python main.py class StringUtils --fq --backend central --snippet gradle
"""

import argparse
import sys
import threading

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from backends.factory import create_search_backend_from_env  # noqa: E402
from config.config import Config  # noqa: E402
from models.search_outcome import ProgressEvent, SearchOutcome  # noqa: E402
from models.search_request import SearchMode, SearchRequest  # noqa: E402
from orchestrator.search_session import SearchSession  # noqa: E402
from utils.dependency_snippets import BuildTool, build_snippet  # noqa: E402

COLUMNS = ("Group", "Artifact", "Version", "Date", "Classifier", "Extension", "Repository")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Search remote Maven repositories")
    parser.add_argument("--backend", default=None, help="Backend name from the repositories file")
    parser.add_argument("--max-pages", type=int, default=None, help="Page cap for paginated searches")
    parser.add_argument("--timeout", type=float, default=None, help="Cancel the search after N seconds")
    parser.add_argument(
        "--snippet",
        choices=[t.value for t in BuildTool],
        default=BuildTool.MAVEN.value,
        help="Build tool for the snippet of the first result",
    )

    modes = parser.add_subparsers(dest="mode", required=True)

    keyword = modes.add_parser("keyword", help="Free-text search")
    keyword.add_argument("keyword")

    sha1 = modes.add_parser("sha1", help="Search by SHA-1 checksum")
    sha1.add_argument("sha1")

    gav = modes.add_parser("gav", help="Search by group/artifact/version")
    gav.add_argument("-g", "--group", default=None)
    gav.add_argument("-a", "--artifact", default=None)
    gav.add_argument("-v", "--version", default=None)

    cls = modes.add_parser("class", help="Search by class name")
    cls.add_argument("class_name")
    cls.add_argument("--fq", action="store_true", help="Class name is fully qualified")

    return parser


def request_from_args(args: argparse.Namespace) -> SearchRequest:
    if args.mode == "keyword":
        return SearchRequest.for_keyword(args.keyword)
    if args.mode == "sha1":
        return SearchRequest.for_sha1(args.sha1)
    if args.mode == "gav":
        return SearchRequest.for_coordinates(args.group, args.artifact, args.version)
    return SearchRequest.for_class_name(args.class_name, fully_qualified=args.fq)


def print_progress(event: ProgressEvent) -> None:
    sys.stdout.write(f"\r\033[93m{event.percent:3d}% {event.note:<30}\033[0m")
    sys.stdout.flush()


def print_outcome(outcome: SearchOutcome, tool: BuildTool) -> int:
    # Clear the progress line
    sys.stdout.write("\r" + " " * 40 + "\r")
    sys.stdout.flush()

    if outcome.is_failed:
        print(f"Search error - {outcome.error_summary()}")
        return 1
    if outcome.is_cancelled:
        print("Search cancelled.")
        return 130
    if not outcome.artifacts:
        print("No artifacts found.")
        return 0

    rows = [
        (
            a.group_id,
            a.artifact_id,
            a.version,
            a.version_date.isoformat() if a.version_date else "",
            a.classifier or "",
            a.extension or "",
            a.repository or "",
        )
        for a in outcome.artifacts
    ]
    widths = [max(len(col), *(len(row[i]) for row in rows)) for i, col in enumerate(COLUMNS)]
    print("  ".join(col.ljust(w) for col, w in zip(COLUMNS, widths)))
    print("  ".join("-" * w for w in widths))
    for row in rows:
        print("  ".join(value.ljust(w) for value, w in zip(row, widths)))

    print(f"\n{len(rows)} artifacts ({outcome.pages_fetched} pages, {outcome.latency_ms} ms)")
    print(f"\n=== {tool.value} ===")
    print(build_snippet(outcome.artifacts[0], tool))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = Config()
    if not config.validate():
        return 2

    try:
        request = request_from_args(args)
        backend = create_search_backend_from_env(args.backend)
    except ValueError as e:
        print(f"Error: {e}")
        return 2

    if request.mode is SearchMode.CLASS_NAME and not backend.supports_class_search():
        print(f"Error: class search is not supported by backend '{backend.name}'")
        return 2

    session = SearchSession(backend, max_pages=args.max_pages or config.SEARCH_MAX_PAGES)
    finished = threading.Event()
    try:
        handle = session.start(request, on_progress=print_progress, on_complete=lambda _: finished.set())
        if args.timeout:
            handle.token.cancel_after(args.timeout)
        try:
            # Poll so Ctrl+C is delivered to the main thread
            while not finished.wait(0.1):
                pass
        except KeyboardInterrupt:
            handle.cancel()
        return print_outcome(handle.result(), BuildTool(args.snippet))
    finally:
        session.close()
        backend.close()


if __name__ == "__main__":
    sys.exit(main())
