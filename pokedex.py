import os
import sys
from typing import Optional, TextIO

from core.errors import EntryFetchError, UnknownRangeError
from core.logger import get_logger
from core.models import CATEGORY_ALL, DEFAULT_RANGE as BUILTIN_DEFAULT_RANGE, FilterCriteria
from core.render import HtmlFileSink, TextStreamSink
from core.viewer import PokedexViewer
from fetchers import get_source

logger = get_logger(__name__)

MODE = os.getenv("MODE", "once").lower()  # "once" or "interactive"
DATA_SOURCE = os.getenv("DATA_SOURCE", "pokeapi")
DEFAULT_RANGE = os.getenv("DEFAULT_RANGE", BUILTIN_DEFAULT_RANGE)
QUERY = os.getenv("QUERY", "")
CATEGORY = os.getenv("CATEGORY", CATEGORY_ALL)
OUTPUT_PATH = os.getenv("OUTPUT_PATH", "./pokedex.html")

HELP_TEXT = (
    "Commands: gen <1|2|3|4|all> · search <text> · filter <all|legendary> · show · quit\n"
)


def run_once(output_path: str = OUTPUT_PATH) -> int:
    source = get_source(DATA_SOURCE)
    viewer = PokedexViewer(
        source,
        HtmlFileSink(output_path),
        criteria=FilterCriteria(query=QUERY, category=CATEGORY),
    )
    report = viewer.start(DEFAULT_RANGE)
    if report.listing_error:
        logger.warning("Rendered without legendary data: %s", report.listing_error)
    logger.info(
        "Loaded %d entries, %d visible; page at %s",
        len(viewer.loaded), len(viewer.visible), output_path,
    )
    return 0


def handle_command(viewer: PokedexViewer, line: str, out: TextIO) -> bool:
    """Apply one input command. Returns False when the session should end."""
    command, _, arg = line.strip().partition(" ")
    command = command.lower()

    if not command:
        return True
    if command in ("quit", "exit"):
        return False

    try:
        if command == "gen":
            viewer.select_range(arg.strip())
        elif command == "search":
            viewer.set_query(arg)
        elif command == "filter":
            viewer.set_category(arg.strip() or CATEGORY_ALL)
        elif command == "show":
            viewer.refresh()
        elif command == "help":
            out.write(HELP_TEXT)
        else:
            logger.error("Unknown command '%s'.", command)
            out.write(HELP_TEXT)
    except UnknownRangeError as e:
        logger.error("%s", e)
    except EntryFetchError as e:
        logger.error("Range load failed; keeping previous view: %s", e)
    return True


def run_interactive(stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> int:
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    source = get_source(DATA_SOURCE)
    viewer = PokedexViewer(
        source,
        TextStreamSink(stdout),
        criteria=FilterCriteria(query=QUERY, category=CATEGORY),
    )
    stdout.write(HELP_TEXT)
    try:
        viewer.start(DEFAULT_RANGE)
    except EntryFetchError as e:
        logger.error("Initial load failed; use 'gen' to try again: %s", e)

    for line in stdin:
        if not handle_command(viewer, line, stdout):
            break
    return 0


if __name__ == "__main__":
    try:
        if MODE == "interactive":
            raise SystemExit(run_interactive())
        else:
            raise SystemExit(run_once())
    except Exception as e:
        logger.exception("Fatal pokedex error: %s", e)
        raise SystemExit(2)
