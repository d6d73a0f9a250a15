# core/render.py
import datetime
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Sequence, TextIO

import pytz
from jinja2 import Environment, FileSystemLoader, select_autoescape

from .filters import is_legendary_mode, normalize_query
from .logger import get_logger
from .models import CATEGORY_ALL, Entry, FilterCriteria

logger = get_logger(__name__)

# Resolve template directory relative to this file
TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)

CATALOG_THEME = os.getenv("CATALOG_THEME", "light").strip().lower()
if CATALOG_THEME not in ("light", "dark"):
    CATALOG_THEME = "light"

THEMES = {
    "light": {
        "page_bg": "#f5f5f5",
        "card_bg": "#ffffff",
        "card_border": "#e0e0e0",
        "text_primary": "#202124",
        "text_secondary": "#555",
        "text_muted": "#999",
        "type_bg": "#e8eaed",
    },
    "dark": {
        "page_bg": "#121212",
        "card_bg": "#1E1E1E",
        "card_border": "#333333",
        "text_primary": "#F1F1F1",
        "text_secondary": "#BBBBBB",
        "text_muted": "#777777",
        "type_bg": "#2C2C2C",
    },
}


def now_utc_iso() -> str:
    return datetime.datetime.now(tz=pytz.UTC).isoformat(timespec="seconds")


def _card_data(entries: Sequence[Entry]) -> List[Dict[str, Any]]:
    return [
        {
            "id": e.entry_id,
            "name": e.name,
            "display_name": e.display_name,
            "sprite_url": e.sprite_url,
            "types": e.unique_types,
        }
        for e in entries
    ]


def _criteria_data(criteria: FilterCriteria) -> Dict[str, Any]:
    return {
        "query": normalize_query(criteria.query),
        "category": "legendary" if is_legendary_mode(criteria.category) else CATEGORY_ALL,
    }


def build_plaintext_listing(entries: Sequence[Entry], criteria: FilterCriteria) -> str:
    template = env.get_template("pokedex.txt")
    return template.render(
        cards=_card_data(entries),
        criteria=_criteria_data(criteria),
        count=len(entries),
    )


def build_html_page(
    entries: Sequence[Entry],
    criteria: FilterCriteria,
    theme: str = CATALOG_THEME,
    generated_at: Optional[str] = None,
) -> str:
    if theme not in THEMES:
        theme = "light"
    template = env.get_template("pokedex.html")
    ctx = {
        "title": "Pokedex",
        "cards": _card_data(entries),
        "criteria": _criteria_data(criteria),
        "count": len(entries),
        "colors": THEMES[theme],
        "generated_at": generated_at or now_utc_iso(),
    }
    return template.render(**ctx)


class PresentationSink(Protocol):
    def show(self, entries: Sequence[Entry], criteria: FilterCriteria) -> None:
        ...


class MemorySink:
    """Keeps the last view it was shown."""

    def __init__(self):
        self.entries: List[Entry] = []
        self.criteria: Optional[FilterCriteria] = None
        self.renders = 0

    def show(self, entries: Sequence[Entry], criteria: FilterCriteria) -> None:
        self.entries = list(entries)
        self.criteria = criteria
        self.renders += 1


class HtmlFileSink:
    """Rewrites the whole page on every show."""

    def __init__(self, path: str | Path, theme: str = CATALOG_THEME):
        self.path = Path(path)
        self.theme = theme

    def show(self, entries: Sequence[Entry], criteria: FilterCriteria) -> None:
        html = build_html_page(entries, criteria, theme=self.theme)
        if self.path.parent and not self.path.parent.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(html, encoding="utf-8")
        logger.info("Rendered %d entries to %s", len(entries), self.path)


class TextStreamSink:
    def __init__(self, stream: TextIO):
        self.stream = stream

    def show(self, entries: Sequence[Entry], criteria: FilterCriteria) -> None:
        self.stream.write(build_plaintext_listing(entries, criteria))
        self.stream.flush()
