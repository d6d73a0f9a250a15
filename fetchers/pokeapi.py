# fetchers/pokeapi.py
import os
from typing import Any, Dict, List, Optional

import requests

from core.errors import SourceError
from core.logger import get_logger
from core.models import Entry, SpeciesRef

logger = get_logger(__name__)

BASE_URL = os.getenv("POKEAPI_BASE_URL", "https://pokeapi.co/api/v2").rstrip("/")
TIMEOUT = float(os.getenv("POKEAPI_TIMEOUT", "30"))
USER_AGENT = os.getenv("POKEAPI_USER_AGENT", "pokedex-viewer/0.1 (+requests)")
PROXY_URL = os.getenv("POKEAPI_PROXY_URL", "").strip()


def _new_session() -> requests.Session:
    session = requests.Session()
    session.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json"})
    if PROXY_URL:
        session.proxies.update({"http": PROXY_URL, "https": PROXY_URL})
    return session


class PokeApiSource:
    """
    Catalog source backed by the public PokeAPI. Single attempt per call;
    every failure surfaces as SourceError.
    """

    def __init__(
        self,
        base_url: str = BASE_URL,
        timeout: float = TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or _new_session()

    def _get_json(self, url: str) -> Any:
        logger.debug("GET %s", url)
        try:
            r = self.session.get(url, timeout=self.timeout)
            r.raise_for_status()
        except requests.RequestException as e:
            raise SourceError(url, str(e)) from e
        try:
            return r.json()
        except ValueError as e:
            raise SourceError(url, f"invalid JSON: {e}") from e

    def list_species(self, limit: int) -> List[SpeciesRef]:
        url = f"{self.base_url}/pokemon-species?limit={int(limit)}"
        data = self._get_json(url)
        try:
            results = data["results"]
            refs = [SpeciesRef(name=str(r["name"]), url=str(r["url"])) for r in results]
        except (KeyError, TypeError) as e:
            raise SourceError(url, f"malformed species listing: {e!r}") from e
        logger.info("PokeAPI: species listing returned %d entries.", len(refs))
        return refs

    def fetch_species(self, url: str) -> Dict[str, Any]:
        data = self._get_json(url)
        if not isinstance(data, dict) or "id" not in data:
            raise SourceError(url, "species payload has no id")
        return data

    def entry_url(self, entry_id: int) -> str:
        return f"{self.base_url}/pokemon/{int(entry_id)}"

    def fetch_entry(self, entry_id: int) -> Entry:
        url = self.entry_url(entry_id)
        data = self._get_json(url)
        try:
            return Entry.from_api(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise SourceError(url, f"malformed entry payload: {e!r}") from e
