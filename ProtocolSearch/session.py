from typing import List, Optional, Set, Tuple

from .catalog.catalog import Catalog, load_catalog
from .preprocessing.document import CATEGORIES, Protocol
from .ranking.ranker import ProtocolSearchEngine


class SearchSession:
    """
    State of one interactive search: the search engine over the loaded
    catalog, the current query text and the set of active category filters.

    Results are recomputed from scratch on every call to `results()`.
    """

    def __init__(self, catalog: Optional[Catalog] = None):
        self.engine = ProtocolSearchEngine(catalog)
        self.query = ""
        self.active_categories: Set[str] = set()

    @property
    def catalog(self) -> Catalog:
        return self.engine.catalog

    @catalog.setter
    def catalog(self, catalog: Catalog) -> None:
        self.engine.catalog = catalog

    def load(self, index_path: str) -> bool:
        """Load the catalog once. Returns True if it was loaded."""
        self.catalog = load_catalog(index_path)
        return self.catalog.loaded

    def set_query(self, query: Optional[str]) -> None:
        self.query = query or ""

    def toggle_category(self, category: str) -> bool:
        """
        Switch a category filter on or off.

        Returns:
            True if the category is active after the toggle
        """
        if category not in CATEGORIES:
            raise ValueError(f"Unknown category: {category!r} (expected one of {', '.join(CATEGORIES)})")

        if category in self.active_categories:
            self.active_categories.discard(category)
            return False
        self.active_categories.add(category)
        return True

    def clear_categories(self) -> None:
        self.active_categories.clear()

    def results(self) -> List[Tuple[Protocol, int]]:
        return self.engine.search(self.query, self.active_categories)

    def match_count(self) -> int:
        """Number of protocols matching the current query and filters, ignoring the cap."""
        return self.engine.count_matches(self.query, self.active_categories)

    def query_terms(self) -> List[str]:
        return self.engine.debug_query(self.query)

    def visible(self) -> List[Protocol]:
        return [protocol for protocol, _ in self.results()]

    def footer(self) -> str:
        """Catalog metadata line, with a dash for anything unknown."""
        source_pdf = self.catalog.source_pdf if self.catalog.source_pdf is not None else "—"
        num_pages = self.catalog.num_pages if self.catalog.num_pages is not None else "—"
        return f"Source PDF: {source_pdf} • Total pages: {num_pages}"
