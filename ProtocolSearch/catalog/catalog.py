import json
from typing import Any, Dict, List, Optional

from ..preprocessing.document import Protocol


class CatalogError(Exception):
    """Raised when the index file does not have the expected shape."""


class Catalog:
    """
    Ordered collection of protocol sections plus the metadata of the
    source PDF. A catalog is loaded once and never modified afterwards.
    """

    def __init__(self, protocols: Optional[List[Protocol]] = None,
                 source_pdf: Optional[str] = None, num_pages: Optional[int] = None,
                 loaded: bool = True):
        self.protocols = tuple(protocols or ())
        self.source_pdf = source_pdf
        self.num_pages = num_pages
        self.loaded = loaded

    @classmethod
    def empty(cls) -> 'Catalog':
        """Catalog used when nothing could be loaded."""
        return cls(loaded=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Catalog':
        """
        Build a catalog from the parsed index JSON.

        Args:
            data: Dictionary with source_pdf, num_pages and protocols

        Returns:
            Catalog with one Protocol per valid entry
        """
        if not isinstance(data, dict):
            raise CatalogError("Index must be a JSON object")

        entries = data.get("protocols") or []
        if not isinstance(entries, list):
            raise CatalogError("'protocols' must be a JSON array")

        protocols = []
        for i, entry in enumerate(entries):
            if not isinstance(entry, dict):
                print(f"Warning: Skipping protocol entry {i}, expected an object")
                continue
            protocols.append(Protocol.from_dict(entry))

        num_pages = data.get("num_pages")
        if num_pages is not None:
            try:
                num_pages = int(num_pages)
            except (TypeError, ValueError, OverflowError):
                num_pages = None

        source_pdf = data.get("source_pdf")
        return cls(
            protocols=protocols,
            source_pdf=str(source_pdf) if source_pdf is not None else None,
            num_pages=num_pages,
        )

    def categories_in_use(self) -> List[str]:
        """Distinct categories in order of first appearance."""
        seen = []
        for protocol in self.protocols:
            if protocol.category not in seen:
                seen.append(protocol.category)
        return seen

    def __len__(self):
        return len(self.protocols)

    def __iter__(self):
        return iter(self.protocols)


def read_catalog(path: str) -> Catalog:
    """
    Read a catalog from an index JSON file.

    Raises:
        OSError: If the file cannot be read
        ValueError: If the file is not valid JSON
        CatalogError: If the JSON does not describe a catalog
    """
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    return Catalog.from_dict(data)


def load_catalog(path: Optional[str]) -> Catalog:
    """
    Load a catalog, reporting failures instead of raising them.

    Args:
        path: Path to the index JSON file

    Returns:
        The loaded catalog, or an empty catalog if loading failed
    """
    if not path:
        print("Error loading catalog: no index path given")
        return Catalog.empty()

    try:
        print(f"Loading catalog from: {path}")
        catalog = read_catalog(path)
    except (OSError, ValueError, RecursionError, CatalogError) as e:
        print(f"Error loading catalog: {e}")
        return Catalog.empty()

    print(f"Loaded {len(catalog)} protocols.")
    return catalog
