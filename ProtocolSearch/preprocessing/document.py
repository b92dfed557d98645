from typing import Any, Dict, List, Optional

from .preprocess import PreprocessingPipeline, tokenize

# Filter vocabulary, in the order the category toggles are shown
CATEGORIES = ("General", "Medical", "Cardiac", "Trauma", "Pediatric", "Procedures")


def _as_text(value) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _as_page(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


class Protocol:
    """
    Represents one protocol section in the catalog.
    Stores the section metadata and caches its tokenized title and excerpt.
    """

    def __init__(self, title: str = "", number: str = "", category: str = "",
                 start_page: int = 0, end_page: int = 0, excerpt: str = "",
                 category_code: Optional[str] = None):
        """
        Initialize a protocol section.

        Args:
            title: Short section title
            number: Protocol identifier (opaque)
            category: One of CATEGORIES, used for exact filtering
            start_page: First PDF page of the section
            end_page: Last PDF page of the section
            excerpt: Free text taken from the section
            category_code: Optional opaque code, not used for scoring
        """
        self.title = title
        self.number = number
        self.category = category
        self.category_code = category_code
        self.start_page = start_page
        self.end_page = end_page
        self.excerpt = excerpt
        self._title_terms = None
        self._excerpt_terms = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Protocol':
        """
        Build a protocol from one entry of the index JSON.
        Missing fields fall back to empty values instead of failing.
        """
        category_code = data.get("category_code")
        return cls(
            title=_as_text(data.get("title")),
            number=_as_text(data.get("number")),
            category=_as_text(data.get("category")),
            start_page=_as_page(data.get("start_page")),
            end_page=_as_page(data.get("end_page")),
            excerpt=_as_text(data.get("excerpt")),
            category_code=_as_text(category_code) if category_code is not None else None,
        )

    def title_terms(self, pipeline: Optional[PreprocessingPipeline] = None) -> List[str]:
        """Tokenized title (cached for the default pipeline)."""
        if pipeline is not None:
            return tokenize(self.title, pipeline)
        if self._title_terms is None:
            self._title_terms = tokenize(self.title)
        return self._title_terms

    def excerpt_terms(self, pipeline: Optional[PreprocessingPipeline] = None) -> List[str]:
        """Tokenized excerpt (cached for the default pipeline)."""
        if pipeline is not None:
            return tokenize(self.excerpt, pipeline)
        if self._excerpt_terms is None:
            self._excerpt_terms = tokenize(self.excerpt)
        return self._excerpt_terms

    @property
    def page_range(self) -> str:
        return f"{self.start_page}-{self.end_page}"

    def pdf_link(self, base_path: str) -> str:
        """Deep link into the companion PDF at the first page of the section."""
        return f"{base_path}#page={self.start_page}"

    def __repr__(self):
        return f"Protocol({self.title!r}, category={self.category!r}, pages={self.page_range})"
