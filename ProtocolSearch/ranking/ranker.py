from collections import Counter
from typing import Iterable, List, Optional, Sequence, Tuple

from ..catalog.catalog import Catalog
from ..preprocessing.document import Protocol
from ..preprocessing.preprocess import PreprocessingPipeline, tokenize

# A title occurrence counts three times as much as an excerpt occurrence
TITLE_WEIGHT = 3
# Upper bound on the number of visible results
MAX_RESULTS = 50


def score_protocol(query_terms: Sequence[str], protocol: Protocol,
                   pipeline: Optional[PreprocessingPipeline] = None) -> int:
    """
    Compute the relevance of a protocol for the given query terms.
    score = sum over query terms of (excerpt count + TITLE_WEIGHT * title count)

    Args:
        query_terms: Tokenized query (duplicates count once per occurrence)
        protocol: Protocol to score
        pipeline: Optional preprocessing pipeline for the protocol text

    Returns:
        Non-negative integer score, 0 when nothing matches
    """
    if not query_terms:
        return 0

    title_freq = Counter(protocol.title_terms(pipeline))
    excerpt_freq = Counter(protocol.excerpt_terms(pipeline))

    score = 0
    for term in query_terms:
        score += excerpt_freq[term]
        score += TITLE_WEIGHT * title_freq[term]
    return score


def filter_by_category(protocols: Iterable[Protocol], active_categories: Optional[Iterable[str]]) -> List[Protocol]:
    """Keep protocols whose category is active. No active categories keeps everything."""
    active = set(active_categories or ())
    if not active:
        return list(protocols)
    return [protocol for protocol in protocols if protocol.category in active]


def match_scored(protocols: Iterable[Protocol], query: Optional[str],
                 active_categories: Optional[Iterable[str]] = None,
                 pipeline: Optional[PreprocessingPipeline] = None) -> List[Tuple[Protocol, int]]:
    """
    Order every eligible protocol for a query, without the result cap.

    With an empty query the filtered protocols are listed by category and
    start page, each with score 0. Otherwise protocols that match at least
    one term are ordered by score (highest first) and start page.

    Args:
        protocols: Protocols in catalog order
        query: Raw query text
        active_categories: Categories to keep (empty or None keeps all)
        pipeline: Optional preprocessing pipeline

    Returns:
        Ordered list of (protocol, score) pairs
    """
    terms = tokenize(query, pipeline)
    rows = filter_by_category(protocols, active_categories)

    if not terms:
        # sorted() is stable, so equal keys keep catalog order
        ordered = sorted(rows, key=lambda p: (p.category, p.start_page))
        return [(protocol, 0) for protocol in ordered]

    scored = []
    for protocol in rows:
        score = score_protocol(terms, protocol, pipeline)
        if score > 0:
            scored.append((protocol, score))

    scored.sort(key=lambda pair: (-pair[1], pair[0].start_page))
    return scored


def rank_scored(protocols: Iterable[Protocol], query: Optional[str],
                active_categories: Optional[Iterable[str]] = None,
                limit: int = MAX_RESULTS,
                pipeline: Optional[PreprocessingPipeline] = None) -> List[Tuple[Protocol, int]]:
    """
    Rank protocols for a query and return at most `limit` (protocol, score)
    pairs. `limit` is never allowed above MAX_RESULTS.
    """
    limit = max(0, min(limit, MAX_RESULTS))
    return match_scored(protocols, query, active_categories, pipeline)[:limit]


def rank_protocols(protocols: Iterable[Protocol], query: Optional[str],
                   active_categories: Optional[Iterable[str]] = None,
                   limit: int = MAX_RESULTS) -> List[Protocol]:
    """
    Rank protocols for a query.

    Args:
        protocols: Protocols in catalog order
        query: Raw query text
        active_categories: Categories to keep (empty or None keeps all)
        limit: Maximum number of results, never more than MAX_RESULTS

    Returns:
        Ordered list of at most `limit` protocols
    """
    return [protocol for protocol, _ in rank_scored(protocols, query, active_categories, limit)]


class ProtocolSearchEngine:
    """Weighted term frequency search over a protocol catalog"""

    def __init__(self, catalog: Optional[Catalog] = None,
                 pipeline: Optional[PreprocessingPipeline] = None):
        """
        Initialize the search engine.

        Args:
            catalog: Loaded catalog (an empty catalog if None)
            pipeline: Preprocessing pipeline (defaults to the standard one)
        """
        self.catalog = catalog if catalog is not None else Catalog.empty()
        self.pipeline = pipeline

    def search(self, query: Optional[str], categories: Optional[Iterable[str]] = None,
               top_k: int = MAX_RESULTS) -> List[Tuple[Protocol, int]]:
        """
        Search the catalog.

        Args:
            query: Query string
            categories: Active category filters
            top_k: Number of top results to return (capped at MAX_RESULTS)

        Returns:
            List of (protocol, score) tuples
        """
        return rank_scored(self.catalog.protocols, query, categories, top_k, self.pipeline)

    def count_matches(self, query: Optional[str], categories: Optional[Iterable[str]] = None) -> int:
        """Number of eligible protocols before the result cap is applied."""
        return len(match_scored(self.catalog.protocols, query, categories, self.pipeline))

    def debug_query(self, query: Optional[str]) -> List[str]:
        """Return the terms a query is reduced to."""
        return tokenize(query, self.pipeline)
