# search results for the search view
# wraps store matches with display title, excerpt and character count

from typing import Iterable, Optional

from diary.models.entry import Entry, SearchResult, SearchResponse
from diary.services.entry_store import sort_by_date

EXCERPT_LENGTH = 200


def summarize(total: int, query: str) -> str:
    plural = "" if total == 1 else "s"
    return f'Found {total} result{plural} for "{query}"'


def build_results(
    entries: Iterable[Entry],
    query: Optional[str],
    excerpt_length: int = EXCERPT_LENGTH,
) -> SearchResponse:
    """turn matched entries into a newest-first search response"""
    query = query or ""
    ordered = sort_by_date(entries)
    results = [
        SearchResult(
            entry=entry,
            displayTitle=entry.display_title,
            excerpt=entry.excerpt(excerpt_length),
            characterCount=entry.character_count,
        )
        for entry in ordered
    ]
    return SearchResponse(
        query=query,
        total=len(results),
        summary=summarize(len(results), query),
        results=results,
    )
