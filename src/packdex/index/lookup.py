"""
Search over a PackIndex.

Ranking tiers, best first:
    0. exact name match
    1. query is a substring of the name
    2. query is a substring of the description or of any tag

Packs matching no tier are dropped. Within a tier, results are ordered by
name. Matching is case-insensitive on the stripped query, and an empty query
returns every pack in name order.
"""

from packdex.index.builder import PackIndex
from packdex.schema import Pack, PackSummary, PackType

RANK_EXACT_NAME = 0
RANK_NAME = 1
RANK_DESCRIPTION_OR_TAG = 2


def rank(pack: Pack, query: str) -> int | None:
    """Return the match tier of a pack for a normalized query, or None."""
    name = pack.name.lower()
    if name == query:
        return RANK_EXACT_NAME
    if query in name:
        return RANK_NAME
    metadata = pack.metadata
    if query in metadata.description.lower():
        return RANK_DESCRIPTION_OR_TAG
    if any(query in tag.lower() for tag in metadata.tags):
        return RANK_DESCRIPTION_OR_TAG
    return None


def _passes_filters(pack: Pack, pack_type: PackType | None, tag: str | None) -> bool:
    if pack_type is not None and pack.metadata.type is not pack_type:
        return False
    if tag is not None:
        wanted = tag.strip().lower()
        if wanted not in (t.lower() for t in pack.metadata.tags):
            return False
    return True


def search(
    index: PackIndex,
    query: str = "",
    *,
    pack_type: PackType | None = None,
    tag: str | None = None,
) -> list[PackSummary]:
    """
    Find packs matching a query, best matches first.

    Args:
        index: Index to search
        query: Search string; empty or whitespace-only matches everything
        pack_type: Only return packs of this type
        tag: Only return packs carrying this tag (exact, case-insensitive)

    Returns:
        Matching pack summaries ordered by (tier, name)
    """
    needle = query.strip().lower()
    scored: list[tuple[int, str, Pack]] = []

    for pack in index.packs.values():
        if not _passes_filters(pack, pack_type, tag):
            continue
        if not needle:
            scored.append((RANK_EXACT_NAME, pack.name, pack))
            continue
        tier = rank(pack, needle)
        if tier is not None:
            scored.append((tier, pack.name, pack))

    scored.sort(key=lambda item: (item[0], item[1]))
    return [pack.summary() for _, _, pack in scored]
