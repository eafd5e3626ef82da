"""Snippet extraction around the first match."""

DEFAULT_WINDOW = 50
ELLIPSIS = '...'


def build_context(
    text: str,
    query: str,
    window_size: int = DEFAULT_WINDOW,
    marker: str = '**',
) -> str:
    """
    Build a highlighted snippet around the first occurrence of `query`.

    Args:
        text: Entry text to cut the snippet from
        query: Term to locate (case-insensitive)
        window_size: Characters kept on each side of the match
        marker: Highlight marker placed before and after the match

    Returns:
        Snippet with '...' where the text was truncated. When the term is
        not found, the first 2 * window_size characters followed by '...'.
    """
    index = text.lower().find(query.lower()) if query else -1
    if index == -1:
        return text[:window_size * 2] + ELLIPSIS

    start = max(0, index - window_size)
    end = min(len(text), index + len(query) + window_size)

    match_start = index - start
    match_end = match_start + len(query)
    window = text[start:end]

    snippet = (
        window[:match_start]
        + marker + window[match_start:match_end] + marker
        + window[match_end:]
    )

    if start > 0:
        snippet = ELLIPSIS + snippet
    if end < len(text):
        snippet = snippet + ELLIPSIS

    return snippet
