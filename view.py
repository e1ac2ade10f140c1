from collections import namedtuple

PatternRow = namedtuple("PatternRow", ["pattern", "max_catches", "completion_date", "completed"])

ASCENDING = "ascending"
DESCENDING = "descending"

SORT_PATTERN = "pattern"
SORT_MAX_CATCHES = "maxCatches"
SORT_DATE = "date"
SORT_KEYS = (SORT_PATTERN, SORT_MAX_CATCHES, SORT_DATE)


def toggle_sort(current_key, current_order, clicked_key):
    """Header click: same column flips direction, a new column starts ascending."""
    if clicked_key == current_key:
        return clicked_key, DESCENDING if current_order == ASCENDING else ASCENDING
    return clicked_key, ASCENDING


def project(patterns, store, sort_key=SORT_PATTERN, sort_order=ASCENDING):
    """Join enumerated patterns with their progress and sort the rows.

    Rows with no completion date go last when sorting by date, whichever
    the direction. Ties fall back to the pattern key.
    """
    rows = []
    for p in patterns:
        rec = store.record(p)
        rows.append(PatternRow(p, rec.max_catches, rec.completion_date, rec.completed))
    reverse = sort_order == DESCENDING

    # Stable sorts: secondary key first, then the selected column.
    rows.sort(key=lambda r: r.pattern, reverse=reverse)
    if sort_key == SORT_MAX_CATCHES:
        rows.sort(key=lambda r: r.max_catches, reverse=reverse)
    elif sort_key == SORT_DATE:
        dated = [r for r in rows if r.completion_date is not None]
        undated = [r for r in rows if r.completion_date is None]
        dated.sort(key=lambda r: r.completion_date, reverse=reverse)
        rows = dated + undated
    return rows
