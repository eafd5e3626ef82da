"""fieldfind - field-level search over nested form records."""

__version__ = "0.3.0"
__full_name__ = "FieldFind"

from .core.engine import SearchEngine
from .models.search import SearchOptions, SearchResult, DateRange
from .models.filters import SavedFilter, QuickFilter

__all__ = [
    "__version__",
    "__full_name__",
    "SearchEngine",
    "SearchOptions",
    "SearchResult",
    "DateRange",
    "SavedFilter",
    "QuickFilter",
]
