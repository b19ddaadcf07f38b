"""Free-text search: resolution against a snapshot and the debounced search bar."""

from pyfitment.search.resolver import SearchResolver, parse_query
from pyfitment.search.session import SearchSession

__all__ = ["SearchResolver", "SearchSession", "parse_query"]
