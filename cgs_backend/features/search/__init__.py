"""Record search and sorting."""

from .filtering import SearchQuery, filter_records, parse_search_query

__all__ = ["SearchQuery", "filter_records", "parse_search_query"]
