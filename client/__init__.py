"""
client - Advocate Directory Client Package

- api: Async HTTP client for the list and facet endpoints
- controller: List state machine that keeps search, sort and paging in sync
  with the server
"""

from client.api import AdvocatesApiClient
from client.controller import Filters, ListController, SortState, Viewport

__all__ = [
    "AdvocatesApiClient",
    "Filters",
    "ListController",
    "SortState",
    "Viewport",
]
