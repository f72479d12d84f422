"""
Operation API for the graph store.

- validation: field validators and the name sanitizer
- allocator: node id allocation within a configured band
- errors: status codes and client-facing exceptions
- handlers: one handler per operation
- dispatcher: request routing, session scoping and response shaping
"""

from graf.api.dispatcher import LEGACY_ALIASES, SUPPORTED_OPERATIONS, Dispatcher
from graf.api.errors import ApiError, Status

__all__ = [
    "Dispatcher",
    "SUPPORTED_OPERATIONS",
    "LEGACY_ALIASES",
    "ApiError",
    "Status",
]
