"""Domain protocols - interfaces for the pluggable collaborators.

Using protocols keeps the application layer independent of the storage
backend and lets tests substitute controllable fakes.
"""

from tooltrack.domain.protocols.search import SearchGateway
from tooltrack.domain.protocols.store import RecordStore

__all__ = [
    "RecordStore",
    "SearchGateway",
]
