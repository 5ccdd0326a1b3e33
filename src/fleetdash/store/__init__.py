"""Document store adapters.

The dashboard core only consumes :class:`DocumentStore`; the adapters here
implement it for an in-memory dataset and for the Firestore REST API.
"""

from fleetdash.store.base import CollectionQuery, DocumentStore, FieldFilter, SortDirection, SortSpec
from fleetdash.store.firestore import FirestoreRestStore
from fleetdash.store.memory import InMemoryDocumentStore

__all__ = [
    "CollectionQuery",
    "DocumentStore",
    "FieldFilter",
    "FirestoreRestStore",
    "InMemoryDocumentStore",
    "SortDirection",
    "SortSpec",
]
