"""
people/models.py -- Domain dataclass for the resource store.

Pure data container with zero logic. Ownership stamping and scoping live in
people/store.py and the route layer.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Person:
    """A person record.

    username is the owning account when the service runs with auth, and None
    otherwise. It is always set server-side, never from a request body.

    id is None before the record is written to the database.
    """

    name: Optional[str] = None
    image: Optional[str] = None  # URI or path
    title: Optional[str] = None
    username: Optional[str] = None
    id: Optional[str] = None
    created_at: str = ""  # ISO 8601, set by store on insert
