"""
auth/models.py -- Domain dataclass for the credential store.

Pattern: Data class (pure data container, zero logic). Mirrors
people/models.py -- dataclasses own domain shape; stores and routes do the work.

Layer rule: no imports from api/ or people/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A local account: a unique username and its bcrypt hash.

    Users are created on signup and never modified afterwards. hashed_password
    stays inside the process -- api/models.UserResponse has no field for it.
    """

    username: str
    hashed_password: str
    id: int | None = None
    created_at: str | None = None
