"""
Opaque identifier generation.

Used for user ids, case ids, comment ids, access tokens and reset tokens.
"""

import uuid
from typing import Protocol, runtime_checkable


@runtime_checkable
class IIdGenerator(Protocol):
    """Interface for generating opaque unique identifiers."""

    def generate_id(self) -> str:
        """Return a new identifier, unique for the lifetime of the process."""
        ...


class UuidGenerator:
    """Generates random UUID4 strings."""

    def generate_id(self) -> str:
        return str(uuid.uuid4())
