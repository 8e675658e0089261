# core/utils.py

"""
Repository for program-wide utilities.

Id generators are plain callables returning a fresh string on every call. The ledger only relies on
the uniqueness of the returned values, never on their textual form.
"""

import itertools
import uuid


def generate_uuid() -> str:
    return str(uuid.uuid4())


class SequentialIdGenerator:
    """
    Deterministic id generator producing `<prefix>1`, `<prefix>2`, ...

    Useful for tests and for seeding, where readable and reproducible ids matter more than global uniqueness.
    """

    def __init__(self, prefix: str = "id-", start: int = 1):
        self._prefix = prefix
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return f"{self._prefix}{next(self._counter)}"
