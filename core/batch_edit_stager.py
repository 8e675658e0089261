# core/batch_edit_stager.py

"""
Utility class for staging batch edits to a course's graded items before committing them to the ledger.

`BatchEditStager` holds a scratch copy of the items. Rows can be added, edited, and removed freely without
touching the ledger, then committed in one step, which reconciles the scratch copy against the items it
was cloned from.

This enables workflows such as:
    - Reweighting every component of a course and saving once
    - Adding placeholder components (e.g. "New Quiz") and removing others in the same session
    - Previewing the total weight of the edited structure before saving
    - Discarding all edits without affecting the ledger

Rows added here get scratch ids from the id generator. Whether a row is new is never stored on the row;
`reconcile()` derives it from whether the id was part of the original copy.
"""

from __future__ import annotations

import datetime
from collections.abc import Callable, Iterable
from typing import Any

import core.grade_calculator as grade_calculator
from core.reconciler import ReconciliationPlan, commit_batch_edit, reconcile
from core.response import Response
from core.utils import generate_uuid
from models.graded_item import (
    EDITABLE_FIELDS,
    GradedItem,
    ItemStatus,
    ItemType,
    Priority,
)
from models.ledger_store import LedgerStore


class BatchEditStager:
    """
    A scratch copy of one course's graded items, keyed by id.

    The stager is intended for short-lived use during an editing session. It does not persist anything
    itself and is discarded after committing or resetting.

    Notes:
        - Rows are stored in insertion order in a `dict[str, GradedItem]`.
        - No validation is performed against the ledger until `commit()`.
    """

    def __init__(
        self,
        course_id: str,
        original: Iterable[GradedItem],
        id_generator: Callable[[], str] = generate_uuid,
        comparable_fields: Iterable[str] = EDITABLE_FIELDS,
        clock: Callable[[], datetime.datetime] = datetime.datetime.now,
    ):
        self._course_id = course_id
        self._original: tuple[GradedItem, ...] = tuple(original)
        self._rows: dict[str, GradedItem] = {item.id: item for item in self._original}
        self._id_generator = id_generator
        self._comparable_fields = tuple(comparable_fields)
        self._clock = clock

    @classmethod
    def for_course(cls, store: LedgerStore, course_id: str, **kwargs: Any) -> BatchEditStager:
        """Starts a session over the course's current items in `store`."""
        return cls(course_id, store.ledger.items_for_course(course_id), **kwargs)

    # === properties ===

    @property
    def course_id(self) -> str:
        return self._course_id

    @property
    def original(self) -> tuple[GradedItem, ...]:
        return self._original

    def rows(self) -> list[GradedItem]:
        return list(self._rows.values())

    def get(self, item_id: str) -> GradedItem | None:
        return self._rows.get(item_id)

    # === staging ===

    def add(self, type: ItemType | str = ItemType.ASSIGNMENT, **fields: Any) -> str:
        """
        Stage a new row.

        Args:
            type (ItemType | str): The item type. Also used for the default name, e.g. "New Quiz".
            **fields: Any other `GradedItem` fields. Missing ones default to weight 0, due now, Medium priority,
                and Not Started.

        Returns:
            str: The scratch id of the new row.
        """
        item_type = ItemType(type)
        defaults: dict[str, Any] = {
            "name": f"New {item_type.value}",
            "description": "",
            "due_date": self._clock(),
            "weight": 0,
            "priority": Priority.MEDIUM,
            "status": ItemStatus.NOT_STARTED,
        }
        fields.pop("id", None)
        fields.pop("course_id", None)

        scratch_id = self._mint_scratch_id()
        self._rows[scratch_id] = GradedItem(
            id=scratch_id,
            course_id=self._course_id,
            type=item_type,
            **{**defaults, **fields},
        )

        return scratch_id

    def edit(self, item_id: str, **changes: Any) -> GradedItem | None:
        """
        Stage changes to an existing row, original or new.

        Returns:
            The edited row, or None if no row has this id.

        Raises:
            TypeError | ValueError: If the changes fail `GradedItem` validation.
        """
        row = self._rows.get(item_id)

        if row is None:
            return None

        changes.pop("course_id", None)
        edited = row.replace(**changes)
        self._rows[item_id] = edited

        return edited

    def remove(self, item_id: str) -> None:
        """
        Remove a row, if present.

        Removing an original row stages its deletion; removing a new row simply forgets it.
        """
        self._rows.pop(item_id, None)

    def reset(self) -> None:
        """Discard all staged edits."""
        self._rows = {item.id: item for item in self._original}

    # === previews ===

    def total_weight(self) -> float:
        return grade_calculator.total_weight(self._rows.values())

    def plan(self) -> ReconciliationPlan:
        return reconcile(self._original, self._rows.values(), self._comparable_fields)

    def is_empty(self) -> bool:
        """
        Check whether the session holds any staged changes.

        Returns:
            bool: True if committing now would not change the ledger.
        """
        return self.plan().is_empty

    # === commit ===

    def commit(self, store: LedgerStore) -> Response:
        """
        Reconciles the scratch copy against the original and applies the result to `store`.

        Returns:
            Response: The `commit_batch_edit()` response, with the plan under `data["plan"]`.

        Notes:
            - Afterwards the session is rebased on the store's state: created rows take their minted ids and
              committed rows become the new original. Committing again without further edits is a no-op.
            - Rows whose operation failed stay staged, so a later commit retries them.
        """
        response = commit_batch_edit(
            store, self._original, self._rows.values(), self._comparable_fields
        )

        if not response.data["plan"].is_empty:
            self._rebase(store, response.data["minted_ids"])

        return response

    # === helper methods ===

    def _rebase(self, store: LedgerStore, minted_ids: dict[str, str]) -> None:
        ledger = store.ledger
        original: list[GradedItem] = []
        rows: dict[str, GradedItem] = {}
        original_ids = {item.id for item in self._original}

        for row_id, row in self._rows.items():
            if row_id in minted_ids:
                canonical = ledger.find_graded_item(minted_ids[row_id])
                if canonical is not None:
                    original.append(canonical)
                    rows[canonical.id] = canonical
                continue

            if row_id not in original_ids:
                # a create that failed; keep it staged
                rows[row_id] = row
                continue

            canonical = ledger.find_graded_item(row_id)
            if canonical is not None:
                original.append(canonical)
                rows[row_id] = row

        for item in self._original:
            # originals whose deletion failed are still live; keeping them retries the deletion
            if item.id not in self._rows and ledger.find_graded_item(item.id) is not None:
                original.append(item)

        self._original = tuple(original)
        self._rows = rows

    def _mint_scratch_id(self) -> str:
        taken = set(self._rows) | {item.id for item in self._original}
        scratch_id = self._id_generator()

        while scratch_id in taken:
            scratch_id = self._id_generator()

        return scratch_id
