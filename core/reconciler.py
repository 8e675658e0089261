# core/reconciler.py

"""
Three-way reconciliation of batch edits to graded items.

A batch edit works on a scratch copy of some graded items. Rows keep the id of the item they were
copied from; rows added during the edit get a freshly minted scratch id. Nothing on a row says whether
it is new. `reconcile()` works that out from the ids alone:

    - ids in `original` but not in `edited`             -> delete
    - ids in both, with a comparable field that differs -> update (only the changed fields)
    - ids in `edited` but not in `original`             -> create (scratch id dropped)

`apply_plan()` then replays the result through a `LedgerStore`, deletions first, one operation at a time.
The store does not offer transactions. Each operation is applied independently, so a failure is recorded
and the remaining operations still run.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, TYPE_CHECKING

from core.response import Response
from models.graded_item import EDITABLE_FIELDS, GradedItem

if TYPE_CHECKING:
    from models.ledger_store import LedgerStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ItemUpdate:
    id: str
    patch: dict[str, Any]


@dataclass(frozen=True)
class ReconciliationPlan:
    """
    The operations that turn `original` into `edited`.

    `scratch_ids` lines up with `to_create` and records which edited row each creation payload came from.
    It is bookkeeping for the caller and is never sent to the store.
    """

    to_create: tuple[dict[str, Any], ...] = ()
    to_update: tuple[ItemUpdate, ...] = ()
    to_delete: tuple[str, ...] = ()
    scratch_ids: tuple[str, ...] = field(default=(), compare=False)

    @property
    def is_empty(self) -> bool:
        return not (self.to_create or self.to_update or self.to_delete)

    @property
    def operation_count(self) -> int:
        return len(self.to_create) + len(self.to_update) + len(self.to_delete)


def validate_comparable_fields(comparable_fields: Iterable[str]) -> tuple[str, ...]:
    """
    Raises:
        ValueError: If a field name is not one of `EDITABLE_FIELDS`.
    """
    comparable_fields = tuple(comparable_fields)

    unknown = sorted(set(comparable_fields) - set(EDITABLE_FIELDS))
    if unknown:
        raise ValueError(f"Fields cannot be compared: {', '.join(unknown)}.")

    return comparable_fields


def diff_fields(
    before: GradedItem,
    after: GradedItem,
    comparable_fields: Iterable[str] = EDITABLE_FIELDS,
) -> dict[str, Any]:
    """Returns the comparable fields of `after` whose values differ from `before`."""
    old = before.fields()
    new = after.fields()

    return {name: new[name] for name in comparable_fields if old[name] != new[name]}


def reconcile(
    original: Iterable[GradedItem],
    edited: Iterable[GradedItem],
    comparable_fields: Iterable[str] = EDITABLE_FIELDS,
) -> ReconciliationPlan:
    """
    Computes the create, update, and delete operations that turn `original` into `edited`.

    Args:
        original (Iterable[GradedItem]): The items as they were when the scratch copy was taken.
        edited (Iterable[GradedItem]): The scratch copy after editing.
        comparable_fields (Iterable[str]): The fields whose changes produce an update. Defaults to every
            editable field; pass ("name", "weight") to only track renames and reweighting.

    Returns:
        ReconciliationPlan: Deletions in `original` order, updates and creations in `edited` order.

    Raises:
        ValueError: If `comparable_fields` names a field that is not editable.

    Notes:
        - A row that appears more than once in `edited` is treated as one row holding its last values.
        - A row edited and then removed only produces a delete. A row added and then edited only produces one
          create, with its final values.
        - Reconciling a list against itself, or against an equal list, produces an empty plan.
    """
    comparable_fields = validate_comparable_fields(comparable_fields)

    original_by_id: dict[str, GradedItem] = {}
    for item in original:
        original_by_id.setdefault(item.id, item)

    edited_by_id: dict[str, GradedItem] = {}
    for item in edited:
        edited_by_id[item.id] = item

    to_delete = tuple(
        item_id for item_id in original_by_id if item_id not in edited_by_id
    )

    to_update: list[ItemUpdate] = []
    to_create: list[dict[str, Any]] = []
    scratch_ids: list[str] = []

    for item_id, item in edited_by_id.items():
        before = original_by_id.get(item_id)

        if before is None:
            payload = item.fields()
            del payload["id"]
            to_create.append(payload)
            scratch_ids.append(item_id)
            continue

        patch = diff_fields(before, item, comparable_fields)
        if patch:
            to_update.append(ItemUpdate(id=item_id, patch=patch))

    return ReconciliationPlan(
        to_create=tuple(to_create),
        to_update=tuple(to_update),
        to_delete=to_delete,
        scratch_ids=tuple(scratch_ids),
    )


def apply_plan(store: LedgerStore, plan: ReconciliationPlan) -> Response:
    """
    Applies a `ReconciliationPlan` through the store's graded item manipulators.

    Args:
        store (LedgerStore): The store holding the canonical ledger.
        plan (ReconciliationPlan): The operations to apply.

    Returns:
        Response: A structured response with the following contract:
            - success (bool):
                - True if every operation succeeded.
                - False if at least one operation failed. The others were still applied.
            - error (ErrorCode | str | None):
                - The error of the first failed operation, if any.
            - data (dict): Payload with the following keys:
                - "ledger" (Ledger): The store's ledger after the last operation.
                - "deleted" (tuple[str, ...]): Ids of items moved to the trash.
                - "updated" (tuple[GradedItem, ...]): Items after their update.
                - "created" (tuple[GradedItem, ...]): Newly created items.
                - "minted_ids" (dict[str, str]): Scratch id -> minted id for each created item.
                - "failures" (tuple[tuple[str, str, Response], ...]): (operation, id or scratch id, response).

    Notes:
        - Deletions run first, then updates, then creations. The three sets never share an id, so order only
          affects intermediate states seen by readers between operations.
        - There is no rollback. Each operation is applied and persisted on its own.
    """
    deleted: list[str] = []
    updated: list[GradedItem] = []
    created: list[GradedItem] = []
    minted_ids: dict[str, str] = {}
    failures: list[tuple[str, str, Response]] = []

    for item_id in plan.to_delete:
        response = store.delete_graded_item(item_id)

        if response.success:
            deleted.append(item_id)
        else:
            failures.append(("delete", item_id, response))

    for update in plan.to_update:
        response = store.update_graded_item(update.id, update.patch)

        if response.success:
            updated.append(response.record)
        else:
            failures.append(("update", update.id, response))

    scratch_ids = plan.scratch_ids
    if len(scratch_ids) != len(plan.to_create):
        scratch_ids = tuple(str(index) for index in range(len(plan.to_create)))

    for scratch_id, payload in zip(scratch_ids, plan.to_create):
        response = store.add_graded_item(payload)

        if response.success:
            item = response.record
            created.append(item)
            minted_ids[scratch_id] = item.id
        else:
            failures.append(("create", scratch_id, response))

    logger.info(
        "reconcile_applied deleted=%d updated=%d created=%d failed=%d",
        len(deleted),
        len(updated),
        len(created),
        len(failures),
    )

    data = {
        "ledger": store.ledger,
        "deleted": tuple(deleted),
        "updated": tuple(updated),
        "created": tuple(created),
        "minted_ids": minted_ids,
        "failures": tuple(failures),
    }

    if failures:
        operation, record_id, first = failures[0]
        for failed_operation, failed_id, failed in failures:
            logger.warning(
                "reconcile_operation_failed op=%s id=%s err=%s",
                failed_operation,
                failed_id,
                failed.detail,
            )

        return Response.fail(
            detail=f"{len(failures)} of {plan.operation_count} operation(s) failed; first: {operation} {record_id}: {first.detail}",
            error=first.error,
            status_code=first.status_code,
            data=data,
        )

    return Response.succeed(
        detail=(
            f"Batch edit saved: {len(created)} created, {len(updated)} updated, "
            f"{len(deleted)} deleted."
        ),
        data=data,
    )


def commit_batch_edit(
    store: LedgerStore,
    original: Iterable[GradedItem],
    edited: Iterable[GradedItem],
    comparable_fields: Iterable[str] = EDITABLE_FIELDS,
) -> Response:
    """
    Reconciles `edited` against `original` and applies the result to `store`.

    Returns:
        Response: The `apply_plan()` response with the plan added under `data["plan"]`, or an early success with
        an empty plan when there is nothing to apply.
    """
    plan = reconcile(original, edited, comparable_fields)

    if plan.is_empty:
        return Response.succeed(
            detail="No changes to save.",
            data={"ledger": store.ledger, "plan": plan},
        )

    response = apply_plan(store, plan)

    return Response(
        success=response.success,
        detail=response.detail,
        error=response.error,
        status_code=response.status_code,
        data={**response.data, "plan": plan},
    )
