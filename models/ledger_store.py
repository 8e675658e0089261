# models/ledger_store.py

"""
The LedgerStore is the sole writer of the canonical `Ledger`.

Each manipulator builds a new `Ledger` from the current one, makes it current, and hands it to the
snapshot collaborator (`on_snapshot_changed`). Readers get `Ledger` values, which never change under them.

Failure semantics:
- Operations that reference a missing id are no-ops. They return a failed `Response` with
  `ErrorCode.NOT_FOUND`, leave the current `Ledger` untouched, and skip persistence. Nothing is raised.
- A malformed import is reported with `ErrorCode.MALFORMED_IMPORT`.
- A failing snapshot write is logged and flagged through `has_unsaved_changes`; the in-memory `Ledger`
  stays current and the operation still succeeds.

There is no locking and no version token on any record. Two batch edits of the same items that are
committed one after the other both apply, and the later one overwrites the fields the earlier one set.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Callable
from typing import Any

from core.response import ErrorCode, Response
from core.utils import generate_uuid
from models.course import Course
from models.graded_item import GradedItem
from models.ledger import Ledger
from models.trash_record import CourseBundle, TrashKind, TrashRecord
from models.types import RecordType

logger = logging.getLogger(__name__)

IdGenerator = Callable[[], str]
SnapshotListener = Callable[[Ledger], Any]
SnapshotLoader = Callable[[], "Ledger | dict | None"]


class LedgerStore:

    def __init__(
        self,
        ledger: Ledger | None = None,
        id_generator: IdGenerator = generate_uuid,
        on_snapshot_changed: SnapshotListener | None = None,
        clock: Callable[[], datetime.datetime] = datetime.datetime.now,
    ):
        self._ledger: Ledger = ledger if ledger is not None else Ledger()
        self._id_generator = id_generator
        self._on_snapshot_changed = on_snapshot_changed
        self._clock = clock
        self._unsaved_changes: bool = False

    # === properties ===

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def has_unsaved_changes(self) -> bool:
        return self._unsaved_changes

    # === public classmethods ===

    @classmethod
    def from_snapshot(
        cls,
        load_snapshot: SnapshotLoader,
        on_snapshot_changed: SnapshotListener | None = None,
        id_generator: IdGenerator = generate_uuid,
        clock: Callable[[], datetime.datetime] = datetime.datetime.now,
    ) -> LedgerStore:
        """
        Creates a `LedgerStore` from the snapshot collaborator's saved state.

        Args:
            load_snapshot (SnapshotLoader): Returns a `Ledger`, its serialized dictionary, or None if nothing is saved.
            on_snapshot_changed (SnapshotListener | None): Receives every new `Ledger` after a mutation.
            id_generator (IdGenerator): Supplies fresh ids for new records.
            clock (Callable[[], datetime.datetime]): Supplies deletion timestamps and the seed date.

        Returns:
            A `LedgerStore` holding the loaded `Ledger`, or the seed `Ledger.default()` when the snapshot is absent,
            malformed, or could not be read.

        Notes:
            - Loading does not trigger `on_snapshot_changed`.
        """
        ledger = None

        try:
            snapshot = load_snapshot()

            if isinstance(snapshot, Ledger):
                ledger = snapshot

            elif snapshot is not None:
                ledger = Ledger.from_dict(snapshot)

        except (KeyError, TypeError, ValueError) as e:
            logger.warning("snapshot_malformed seeding_default err=%s", e)

        except Exception as e:
            logger.warning("snapshot_load_failed seeding_default err=%s", e)

        if ledger is None:
            logger.info("seeding_default_ledger")
            ledger = Ledger.default(clock())

        return cls(
            ledger,
            id_generator=id_generator,
            on_snapshot_changed=on_snapshot_changed,
            clock=clock,
        )

    # === data accessors ===

    def find_course(self, course_id: str) -> Response:
        """
        Finds a live `Course` by id.

        Returns:
            Response: On success, `data["record"]` holds the `Course`. On failure, `ErrorCode.NOT_FOUND` with status 404.

        Notes:
            - This method is read-only and does not raise.
        """
        course = self._ledger.find_course(course_id)

        if course is None:
            return self._not_found("course", course_id)

        return Response.succeed(data={"record": course})

    def find_graded_item(self, item_id: str) -> Response:
        item = self._ledger.find_graded_item(item_id)

        if item is None:
            return self._not_found("graded item", item_id)

        return Response.succeed(data={"record": item})

    def find_trash_record(self, trash_id: str) -> Response:
        record = self._ledger.find_trash_record(trash_id)

        if record is None:
            return self._not_found("trash record", trash_id)

        return Response.succeed(data={"record": record})

    def get_items_for_course(self, course_id: str) -> Response:
        """
        Lists the live graded items of a live course.

        Returns:
            Response: On success, `data["records"]` holds a tuple of `GradedItem` objects, possibly empty.
            Fails with `ErrorCode.NOT_FOUND` if the course is not live.
        """
        if self._ledger.find_course(course_id) is None:
            return self._not_found("course", course_id)

        return Response.succeed(
            data={"records": self._ledger.items_for_course(course_id)}
        )

    # === data manipulators ===

    # --- course manipulation ---

    def add_course(self, data: dict) -> Response:
        """
        Creates a `Course` from field data and appends it to the ledger.

        Args:
            data (dict): `Course` constructor fields. Any "id" key is ignored; a fresh id is minted.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the course was added.
                    - False if a field is missing or fails validation.
                - error (ErrorCode | str | None):
                    - `ErrorCode.INVALID_FIELD_VALUE` if a value is out of bounds.
                    - `ErrorCode.INVALID_INPUT` if a field is missing, unknown, or of the wrong type.
                - data (dict): Payload with the following keys:
                    - "ledger" (Ledger): The current ledger after the call.
                    - "record" (Course): The added course. Included only on success.
                    - "persisted" (bool): Whether the snapshot write succeeded. Included only on success.

        Notes:
            - This method replaces the current ledger and persists it if successful.
        """
        fields = {key: value for key, value in data.items() if key != "id"}

        try:
            course = Course(id=self._mint_course_id(), **fields)

        except ValueError as e:
            return self._invalid(f"Invalid field value: {e}", ErrorCode.INVALID_FIELD_VALUE)

        except TypeError as e:
            return self._invalid(f"Invalid course data: {e}", ErrorCode.INVALID_INPUT)

        return self._commit(
            self._ledger.replace(courses=self._ledger.courses + (course,)),
            detail="Course successfully added to the ledger.",
            record=course,
        )

    def update_course(self, course_id: str, patch: dict) -> Response:
        """
        Merges `patch` into the fields of a live course.

        Returns:
            Response: Succeeds with `data["record"]` holding the updated `Course`, or fails with
            `ErrorCode.NOT_FOUND`, `ErrorCode.INVALID_FIELD_VALUE`, or `ErrorCode.INVALID_INPUT`.

        Notes:
            - If the patch leaves every field as it was, the method returns early with a success response and
              does not persist.
        """
        course = self._ledger.find_course(course_id)

        if course is None:
            return self._not_found("course", course_id)

        try:
            updated = course.replace(**patch)

        except ValueError as e:
            return self._invalid(f"Invalid field value: {e}", ErrorCode.INVALID_FIELD_VALUE)

        except TypeError as e:
            return self._invalid(f"Invalid course data: {e}", ErrorCode.INVALID_INPUT)

        if updated == course:
            return self._unchanged(course)

        return self._commit(
            self._ledger.replace(
                courses=_swap(self._ledger.courses, course_id, updated)
            ),
            detail=f"Course successfully updated: {updated.code}.",
            record=updated,
        )

    def delete_course(self, course_id: str) -> Response:
        """
        Moves a course and all of its graded items into the trash as one record.

        Args:
            course_id (str): The id of a live course.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the course was moved to the trash.
                    - False if no live course has this id.
                - error (ErrorCode | str | None):
                    - `ErrorCode.NOT_FOUND` if the course is not live.
                - status_code (int | None):
                    - 200 on success
                    - 404 if the course is not live
                - data (dict): Payload with the following keys:
                    - "ledger" (Ledger): The current ledger after the call.
                    - "record" (TrashRecord): The new trash record. Included only on success.
                    - "persisted" (bool): Whether the snapshot write succeeded. Included only on success.

        Notes:
            - The course's graded items are captured and removed in the same step, so none stays live and none is
              captured twice.
            - Restoring the record puts back the exact course and items with their original ids.
        """
        course = self._ledger.find_course(course_id)

        if course is None:
            return self._not_found("course", course_id)

        items = self._ledger.items_for_course(course_id)
        record = TrashRecord.for_course(
            self._mint_trash_id(), course, items, self._clock()
        )

        return self._commit(
            self._ledger.replace(
                courses=tuple(c for c in self._ledger.courses if c.id != course_id),
                graded_items=tuple(
                    i for i in self._ledger.graded_items if i.course_id != course_id
                ),
                trash=self._ledger.trash + (record,),
            ),
            detail=f"Course moved to trash with {len(items)} graded item(s).",
            record=record,
        )

    # --- graded item manipulation ---

    def add_graded_item(self, data: dict) -> Response:
        """
        Creates a `GradedItem` from field data and appends it to the ledger.

        Args:
            data (dict): `GradedItem` constructor fields, including "course_id". Any "id" key is ignored.

        Returns:
            Response: Succeeds with `data["record"]` holding the new `GradedItem`. Fails with
            `ErrorCode.NOT_FOUND` if "course_id" does not name a live course, or with
            `ErrorCode.INVALID_FIELD_VALUE` / `ErrorCode.INVALID_INPUT` if the fields do not validate.

        Notes:
            - This method replaces the current ledger and persists it if successful.
        """
        fields = {key: value for key, value in data.items() if key != "id"}
        course_id = fields.get("course_id")

        if course_id is None:
            return self._invalid(
                "Missing required field: course_id.", ErrorCode.INVALID_INPUT
            )

        if self._ledger.find_course(course_id) is None:
            return self._not_found("course", course_id)

        try:
            item = GradedItem(id=self._mint_item_id(), **fields)

        except ValueError as e:
            return self._invalid(f"Invalid field value: {e}", ErrorCode.INVALID_FIELD_VALUE)

        except TypeError as e:
            return self._invalid(f"Invalid graded item data: {e}", ErrorCode.INVALID_INPUT)

        return self._commit(
            self._ledger.replace(graded_items=self._ledger.graded_items + (item,)),
            detail="Graded item successfully added to the ledger.",
            record=item,
        )

    def update_graded_item(self, item_id: str, patch: dict) -> Response:
        """
        Merges `patch` into the fields of a live graded item.

        Returns:
            Response: Succeeds with `data["record"]` holding the updated `GradedItem`. Fails with
            `ErrorCode.NOT_FOUND` if the item is not live, or if the patch moves it to a course that is not live.

        Notes:
            - If the patch leaves every field as it was, the method returns early with a success response and
              does not persist.
        """
        item = self._ledger.find_graded_item(item_id)

        if item is None:
            return self._not_found("graded item", item_id)

        new_course_id = patch.get("course_id", item.course_id)
        if (
            new_course_id != item.course_id
            and self._ledger.find_course(new_course_id) is None
        ):
            return self._not_found("course", new_course_id)

        try:
            updated = item.replace(**patch)

        except ValueError as e:
            return self._invalid(f"Invalid field value: {e}", ErrorCode.INVALID_FIELD_VALUE)

        except TypeError as e:
            return self._invalid(f"Invalid graded item data: {e}", ErrorCode.INVALID_INPUT)

        if updated == item:
            return self._unchanged(item)

        return self._commit(
            self._ledger.replace(
                graded_items=_swap(self._ledger.graded_items, item_id, updated)
            ),
            detail=f"Graded item successfully updated: {updated.name}.",
            record=updated,
        )

    def delete_graded_item(self, item_id: str) -> Response:
        """
        Moves a single graded item into the trash.

        Returns:
            Response: Succeeds with `data["record"]` holding the new `TrashRecord`, or fails with
            `ErrorCode.NOT_FOUND` and leaves the ledger exactly as it was.
        """
        item = self._ledger.find_graded_item(item_id)

        if item is None:
            return self._not_found("graded item", item_id)

        record = TrashRecord.for_graded_item(self._mint_trash_id(), item, self._clock())

        return self._commit(
            self._ledger.replace(
                graded_items=tuple(
                    i for i in self._ledger.graded_items if i.id != item_id
                ),
                trash=self._ledger.trash + (record,),
            ),
            detail="Graded item moved to trash.",
            record=record,
        )

    # --- trash manipulation ---

    def restore(self, trash_id: str) -> Response:
        """
        Puts the contents of a trash record back into the live collections and drops the record.

        Args:
            trash_id (str): The id of the `TrashRecord` (not of the course or item it wraps).

        Returns:
            Response: Succeeds with `data["record"]` holding the restored `Course` or `GradedItem`, or fails with
            `ErrorCode.NOT_FOUND`.

        Notes:
            - Ids are restored unchanged.
            - A graded item restored while its course is still in the trash, or permanently gone, becomes
              orphaned. This is accepted; see `Ledger.orphaned_items()`.
        """
        record = self._ledger.find_trash_record(trash_id)

        if record is None:
            return self._not_found("trash record", trash_id)

        remaining_trash = tuple(t for t in self._ledger.trash if t.id != trash_id)
        payload = record.payload

        if record.kind is TrashKind.COURSE and isinstance(payload, CourseBundle):
            restored = payload.course
            ledger = self._ledger.replace(
                courses=self._ledger.courses + (payload.course,),
                graded_items=self._ledger.graded_items + payload.graded_items,
                trash=remaining_trash,
            )

        elif record.kind is TrashKind.GRADED_ITEM and isinstance(payload, GradedItem):
            restored = payload
            ledger = self._ledger.replace(
                graded_items=self._ledger.graded_items + (payload,),
                trash=remaining_trash,
            )

        else:
            return Response.fail(
                detail=f"Unrecognized trash record: {record!r}.",
                error=ErrorCode.INTERNAL_ERROR,
                data={"ledger": self._ledger},
            )

        return self._commit(
            ledger,
            detail=f"Restored from trash: {record.label}.",
            record=restored,
        )

    def empty_trash(self) -> Response:
        """
        Permanently discards every trash record. Live collections are untouched.
        """
        if not self._ledger.trash:
            return Response.succeed(
                detail="The trash is already empty. No changes made.",
                data={"ledger": self._ledger},
            )

        count = len(self._ledger.trash)

        return self._commit(
            self._ledger.replace(trash=()),
            detail=f"Permanently deleted {count} trash record(s).",
        )

    # --- bulk operations ---

    def import_batch(self, payload: Any) -> Response:
        """
        Imports a course and its graded items from loosely-typed data, such as a parsed syllabus.

        Args:
            payload (Any): A dictionary shaped `{"course": {...}, "graded_items": [{...}, ...]}`.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the course and all items were added.
                    - False if the payload is malformed. Nothing is added in that case.
                - detail (str | None):
                    - On failure, a human-readable description of what is missing or invalid.
                - error (ErrorCode | str | None):
                    - `ErrorCode.MALFORMED_IMPORT` for any structural or field problem.
                - data (dict): Payload with the following keys:
                    - "ledger" (Ledger): The current ledger after the call.
                    - "record" (Course): The new course. Included only on success.
                    - "records" (tuple[GradedItem, ...]): The new items. Included only on success.

        Notes:
            - The course and every item get fresh ids; each item's "course_id" is set to the new course id.
            - Unknown priority, status, and type values are coerced to Medium, Not Started, and Assignment.
            - Missing course color, target grade, and credits take the configured defaults.
        """
        if not isinstance(payload, dict):
            return self._malformed("Expected an object with 'course' and 'graded_items'.")

        course_data = payload.get("course")
        item_data = payload.get("graded_items")

        if not isinstance(course_data, dict):
            return self._malformed("Missing 'course' object.")

        if not isinstance(item_data, list):
            return self._malformed("Missing 'graded_items' array.")

        if not all(isinstance(entry, dict) for entry in item_data):
            return self._malformed("Every entry in 'graded_items' must be an object.")

        try:
            course = Course.from_import(course_data, id=self._mint_course_id())

            items: list[GradedItem] = []
            taken = self._taken_item_ids()

            for entry in item_data:
                item_id = self._mint_unique(taken)
                taken.add(item_id)
                items.append(GradedItem.from_import(entry, id=item_id, course_id=course.id))

        except KeyError as e:
            return self._malformed(f"Missing required field: {e}.")

        except (TypeError, ValueError) as e:
            return self._malformed(f"Invalid field value: {e}")

        logger.info(
            "import_batch course_id=%s items=%d", course.id, len(items)
        )

        return self._commit(
            self._ledger.replace(
                courses=self._ledger.courses + (course,),
                graded_items=self._ledger.graded_items + tuple(items),
            ),
            detail=f"Imported {course.code} with {len(items)} graded item(s).",
            record=course,
            records=tuple(items),
        )

    def replace_snapshot(self, new_ledger: Ledger | dict) -> Response:
        """
        Replaces the whole ledger, as when restoring a full backup.

        Args:
            new_ledger (Ledger | dict): A `Ledger`, or its serialized dictionary.

        Returns:
            Response: Succeeds with the new ledger current, or fails with `ErrorCode.INVALID_INPUT` if a dictionary
            cannot be deserialized. No other validation is performed.
        """
        if not isinstance(new_ledger, Ledger):
            try:
                new_ledger = Ledger.from_dict(new_ledger)

            except (KeyError, TypeError, ValueError) as e:
                return self._invalid(f"Invalid ledger snapshot: {e}", ErrorCode.INVALID_INPUT)

        return self._commit(new_ledger, detail="Ledger snapshot replaced.")

    # === helper methods ===

    def _commit(self, ledger: Ledger, detail: str, **data: Any) -> Response:
        """
        Makes `ledger` current, persists it, and builds the success response.

        Notes:
            - The new ledger is current before persistence is attempted, and stays current if persistence fails.
        """
        self._ledger = ledger
        persisted = self._persist(ledger)

        return Response.succeed(
            detail=detail,
            data={"ledger": ledger, "persisted": persisted, **data},
        )

    def _persist(self, ledger: Ledger) -> bool:
        if self._on_snapshot_changed is None:
            self._unsaved_changes = True
            return False

        try:
            result = self._on_snapshot_changed(ledger)

        except Exception as e:
            logger.warning("snapshot_write_failed err=%s", e)
            self._unsaved_changes = True
            return False

        if isinstance(result, Response) and not result.success:
            logger.warning("snapshot_write_failed err=%s", result.detail)
            self._unsaved_changes = True
            return False

        self._unsaved_changes = False
        return True

    def _not_found(self, kind: str, record_id: str) -> Response:
        return Response.fail(
            detail=f"No matching {kind} could be found: {record_id}.",
            error=ErrorCode.NOT_FOUND,
            status_code=404,
            data={"ledger": self._ledger},
        )

    def _invalid(self, detail: str, error: ErrorCode) -> Response:
        return Response.fail(detail=detail, error=error, data={"ledger": self._ledger})

    def _malformed(self, detail: str) -> Response:
        logger.warning("import_batch_rejected detail=%s", detail)
        return Response.fail(
            detail=f"Import failed: {detail}",
            error=ErrorCode.MALFORMED_IMPORT,
            data={"ledger": self._ledger},
        )

    def _unchanged(self, record: Course | GradedItem) -> Response:
        return Response.succeed(
            detail="The values provided match the current ones. No changes made.",
            data={"ledger": self._ledger, "record": record},
        )

    def _taken_item_ids(self) -> set[str]:
        taken = {i.id for i in self._ledger.graded_items}

        for record in self._ledger.trash:
            if isinstance(record.payload, CourseBundle):
                taken.update(i.id for i in record.payload.graded_items)
            else:
                taken.add(record.payload.id)

        return taken

    def _mint_unique(self, taken: set[str]) -> str:
        new_id = self._id_generator()

        while new_id in taken:
            new_id = self._id_generator()

        return new_id

    def _mint_course_id(self) -> str:
        # trashed courses keep their ids reserved so a restore is never ambiguous
        return self._mint_unique(self._ledger.known_course_ids())

    def _mint_item_id(self) -> str:
        return self._mint_unique(self._taken_item_ids())

    def _mint_trash_id(self) -> str:
        return self._mint_unique({t.id for t in self._ledger.trash})


def _swap(
    records: tuple[RecordType, ...], record_id: str, replacement: RecordType
) -> tuple[RecordType, ...]:
    return tuple(replacement if r.id == record_id else r for r in records)
