# core/snapshot_store.py

"""
JSON file persistence for ledger snapshots.

`JsonSnapshotStore` is the snapshot collaborator handed to `LedgerStore`:
    - `load_snapshot()` is called once at startup and returns the saved dictionary, or None.
    - `on_snapshot_changed(ledger)` is called after every mutation with the complete new ledger.

It also provides full-ledger export and import for backups, using the same serialized form.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any

import core.config as config
from core.response import ErrorCode, Response
from models.ledger import Ledger

logger = logging.getLogger(__name__)


class JsonSnapshotStore:

    def __init__(self, dir_path: str | None = None, filename: str = config.SNAPSHOT_FILENAME):
        self._dir_path = dir_path or config.get_data_dir()
        self._filename = filename

    # === properties ===

    @property
    def dir_path(self) -> str:
        return self._dir_path

    @property
    def path(self) -> str:
        return os.path.join(self._dir_path, self._filename)

    # === snapshot collaborator ===

    def load_snapshot(self) -> dict[str, Any] | None:
        """
        Reads the saved snapshot.

        Returns:
            The deserialized snapshot dictionary, or None if no snapshot has been saved yet.

        Raises:
            json.JSONDecodeError: If the file exists but is not valid JSON.
            OSError: If the file exists but cannot be read.

        Notes:
            - `LedgerStore.from_snapshot()` treats both exceptions as a malformed snapshot and seeds a default ledger.
        """
        if not os.path.exists(self.path):
            return None

        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)

    def on_snapshot_changed(self, ledger: Ledger) -> Response:
        """
        Writes the ledger to the snapshot file, replacing any previous snapshot.

        Returns:
            Response: Success, or `ErrorCode.PERSISTENCE_FAILED` if the ledger could not be serialized or written.
            This method does not raise.
        """
        return self.write(self.path, ledger)

    # === export and import ===

    def export_to(self, path: str, ledger: Ledger) -> Response:
        """Writes a full backup of `ledger` to `path`."""
        return self.write(path, ledger)

    def import_from(self, path: str) -> Response:
        """
        Reads a full backup written by `export_to()`.

        Args:
            path (str): The backup file path.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the file was read and deserialized into a `Ledger`.
                    - False for unreadable files, invalid JSON, or invalid records.
                - error (ErrorCode | str | None):
                    - `ErrorCode.INVALID_INPUT` if the file is not valid JSON.
                    - `ErrorCode.INVALID_FIELD_VALUE` if a record value is invalid.
                    - `ErrorCode.MISSING_REQUIRED_FIELD` if a record is missing a field.
                    - `ErrorCode.INTERNAL_ERROR` if the file cannot be read.
                - data (dict): Payload with the following keys:
                    - On success:
                        - "ledger" (Ledger): The restored ledger.

        Notes:
            - This method does not change any store. Pass the ledger to `LedgerStore.replace_snapshot()`.
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                ledger = Ledger.from_dict(json.load(f))

        except json.JSONDecodeError as e:
            return Response.fail(
                detail=f"Failed to parse JSON data: {e}",
                error=ErrorCode.INVALID_INPUT,
            )

        except ValueError as e:
            return Response.fail(
                detail=f"Invalid field value: {e}",
                error=ErrorCode.INVALID_FIELD_VALUE,
            )

        except (KeyError, TypeError) as e:
            return Response.fail(
                detail=f"Missing required field: {e}",
                error=ErrorCode.MISSING_REQUIRED_FIELD,
            )

        except OSError as e:
            return Response.fail(
                detail=f"Failed to read backup from disk: {e}",
                error=ErrorCode.INTERNAL_ERROR,
            )

        else:
            return Response.succeed(data={"ledger": ledger})

    # === helper methods ===

    @staticmethod
    def write(path: str, ledger: Ledger) -> Response:
        """
        Serializes `ledger` to JSON and writes it to `path`.

        Notes:
            - This intentionally overwrites existing data.
            - Parent directories are created if needed.
        """
        try:
            parent = os.path.dirname(path)
            if parent:
                os.makedirs(parent, exist_ok=True)

            with open(path, "w", encoding="utf-8") as f:
                json.dump(ledger.to_dict(), f, indent=2, sort_keys=True)

        except (TypeError, ValueError) as e:
            logger.warning("snapshot_serialize_failed path=%s err=%s", path, e)
            return Response.fail(
                detail=f"Object not JSON serializable: {e}",
                error=ErrorCode.PERSISTENCE_FAILED,
            )

        except OSError as e:
            logger.warning("snapshot_write_failed path=%s err=%s", path, e)
            return Response.fail(
                detail=f"Failed to write data to disk: {e}",
                error=ErrorCode.PERSISTENCE_FAILED,
            )

        else:
            logger.debug("snapshot_written path=%s", path)
            return Response.succeed(detail="Ledger successfully saved to disk.")
