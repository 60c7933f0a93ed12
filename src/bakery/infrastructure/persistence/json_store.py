"""JSON-file storage shared by every repository.

One file per collection (``<data_dir>/<collection>.json``) holding a list of
records. The store doubles as the UnitOfWork: inside a transaction writes
are buffered per collection and only reach the files on commit, so a
rollback leaves the files exactly as they were.
"""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path

import structlog

from bakery.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


class RollbackOnlyError(RuntimeError):
    """An inner unit of work failed but the outer one tried to commit."""


class JsonStore(UnitOfWork):

    def __init__(self, data_dir: Path) -> None:
        self._data_dir = Path(data_dir)
        self._pending: dict[str, list[dict]] | None = None
        self._depth = 0
        self._rollback_only = False

    # --- Record access --------------------------------------------------------

    def read(self, collection: str) -> list[dict]:
        """Return a private copy of every record in ``collection``.

        Inside a transaction this includes the writes buffered so far.
        """
        if self._pending is not None and collection in self._pending:
            return copy.deepcopy(self._pending[collection])
        return self._read_file(collection)

    def write(self, collection: str, records: list[dict]) -> None:
        if self._pending is not None:
            self._pending[collection] = copy.deepcopy(records)
        else:
            self._write_file(collection, records)

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    # --- UnitOfWork interface -------------------------------------------------

    def begin(self) -> None:
        if self._depth == 0:
            self._pending = {}
            self._rollback_only = False
        self._depth += 1

    def commit(self) -> None:
        self._depth -= 1
        if self._depth > 0:
            return
        pending, self._pending = self._pending or {}, None
        if self._rollback_only:
            logger.debug("Discarding rollback-only transaction", collections=sorted(pending))
            raise RollbackOnlyError("Transaction was marked rollback-only by a nested unit of work")
        for collection, records in pending.items():
            self._write_file(collection, records)
        logger.debug("Transaction committed", collections=sorted(pending))

    def rollback(self) -> None:
        self._depth -= 1
        if self._depth > 0:
            self._rollback_only = True
            return
        discarded = sorted(self._pending or {})
        self._pending = None
        logger.debug("Transaction rolled back", collections=discarded)

    # --- File helpers ---------------------------------------------------------

    def _path(self, collection: str) -> Path:
        return self._data_dir / f"{collection}.json"

    def _read_file(self, collection: str) -> list[dict]:
        path = self._path(collection)
        if not path.exists():
            return []
        return json.loads(path.read_text(encoding="utf-8"))

    def _write_file(self, collection: str, records: list[dict]) -> None:
        path = self._path(collection)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")
        os.replace(tmp, path)
