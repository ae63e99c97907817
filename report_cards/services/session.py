from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from ..config.loader import default_config
from ..models.config_models import GradingConfig
from ..models.grades import GradeTable, RawTable
from .orchestrator import run

"""Load session for interactive use (re-render on class/semester change).

Each load fetches a table and runs the pipeline. Loads may overlap; every
load that completes replaces ``current``, so the last one to finish wins
whatever order they were started in. The pipeline itself is synchronous, so
cancellation only ever applies to the pending fetch.
"""

logger = logging.getLogger(__name__)


class TabularSource(Protocol):
    async def fetch(self) -> RawTable: ...


class ReportCardSession:
    def __init__(self, config: GradingConfig | None = None) -> None:
        self.config = config or default_config().grading
        self.current: GradeTable | None = None
        self._pending: set[asyncio.Task[RawTable]] = set()

    async def load(self, source: TabularSource) -> GradeTable:
        """Fetch ``source``, run the grade pipeline on it and keep the result.

        Raises:
            TransportError: the source could not be fetched
            MalformedTableError: the table is not a usable grade export
            asyncio.CancelledError: the fetch was cancelled
        """
        task = asyncio.ensure_future(source.fetch())
        self._pending.add(task)
        try:
            raw = await task
        finally:
            self._pending.discard(task)

        table = run(raw, self.config, source=getattr(source, "location", None))
        if self._pending:
            logger.debug("load finished with %d fetch(es) still pending", len(self._pending))
        self.current = table
        return table

    def cancel_pending(self) -> int:
        """Cancel every in-flight fetch. Returns how many were cancelled."""
        cancelled = 0
        for task in list(self._pending):
            if task.cancel():
                cancelled += 1
        return cancelled
