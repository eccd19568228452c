"""AI sync importer: fetch a generated batch and merge it into the repository.

State machine::

    IDLE -> IMPORTING -> IDLE      (success)
    IDLE -> IMPORTING -> FAILED    (fetch/parse/storage failure or cancellation)
    FAILED -> IMPORTING            (retry) or FAILED -> IDLE via reset()

A request arriving while IMPORTING is rejected, not queued. The merge runs
after the network await against the repository's current collections, so a
category deleted mid-flight is never referenced by a dangling id; if the
batch still needs it, it is created again by name.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from app.core.logging import get_logger
from app.modules.flashcards.generator import generate_sync_batch, parse_sync_payload
from app.modules.flashcards.merge import merge_candidates
from app.modules.flashcards.repository import FlashcardRepository

logger = get_logger(__name__)

FetchBatch = Callable[[], Awaitable[Any]]

SYNC_FAILED_MESSAGE = "Live sync failed. Ensure your Gemini API Key is active."
SYNC_BUSY_MESSAGE = "A sync is already in progress."


class SyncState(enum.Enum):
    IDLE = "idle"
    IMPORTING = "importing"
    FAILED = "failed"


class SyncStatus(enum.Enum):
    COMPLETED = "completed"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass(frozen=True)
class SyncReport:
    status: SyncStatus
    imported: int = 0
    skipped: int = 0
    categories_created: int = 0
    active_category_id: Optional[str] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is SyncStatus.COMPLETED


class SyncImporter:
    def __init__(
        self,
        repository: FlashcardRepository,
        fetch: FetchBatch = generate_sync_batch,
    ) -> None:
        self.repository = repository
        self._fetch = fetch
        self.state = SyncState.IDLE
        self.last_error: Optional[str] = None

    @property
    def busy(self) -> bool:
        return self.state is SyncState.IMPORTING

    def reset(self) -> None:
        if self.state is SyncState.FAILED:
            self.state = SyncState.IDLE
            self.last_error = None

    def _log_extra(self) -> dict[str, str]:
        return {"sync_state": self.state.value}

    async def sync(self) -> SyncReport:
        if self.busy:
            logger.warning(
                "Sync requested while another sync is in progress", extra=self._log_extra()
            )
            return SyncReport(status=SyncStatus.REJECTED, message=SYNC_BUSY_MESSAGE)

        self.state = SyncState.IMPORTING
        logger.info("Starting AI sync", extra=self._log_extra())
        try:
            candidates = parse_sync_payload(await self._fetch())
            outcome = merge_candidates(
                self.repository.categories, self.repository.flashcards, candidates
            )
            self.repository.commit_import(outcome)
        except Exception as e:  # noqa: BLE001
            self.state = SyncState.FAILED
            self.last_error = str(e)
            logger.error(f"Sync error: {type(e).__name__}: {e}", extra=self._log_extra())
            return SyncReport(status=SyncStatus.FAILED, message=SYNC_FAILED_MESSAGE)
        else:
            self.state = SyncState.IDLE
            self.last_error = None
        finally:
            # cancellation and interrupts skip both branches above
            if self.state is SyncState.IMPORTING:
                self.state = SyncState.FAILED
                self.last_error = "Sync interrupted"

        logger.info(
            f"Sync finished: {len(outcome.imported)} imported, {outcome.skipped} skipped, "
            f"{len(outcome.created_categories)} categories created",
            extra=self._log_extra(),
        )
        return SyncReport(
            status=SyncStatus.COMPLETED,
            imported=len(outcome.imported),
            skipped=outcome.skipped,
            categories_created=len(outcome.created_categories),
            active_category_id=self.repository.active_category_id,
        )
