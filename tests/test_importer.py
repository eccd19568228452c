"""Tests for the AI sync importer state machine."""

import asyncio

import pytest

from app.core.config import settings
from app.modules.flashcards import FlashcardRepository, SyncImporter, SyncState, SyncStatus
from app.modules.flashcards.exceptions import MissingCredentialError, SyncPayloadError
from app.modules.flashcards.generator import generate_sync_batch, parse_sync_payload
from app.modules.flashcards.importer import SYNC_FAILED_MESSAGE
from app.modules.flashcards.store import FlashcardStore

from conftest import batch_fetch

BATCH = [
    {"category": "Arrays", "question": "Q1", "short_answer": "A1"},
    {"category": "Arrays", "question": "Q1", "short_answer": "A2"},
    {"category": "Linked List", "question": "Reverse a list?", "short_answer": "Three pointers"},
]


class TestSync:
    async def test_successful_sync_commits_both_collections(
        self, store: FlashcardStore, repo: FlashcardRepository
    ) -> None:
        importer = SyncImporter(repo, batch_fetch(BATCH))

        report = await importer.sync()

        assert report.ok
        assert (report.imported, report.skipped, report.categories_created) == (2, 1, 1)
        assert importer.state is SyncState.IDLE
        q1 = [f for f in repo.flashcards if f.question == "Q1"]
        assert [(f.answer, f.category_id) for f in q1] == [("A1", "1")]
        assert report.active_category_id == "1" == repo.active_category_id

        reloaded = FlashcardRepository(store)
        assert reloaded.flashcards == repo.flashcards
        assert [c.name for c in reloaded.categories][-1] == "Linked List"

    async def test_second_identical_sync_adds_nothing(self, repo: FlashcardRepository) -> None:
        importer = SyncImporter(repo, batch_fetch(BATCH, BATCH))
        await importer.sync()
        after_first = repo.flashcards

        report = await importer.sync()

        assert report.imported == 0
        assert repo.flashcards == after_first

    @pytest.mark.parametrize(
        "payload",
        [
            [{"category": "Arrays", "question": "Q"}],
            [{"category": "Arrays", "question": "Q", "short_answer": "A", "extra": "x"}],
            [{"category": "Arrays", "question": 3, "short_answer": "A"}],
            '[{"category": "Arrays", "question": "Q", "short_answer": "A"}',
            {"category": "Arrays", "question": "Q", "short_answer": "A"},
            [{"category": "  ", "question": "", "short_answer": ""}],
            [{"category": "Arrays", "question": "   ", "short_answer": "A"}],
            [{"category": "Arrays", "question": "Q", "short_answer": "\t"}],
        ],
    )
    async def test_malformed_payload_fails_without_changes(
        self, repo: FlashcardRepository, payload
    ) -> None:
        before = (repo.categories, repo.flashcards, repo.active_category_id)
        importer = SyncImporter(repo, batch_fetch(payload))

        report = await importer.sync()

        assert report.status is SyncStatus.FAILED
        assert report.message == SYNC_FAILED_MESSAGE
        assert importer.state is SyncState.FAILED
        assert (repo.categories, repo.flashcards, repo.active_category_id) == before

    async def test_fetch_error_is_reported_and_retry_allowed(
        self, repo: FlashcardRepository
    ) -> None:
        calls = {"n": 0}

        async def flaky():
            calls["n"] += 1
            if calls["n"] == 1:
                raise ConnectionError("network down")
            return BATCH

        importer = SyncImporter(repo, flaky)
        failed = await importer.sync()
        assert not failed.ok
        assert "network down" in importer.last_error

        retried = await importer.sync()
        assert retried.ok
        assert importer.state is SyncState.IDLE
        assert importer.last_error is None

    async def test_reset_returns_failed_to_idle(self, repo: FlashcardRepository) -> None:
        async def broken():
            raise MissingCredentialError("no key")

        importer = SyncImporter(repo, broken)
        await importer.sync()
        assert importer.state is SyncState.FAILED
        importer.reset()
        assert importer.state is SyncState.IDLE

    async def test_concurrent_request_is_rejected(self, repo: FlashcardRepository) -> None:
        release = asyncio.Event()

        async def slow():
            await release.wait()
            return BATCH

        importer = SyncImporter(repo, slow)
        first = asyncio.create_task(importer.sync())
        await asyncio.sleep(0)
        assert importer.busy

        rejected = await importer.sync()
        assert rejected.status is SyncStatus.REJECTED
        assert rejected.imported == 0

        release.set()
        assert (await first).ok
        assert not importer.busy

    async def test_category_deleted_mid_flight_is_recreated(
        self, repo: FlashcardRepository
    ) -> None:
        release = asyncio.Event()

        async def slow():
            await release.wait()
            return [{"category": "Arrays", "question": "Two sum?", "short_answer": "Hashing"}]

        importer = SyncImporter(repo, slow)
        task = asyncio.create_task(importer.sync())
        await asyncio.sleep(0)
        repo.delete_category("1")
        release.set()
        report = await task

        assert report.ok and report.categories_created == 1
        card = next(f for f in repo.flashcards if f.question == "Two sum?")
        category = repo.get_category(card.category_id)
        assert category is not None and category.name == "Arrays"
        assert category.id != "1"

    async def test_cancelled_sync_does_not_stay_busy(
        self, repo: FlashcardRepository
    ) -> None:
        before = (repo.categories, repo.flashcards)
        started = asyncio.Event()
        calls = {"n": 0}

        async def hang_then_answer():
            calls["n"] += 1
            if calls["n"] == 1:
                started.set()
                await asyncio.Event().wait()
            return BATCH

        importer = SyncImporter(repo, hang_then_answer)
        task = asyncio.create_task(importer.sync())
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert importer.state is SyncState.FAILED
        assert not importer.busy
        assert (repo.categories, repo.flashcards) == before

        report = await importer.sync()
        assert report.ok
        assert importer.state is SyncState.IDLE

    async def test_log_records_carry_sync_state(
        self, repo: FlashcardRepository, caplog
    ) -> None:
        importer = SyncImporter(repo, batch_fetch(BATCH))
        with caplog.at_level("INFO", logger="app.modules.flashcards.importer"):
            await importer.sync()

        states = [r.sync_state for r in caplog.records if r.name.endswith("importer")]
        assert states == ["importing", "idle"]


class TestPayload:
    def test_parse_json_text(self) -> None:
        items = parse_sync_payload(
            '[{"category": "Trees", "question": "Height?", "short_answer": "DFS"}]'
        )
        assert items[0].category == "Trees"
        assert items[0].short_answer == "DFS"

    def test_parse_rejects_missing_fields(self) -> None:
        with pytest.raises(SyncPayloadError):
            parse_sync_payload([{"category": "Trees"}])

    def test_parse_rejects_blank_fields_but_keeps_spacing(self) -> None:
        with pytest.raises(SyncPayloadError):
            parse_sync_payload([{"category": " ", "question": "Q", "short_answer": "A"}])
        items = parse_sync_payload(
            [{"category": "Trees", "question": " Height? ", "short_answer": "DFS"}]
        )
        assert items[0].question == " Height? "

    async def test_missing_key_fails_before_any_request(self, monkeypatch) -> None:
        monkeypatch.setattr(settings, "gemini_api_key", None)
        with pytest.raises(MissingCredentialError):
            await generate_sync_batch()
