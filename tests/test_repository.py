"""Tests for FlashcardRepository mutations and projections."""

from app.modules.flashcards.repository import FlashcardRepository
from app.modules.flashcards.results import ErrorKind
from app.modules.flashcards.store import FlashcardStore

PNG_URL = "data:image/png;base64,iVBORw0KGgo="
PDF_URL = "data:application/pdf;base64,JVBERi0xLjQ="


class TestCategories:
    def test_add_category_becomes_active(self, repo: FlashcardRepository) -> None:
        result = repo.add_category("Heaps")
        assert result.ok
        assert repo.categories[-1] == result.value
        assert repo.active_category_id == result.value.id

    def test_blank_names_are_rejected(self, repo: FlashcardRepository) -> None:
        before = len(repo.categories)
        for name in ("", "   "):
            result = repo.add_category(name)
            assert not result.ok
            assert result.kind is ErrorKind.VALIDATION
        assert len(repo.categories) == before
        assert repo.active_category_id == "1"

    def test_ids_are_unique(self, repo: FlashcardRepository) -> None:
        for i in range(50):
            category = repo.add_category(f"Topic {i}").value
            assert repo.add_flashcard(category.id, f"Question {i}", "answer").ok
        assert len({c.id for c in repo.categories}) == len(repo.categories)
        assert len({f.id for f in repo.flashcards}) == len(repo.flashcards)

    def test_rename(self, repo: FlashcardRepository) -> None:
        result = repo.rename_category("3", "Graph Theory")
        assert result.ok
        assert repo.get_category("3").name == "Graph Theory"

    def test_rename_rejects_blank_and_unknown(self, repo: FlashcardRepository) -> None:
        assert repo.rename_category("3", " ").kind is ErrorKind.VALIDATION
        assert repo.rename_category("missing", "X").kind is ErrorKind.NOT_FOUND
        assert repo.get_category("3").name == "Graphs"

    def test_delete_cascades_to_its_flashcards_only(self, repo: FlashcardRepository) -> None:
        strings_before = repo.list_by_category("2")

        result = repo.delete_category("1")

        assert result.ok
        assert repo.get_category("1") is None
        assert repo.list_by_category("1") == []
        assert all(f.category_id != "1" for f in repo.flashcards)
        assert repo.list_by_category("2") == strings_before

    def test_delete_active_falls_back_to_first_remaining(self, repo: FlashcardRepository) -> None:
        repo.select_category("3")
        repo.delete_category("3")
        assert repo.active_category_id == "1"

        for category in list(repo.categories):
            repo.delete_category(category.id)
        assert repo.active_category_id is None

    def test_delete_inactive_keeps_selection(self, repo: FlashcardRepository) -> None:
        repo.delete_category("4")
        assert repo.active_category_id == "1"

    def test_delete_unknown(self, repo: FlashcardRepository) -> None:
        assert repo.delete_category("missing").kind is ErrorKind.NOT_FOUND

    def test_select_unknown_keeps_selection(self, repo: FlashcardRepository) -> None:
        assert repo.select_category("missing").kind is ErrorKind.NOT_FOUND
        assert repo.active_category_id == "1"

    def test_delete_log_carries_category_id(self, repo: FlashcardRepository, caplog) -> None:
        with caplog.at_level("INFO", logger="app.modules.flashcards.repository"):
            repo.delete_category("2")

        record = next(r for r in caplog.records if r.name.endswith("repository"))
        assert record.category_id == "2"
        assert "2 flashcards" in record.getMessage()


class TestFlashcards:
    def test_add_and_list_in_insertion_order(self, repo: FlashcardRepository) -> None:
        first = repo.add_flashcard("3", "What is BFS?", "Level order traversal").value
        second = repo.add_flashcard("3", "What is DFS?", "Depth first traversal").value
        assert repo.list_by_category("3") == [first, second]

    def test_empty_question_is_a_noop(self, repo: FlashcardRepository) -> None:
        before = len(repo.flashcards)
        assert not repo.add_flashcard("1", "", "answer").ok
        assert not repo.add_flashcard("1", "   ", "answer").ok
        assert len(repo.flashcards) == before

    def test_category_must_be_set_and_exist(self, repo: FlashcardRepository) -> None:
        assert repo.add_flashcard(None, "Q", "A").error == "Select a category first"
        assert repo.add_flashcard("", "Q", "A").kind is ErrorKind.VALIDATION
        assert repo.add_flashcard("missing", "Q", "A").kind is ErrorKind.VALIDATION

    def test_answer_may_be_empty_only_with_attachment(self, repo: FlashcardRepository) -> None:
        assert not repo.add_flashcard("1", "Sketch it", "").ok
        with_image = repo.add_flashcard("1", "Sketch it", "", image=PNG_URL)
        with_pdf = repo.add_flashcard("1", "Read it", "", pdf=PDF_URL)
        assert with_image.ok and with_image.value.answer_image == PNG_URL
        assert with_pdf.ok and with_pdf.value.answer_pdf == PDF_URL

    def test_attachment_kind_is_checked(self, repo: FlashcardRepository) -> None:
        assert not repo.add_flashcard("1", "Q", "A", image=PDF_URL).ok
        assert not repo.add_flashcard("1", "Q", "A", pdf=PNG_URL).ok
        assert not repo.add_flashcard("1", "Q", "A", image="https://example.com/x.png").ok

    def test_update_replaces_fields(self, repo: FlashcardRepository) -> None:
        result = repo.update_flashcard(
            "f1", question="Define array", answer="Indexed collection", category_id="2"
        )
        assert result.ok
        card = repo.get_flashcard("f1")
        assert (card.question, card.answer, card.category_id) == (
            "Define array",
            "Indexed collection",
            "2",
        )
        assert [f.id for f in repo.flashcards][0] == "f1"

    def test_update_can_clear_attachment(self, repo: FlashcardRepository) -> None:
        card = repo.add_flashcard("1", "Q", "A", image=PNG_URL).value
        assert repo.update_flashcard(card.id, answer_image=None).ok
        assert repo.get_flashcard(card.id).answer_image is None

    def test_update_validation(self, repo: FlashcardRepository) -> None:
        assert repo.update_flashcard("missing", question="Q").kind is ErrorKind.NOT_FOUND
        assert repo.update_flashcard("f1", question=" ").kind is ErrorKind.VALIDATION
        assert repo.update_flashcard("f1", question=None).kind is ErrorKind.VALIDATION
        assert repo.update_flashcard("f1", category_id="missing").kind is ErrorKind.VALIDATION
        assert repo.update_flashcard("f1", is_flipped=True).kind is ErrorKind.VALIDATION
        assert repo.get_flashcard("f1").question == "What is an array?"

    def test_delete_clears_reveal_marker(self, repo: FlashcardRepository) -> None:
        assert repo.toggle_reveal("f1").value is True
        assert repo.delete_flashcard("f1").ok
        assert repo.get_flashcard("f1") is None
        assert not repo.is_revealed("f1")
        assert repo.delete_flashcard("f1").kind is ErrorKind.NOT_FOUND

    def test_category_delete_clears_reveal_markers(self, repo: FlashcardRepository) -> None:
        repo.toggle_reveal("f3")
        repo.delete_category("2")
        assert not repo.is_revealed("f3")

    def test_toggle_reveal(self, repo: FlashcardRepository) -> None:
        assert repo.toggle_reveal("f2").value is True
        assert repo.is_revealed("f2")
        assert repo.toggle_reveal("f2").value is False
        assert repo.toggle_reveal("missing").kind is ErrorKind.NOT_FOUND


def test_mutations_are_persisted(store: FlashcardStore, repo: FlashcardRepository) -> None:
    category = repo.add_category("Heaps").value
    card = repo.add_flashcard(category.id, "Heap push cost?", "O(log n)").value
    repo.delete_category("4")
    repo.toggle_reveal(card.id)

    reloaded = FlashcardRepository(store)
    assert reloaded.categories == repo.categories
    assert reloaded.flashcards == repo.flashcards
    assert not reloaded.is_revealed(card.id)
