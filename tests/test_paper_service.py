"""Tests for the paper lifecycle."""

import pytest

from peerreview.errors import InvalidStateError, NotFoundError, UnauthorizedError, ValidationError
from peerreview.models.paper import PAPER_STATUSES, PaperUpdate
from peerreview.utils.pagination import Page

from tests.conftest import ABSTRACT


class TestCreatePaper:
    """Tests for paper creation."""

    def test_new_paper_starts_as_draft(self, make_paper, owner) -> None:
        paper = make_paper()
        assert paper.id is not None
        assert paper.status == "draft"
        assert paper.owner_id == owner.id

    def test_lists_survive_storage_round_trip(self, make_paper, paper_service) -> None:
        """Authors and keywords come back as ordered lists, not JSON text."""
        paper = make_paper(authors=["Z", "A", "M"], keywords=["k1", "k2"])
        stored = paper_service.get_paper(paper.id)
        assert stored.authors == ["Z", "A", "M"]
        assert stored.keywords == ["k1", "k2"]

    def test_strips_author_and_keyword_entries(self, make_paper) -> None:
        paper = make_paper(authors=[" A. Author ", ""], keywords=["  ", "nlp "])
        assert paper.authors == ["A. Author"]
        assert paper.keywords == ["nlp"]

    def test_rejects_short_title_and_abstract(self, paper_service, owner) -> None:
        with pytest.raises(ValidationError) as exc:
            paper_service.create_paper(owner.id, "Hi", "too short", ["A"], [], "cs")
        fields = {d["field"] for d in exc.value.details}
        assert fields == {"title", "abstract"}

    def test_requires_at_least_one_author(self, paper_service, owner) -> None:
        with pytest.raises(ValidationError) as exc:
            paper_service.create_paper(owner.id, "Valid title", ABSTRACT, [], [], "cs")
        assert exc.value.details == [{"field": "authors", "message": "must contain at least one entry"}]

    def test_unknown_owner_is_not_found(self, paper_service) -> None:
        with pytest.raises(NotFoundError):
            paper_service.create_paper(999, "Valid title", ABSTRACT, ["A"], [], "cs")


class TestSubmitPaper:
    """Tests for draft -> submitted."""

    def test_owner_submits_draft(self, make_paper, paper_service, owner) -> None:
        paper = make_paper()
        submitted = paper_service.submit_paper(paper.id, owner.id)
        assert submitted.status == "submitted"

    def test_non_owner_cannot_submit(self, make_paper, paper_service, reviewer) -> None:
        paper = make_paper()
        with pytest.raises(UnauthorizedError):
            paper_service.submit_paper(paper.id, reviewer.id)
        assert paper_service.get_paper(paper.id).status == "draft"

    def test_submitting_twice_is_invalid_state(self, make_paper, paper_service, owner) -> None:
        paper = make_paper(submit=True)
        with pytest.raises(InvalidStateError):
            paper_service.submit_paper(paper.id, owner.id)

    def test_cannot_submit_paper_under_review(self, make_paper, paper_service, paper_repo, owner) -> None:
        paper = make_paper(submit=True)
        paper_repo.transition_status(paper.id, "submitted", "under_review")
        with pytest.raises(InvalidStateError):
            paper_service.submit_paper(paper.id, owner.id)

    def test_ownership_checked_before_state(self, make_paper, paper_service, reviewer) -> None:
        paper = make_paper(submit=True)
        with pytest.raises(UnauthorizedError):
            paper_service.submit_paper(paper.id, reviewer.id)

    def test_missing_paper(self, paper_service, owner) -> None:
        with pytest.raises(NotFoundError):
            paper_service.submit_paper(42, owner.id)

    def test_losing_a_concurrent_submit(self, make_paper, paper_service, paper_repo, owner, monkeypatch) -> None:
        """Another request submits the paper between our read and our write."""
        paper = make_paper()
        transition = paper_repo.transition_status

        def submitted_elsewhere_first(paper_id, from_status, to_status):
            assert transition(paper_id, "draft", "submitted") is True
            return transition(paper_id, from_status, to_status)

        monkeypatch.setattr(paper_repo, "transition_status", submitted_elsewhere_first)
        with pytest.raises(InvalidStateError) as exc:
            paper_service.submit_paper(paper.id, owner.id)
        assert "submitted" in exc.value.message
        assert paper_service.get_paper(paper.id).status == "submitted"


class TestUpdatePaper:
    """Tests for partial updates."""

    def test_only_supplied_fields_change(self, make_paper, paper_service, owner) -> None:
        paper = make_paper()
        updated = paper_service.update_paper(paper.id, owner.id, PaperUpdate(title="A Better Title"))
        assert updated.title == "A Better Title"
        assert updated.abstract == paper.abstract
        assert updated.authors == paper.authors
        assert updated.category == paper.category

    def test_empty_values_leave_fields_unchanged(self, make_paper, paper_service, owner) -> None:
        """Blank strings and empty lists mean "leave as is", not "clear"."""
        paper = make_paper()
        changes = PaperUpdate(title="", abstract="   ", authors=[], keywords=[], category="")
        paper_service.update_paper(paper.id, owner.id, changes)
        stored = paper_service.get_paper(paper.id)
        assert stored.title == paper.title
        assert stored.abstract == paper.abstract
        assert stored.authors == paper.authors
        assert stored.keywords == ["review", "workflow"]
        assert stored.category == "cs.DL"

    def test_blank_list_entries_are_dropped(self, make_paper, paper_service, owner) -> None:
        paper = make_paper()
        changes = PaperUpdate(authors=[" C. Author ", "  "], keywords=["", "  "])
        updated = paper_service.update_paper(paper.id, owner.id, changes)
        assert updated.authors == ["C. Author"]
        assert paper_service.get_paper(paper.id).keywords == ["review", "workflow"]

    def test_update_never_touches_status(self, make_paper, paper_service, owner) -> None:
        paper = make_paper(submit=True)
        updated = paper_service.update_paper(paper.id, owner.id, PaperUpdate(category="cs.SE"))
        assert updated.status == "submitted"
        assert paper_service.get_paper(paper.id).status == "submitted"

    def test_supplied_fields_are_validated(self, make_paper, paper_service, owner) -> None:
        paper = make_paper()
        with pytest.raises(ValidationError):
            paper_service.update_paper(paper.id, owner.id, PaperUpdate(title="Hey"))
        with pytest.raises(ValidationError):
            paper_service.update_paper(paper.id, owner.id, PaperUpdate(abstract="Too short."))

    def test_non_owner_cannot_update(self, make_paper, paper_service, reviewer) -> None:
        paper = make_paper()
        with pytest.raises(UnauthorizedError):
            paper_service.update_paper(paper.id, reviewer.id, PaperUpdate(title="Hijacked title"))

    def test_empty_update_is_a_no_op(self, make_paper, paper_service, owner) -> None:
        paper = make_paper()
        assert paper_service.update_paper(paper.id, owner.id, PaperUpdate()).title == paper.title


class TestDeletePaper:
    def test_owner_deletes(self, make_paper, paper_service, owner) -> None:
        paper = make_paper()
        paper_service.delete_paper(paper.id, owner.id)
        with pytest.raises(NotFoundError):
            paper_service.get_paper(paper.id)

    def test_non_owner_cannot_delete(self, make_paper, paper_service, reviewer) -> None:
        paper = make_paper()
        with pytest.raises(UnauthorizedError):
            paper_service.delete_paper(paper.id, reviewer.id)
        assert paper_service.get_paper(paper.id).id == paper.id


class TestAdvanceOnFirstReview:
    def test_submitted_moves_to_under_review(self, make_paper, paper_service) -> None:
        paper = make_paper(submit=True)
        assert paper_service.advance_on_first_review(paper.id) is True
        assert paper_service.get_paper(paper.id).status == "under_review"

    def test_idempotent_when_already_under_review(self, make_paper, paper_service) -> None:
        paper = make_paper(submit=True)
        paper_service.advance_on_first_review(paper.id)
        assert paper_service.advance_on_first_review(paper.id) is False
        assert paper_service.get_paper(paper.id).status == "under_review"

    def test_draft_is_not_advanced(self, make_paper, paper_service) -> None:
        paper = make_paper()
        assert paper_service.advance_on_first_review(paper.id) is False
        assert paper_service.get_paper(paper.id).status == "draft"


class TestQueries:
    def test_list_by_status(self, make_paper, paper_service) -> None:
        make_paper()
        submitted = make_paper(submit=True, title="Submitted paper")
        result = paper_service.list_by_status("submitted", Page())
        assert [p.id for p in result] == [submitted.id]
        assert all(p.status in PAPER_STATUSES for p in paper_service.list_papers(Page()))

    def test_list_by_unknown_status_is_validation_error(self, paper_service) -> None:
        with pytest.raises(ValidationError):
            paper_service.list_by_status("rejected", Page())

    def test_search_matches_title_and_abstract_case_insensitively(self, make_paper, paper_service) -> None:
        a = make_paper(title="Graph Neural Networks")
        b = make_paper(title="Something else", abstract=ABSTRACT + " Uses graph sampling.")
        make_paper(title="Unrelated work")
        ids = {p.id for p in paper_service.search_papers("GRAPH", Page())}
        assert ids == {a.id, b.id}

    def test_search_treats_wildcards_literally(self, make_paper, paper_service) -> None:
        make_paper(title="Plain title here")
        assert paper_service.search_papers("%", Page()) == []

    def test_pagination(self, make_paper, paper_service, owner) -> None:
        for i in range(5):
            make_paper(title=f"Paper number {i}")
        first = paper_service.list_user_papers(owner.id, Page(page=1, page_size=2))
        third = paper_service.list_user_papers(owner.id, Page(page=3, page_size=2))
        assert len(first) == 2
        assert len(third) == 1
