"""Tests for input validation and pagination helpers."""

import pytest

from peerreview.errors import ValidationError
from peerreview.utils.pagination import normalize_page
from peerreview.validation import (
    Validator,
    validate_paper_fields,
    validate_review_fields,
    validate_user_fields,
)

COMMENT = "Ten chars!"


class TestValidator:
    def test_collects_multiple_errors(self) -> None:
        v = Validator().required("a", "").length("b", "xy", 3, 5).one_of("c", "z", ("x", "y"))
        assert [e.field for e in v.errors] == ["a", "b", "c"]
        with pytest.raises(ValidationError) as exc:
            v.raise_if_errors()
        assert exc.value.code == "VALIDATION_ERROR"
        assert len(exc.value.details) == 3

    def test_no_errors_does_not_raise(self) -> None:
        Validator().required("a", "value").raise_if_errors()

    def test_length_uses_stripped_value(self) -> None:
        assert Validator().length("t", "   ab   ", 3, 10).has_errors


class TestReviewFields:
    @pytest.mark.parametrize("score", [1, 5, 10])
    def test_valid_scores(self, score) -> None:
        validate_review_fields(COMMENT, score, "accept")

    @pytest.mark.parametrize("score", [0, 11, 5.5, "7", True, None])
    def test_invalid_scores(self, score) -> None:
        with pytest.raises(ValidationError):
            validate_review_fields(COMMENT, score, "accept")

    @pytest.mark.parametrize("rec", ["accept", "reject", "revision"])
    def test_recommendations(self, rec) -> None:
        validate_review_fields(COMMENT, 5, rec)

    def test_comment_length_limits(self) -> None:
        with pytest.raises(ValidationError):
            validate_review_fields("x" * 9, 5, "accept")
        with pytest.raises(ValidationError):
            validate_review_fields("x" * 2001, 5, "accept")
        validate_review_fields("x" * 2000, 5, "accept")


class TestPaperFields:
    def test_title_bounds(self) -> None:
        abstract = "a" * 50
        validate_paper_fields("x" * 5, abstract, ["A"], [], "cs")
        validate_paper_fields("x" * 200, abstract, ["A"], [], "cs")
        with pytest.raises(ValidationError):
            validate_paper_fields("x" * 201, abstract, ["A"], [], "cs")

    def test_blank_authors_do_not_count(self) -> None:
        with pytest.raises(ValidationError):
            validate_paper_fields("Title", "a" * 50, ["  "], [], "cs")

    def test_partial_checks_only_supplied_fields(self) -> None:
        validate_paper_fields(category="", partial=True)
        with pytest.raises(ValidationError):
            validate_paper_fields(abstract="short", partial=True)


class TestUserFields:
    def test_valid_user(self) -> None:
        validate_user_fields("a@b.org", "Ada", "reviewer")

    @pytest.mark.parametrize(
        "email,name,role",
        [("not-an-email", "Ada", "researcher"), ("a@b.org", "A", "researcher"), ("a@b.org", "Ada", "editor")],
    )
    def test_invalid_user(self, email, name, role) -> None:
        with pytest.raises(ValidationError):
            validate_user_fields(email, name, role)


class TestNormalizePage:
    def test_defaults(self) -> None:
        page = normalize_page()
        assert (page.page, page.page_size, page.offset) == (1, 10, 0)

    def test_out_of_range_values_fall_back(self) -> None:
        page = normalize_page(0, 500)
        assert (page.page, page.page_size) == (1, 10)

    def test_offset(self) -> None:
        assert normalize_page(3, 20).offset == 40
