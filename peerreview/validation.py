"""Input validation with field-level error reporting.

Usage::

    v = Validator()
    v.length("title", title, 5, 200).required("category", category)
    v.raise_if_errors()
"""

import re
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from peerreview.errors import ValidationError
from peerreview.models.paper import PAPER_STATUSES
from peerreview.models.review import RECOMMENDATIONS
from peerreview.models.user import USER_ROLES

TITLE_MIN, TITLE_MAX = 5, 200
ABSTRACT_MIN, ABSTRACT_MAX = 50, 2000
COMMENT_MIN, COMMENT_MAX = 10, 2000
NAME_MIN, NAME_MAX = 2, 100
SCORE_MIN, SCORE_MAX = 1, 10

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass
class FieldError:
    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class Validator:
    """Collects field errors; chainable like a builder."""

    def __init__(self):
        self.errors: list[FieldError] = []

    def add_error(self, field: str, message: str) -> "Validator":
        self.errors.append(FieldError(field, message))
        return self

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def required(self, field: str, value: Optional[str]) -> "Validator":
        if value is None or not str(value).strip():
            self.add_error(field, "is required")
        return self

    def length(self, field: str, value: Optional[str], min_len: int, max_len: int) -> "Validator":
        if value is None:
            return self.add_error(field, "is required")
        if not isinstance(value, str):
            return self.add_error(field, "must be a string")
        n = len(value.strip())
        if n < min_len:
            self.add_error(field, f"must be at least {min_len} characters long")
        elif n > max_len:
            self.add_error(field, f"must be at most {max_len} characters long")
        return self

    def non_empty_list(self, field: str, values: Optional[Sequence[str]]) -> "Validator":
        if not values or not any(str(v).strip() for v in values):
            self.add_error(field, "must contain at least one entry")
        return self

    def string_list(self, field: str, values: Optional[Sequence[Any]]) -> "Validator":
        if values is not None and not all(isinstance(v, str) for v in values):
            self.add_error(field, "must be a list of strings")
        return self

    def int_range(self, field: str, value: Any, min_val: int, max_val: int) -> "Validator":
        # bool is an int subclass; reject it explicitly
        if isinstance(value, bool) or not isinstance(value, int):
            return self.add_error(field, "must be an integer")
        if value < min_val or value > max_val:
            self.add_error(field, f"must be between {min_val} and {max_val}")
        return self

    def one_of(self, field: str, value: Optional[str], choices: Sequence[str]) -> "Validator":
        if value not in choices:
            self.add_error(field, f"must be one of: {', '.join(choices)}")
        return self

    def email(self, field: str, value: Optional[str]) -> "Validator":
        if not value or not _EMAIL_RE.match(value):
            self.add_error(field, "must be a valid email address")
        return self

    def raise_if_errors(self, message: str = "Validation failed") -> None:
        if self.errors:
            raise ValidationError(message, details=[e.to_dict() for e in self.errors])


# ---------------------------------------------------------------------------
# Entity-level helpers
# ---------------------------------------------------------------------------

def validate_paper_fields(
    title: Optional[str] = None,
    abstract: Optional[str] = None,
    authors: Optional[Sequence[str]] = None,
    keywords: Optional[Sequence[str]] = None,
    category: Optional[str] = None,
    partial: bool = False,
) -> None:
    """Validate paper input.

    With ``partial=True`` only the supplied (non-``None``) fields are
    checked, which is how updates are validated.
    """
    v = Validator()
    if not partial or title is not None:
        v.length("title", title, TITLE_MIN, TITLE_MAX)
    if not partial or abstract is not None:
        v.length("abstract", abstract, ABSTRACT_MIN, ABSTRACT_MAX)
    if not partial or authors is not None:
        v.string_list("authors", authors).non_empty_list("authors", authors)
    v.string_list("keywords", keywords)
    if not partial:
        v.required("category", category)
    v.raise_if_errors()


def validate_review_fields(comment: Optional[str], score: Any, recommendation: Optional[str]) -> None:
    v = Validator()
    v.length("comment", comment, COMMENT_MIN, COMMENT_MAX)
    v.int_range("score", score, SCORE_MIN, SCORE_MAX)
    v.one_of("recommendation", recommendation, RECOMMENDATIONS)
    v.raise_if_errors()


def validate_user_fields(email: Optional[str], name: Optional[str], role: Optional[str]) -> None:
    v = Validator()
    v.email("email", email)
    v.length("name", name, NAME_MIN, NAME_MAX)
    v.one_of("role", role, USER_ROLES)
    v.raise_if_errors()


def validate_status(status: str) -> None:
    Validator().one_of("status", status, PAPER_STATUSES).raise_if_errors("Invalid status filter")
