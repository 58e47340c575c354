"""Repositories for users, papers and reviews on SQLite."""

import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional, Union

from peerreview.errors import ConflictError, InternalError, NotFoundError
from peerreview.models.paper import REVIEWABLE_STATUSES, Paper
from peerreview.models.review import Review, ReviewMetadata
from peerreview.models.user import User

logger = logging.getLogger(__name__)

_PAPER_COLUMNS = (
    "id, title, abstract, authors, keywords, category, status, owner_id, created_at, updated_at"
)
_REVIEW_COLUMNS = (
    "id, paper_id, reviewer_id, score, comment, recommendation, metadata, created_at, updated_at"
)
_USER_COLUMNS = "id, email, name, role, institution, created_at, updated_at"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class Database:
    """Explicit handle to the SQLite database file.

    Constructed once by the application and passed into every repository.
    Each operation opens its own short-lived connection, so one handle can
    be shared safely across request threads.
    """

    def __init__(self, db_path: Union[str, Path]):
        """Initialize the handle and create the schema if needed.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.init_schema()

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Context manager for database connections.

        Raises:
            InternalError: Wrapping any ``sqlite3.Error`` that escapes the block
        """
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise InternalError(f"Cannot open database {self.db_path}") from e
        conn.row_factory = sqlite3.Row
        try:
            conn.execute("PRAGMA foreign_keys = ON")
            yield conn
        except sqlite3.Error as e:
            raise InternalError("Database operation failed") from e
        finally:
            conn.close()

    def init_schema(self) -> None:
        """Initialize database schema."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    email TEXT NOT NULL UNIQUE,
                    name TEXT NOT NULL,
                    role TEXT NOT NULL DEFAULT 'researcher',
                    institution TEXT NOT NULL DEFAULT '',
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
            """)
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS papers (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    abstract TEXT NOT NULL DEFAULT '',
                    authors TEXT NOT NULL DEFAULT '[]',
                    keywords TEXT NOT NULL DEFAULT '[]',
                    category TEXT NOT NULL DEFAULT '',
                    status TEXT NOT NULL DEFAULT 'draft'
                        CHECK (status IN ('draft', 'submitted', 'under_review', 'published')),
                    owner_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
            """)
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS reviews (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    paper_id INTEGER NOT NULL REFERENCES papers(id) ON DELETE CASCADE,
                    reviewer_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                    score INTEGER NOT NULL CHECK (score >= 1 AND score <= 10),
                    comment TEXT NOT NULL,
                    recommendation TEXT NOT NULL
                        CHECK (recommendation IN ('accept', 'reject', 'revision')),
                    metadata TEXT NOT NULL DEFAULT '{}',
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    UNIQUE(paper_id, reviewer_id)
                );
            """)
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_papers_status ON papers(status);")
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_papers_owner ON papers(owner_id);")
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_reviews_reviewer ON reviews(reviewer_id);")
            conn.commit()


# ---------------------------------------------------------------------------
# Row mappers (JSON list/metadata columns decoded here only)
# ---------------------------------------------------------------------------

def _row_to_user(row: sqlite3.Row) -> User:
    return User(
        id=row["id"],
        email=row["email"],
        name=row["name"],
        role=row["role"],
        institution=row["institution"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _row_to_paper(row: sqlite3.Row) -> Paper:
    return Paper(
        id=row["id"],
        title=row["title"],
        abstract=row["abstract"],
        authors=json.loads(row["authors"] or "[]"),
        keywords=json.loads(row["keywords"] or "[]"),
        category=row["category"],
        status=row["status"],
        owner_id=row["owner_id"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _row_to_review(row: sqlite3.Row) -> Review:
    return Review(
        id=row["id"],
        paper_id=row["paper_id"],
        reviewer_id=row["reviewer_id"],
        score=row["score"],
        comment=row["comment"],
        recommendation=row["recommendation"],
        metadata=ReviewMetadata.from_dict(json.loads(row["metadata"] or "{}")),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class UserRepository:
    """Repository for user identity records."""

    def __init__(self, db: Database):
        self.db = db

    def create(self, user: User) -> User:
        """Insert a user.

        Raises:
            ConflictError: If the email is already registered
        """
        now = _now()
        with self.db.connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    """
                    INSERT INTO users (email, name, role, institution, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (user.email, user.name, user.role, user.institution, now, now),
                )
            except sqlite3.IntegrityError as e:
                raise ConflictError(f"Email {user.email} is already registered") from e
            conn.commit()
            user.id = cursor.lastrowid
        user.created_at = user.updated_at = now
        return user

    def find_by_id(self, user_id: int) -> Optional[User]:
        with self.db.connection() as conn:
            row = conn.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE id = ?", (user_id,)
            ).fetchone()
        return _row_to_user(row) if row else None

    def find_by_email(self, email: str) -> Optional[User]:
        with self.db.connection() as conn:
            row = conn.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE email = ?", (email,)
            ).fetchone()
        return _row_to_user(row) if row else None


class PaperRepository:
    """Repository for paper CRUD operations using SQLite."""

    def __init__(self, db: Database):
        self.db = db

    def create(self, paper: Paper) -> Paper:
        """Insert a new paper and set its id and timestamps.

        Raises:
            NotFoundError: If the owner does not exist
        """
        now = _now()
        with self.db.connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    """
                    INSERT INTO papers
                    (title, abstract, authors, keywords, category, status, owner_id, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        paper.title,
                        paper.abstract,
                        json.dumps(paper.authors),
                        json.dumps(paper.keywords),
                        paper.category,
                        paper.status,
                        paper.owner_id,
                        now,
                        now,
                    ),
                )
            except sqlite3.IntegrityError as e:
                raise NotFoundError.for_resource("User", paper.owner_id) from e
            conn.commit()
            paper.id = cursor.lastrowid
        paper.created_at = paper.updated_at = now
        return paper

    def find_by_id(self, paper_id: int, with_relations: bool = False) -> Optional[Paper]:
        """Find a single paper by ID.

        Args:
            paper_id: Paper ID to find
            with_relations: Also load the owner and all reviews

        Returns:
            Paper object if found, None otherwise
        """
        with self.db.connection() as conn:
            row = conn.execute(
                f"SELECT {_PAPER_COLUMNS} FROM papers WHERE id = ?", (paper_id,)
            ).fetchone()
            if row is None:
                return None
            paper = _row_to_paper(row)
            if with_relations:
                owner_row = conn.execute(
                    f"SELECT {_USER_COLUMNS} FROM users WHERE id = ?", (paper.owner_id,)
                ).fetchone()
                paper.owner = _row_to_user(owner_row) if owner_row else None
                review_rows = conn.execute(
                    f"SELECT {_REVIEW_COLUMNS} FROM reviews WHERE paper_id = ? ORDER BY id ASC",
                    (paper_id,),
                ).fetchall()
                paper.reviews = [_row_to_review(r) for r in review_rows]
        return paper

    def update(self, paper: Paper) -> Paper:
        """Persist editable fields. Status is only changed by ``transition_status``."""
        now = _now()
        with self.db.connection() as conn:
            conn.execute(
                """
                UPDATE papers
                SET title = ?, abstract = ?, authors = ?, keywords = ?, category = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    paper.title,
                    paper.abstract,
                    json.dumps(paper.authors),
                    json.dumps(paper.keywords),
                    paper.category,
                    now,
                    paper.id,
                ),
            )
            conn.commit()
        paper.updated_at = now
        return paper

    def transition_status(self, paper_id: int, from_status: str, to_status: str) -> bool:
        """Atomically move a paper from one status to another.

        The UPDATE only matches while the stored status still equals
        ``from_status``, so concurrent writers cannot both apply it.

        Returns:
            True if the row changed, False if the stored status differed
        """
        with self.db.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE papers SET status = ?, updated_at = ? WHERE id = ? AND status = ?",
                (to_status, _now(), paper_id, from_status),
            )
            conn.commit()
            changed = cursor.rowcount > 0
        if changed:
            logger.info("Paper %s: %s -> %s", paper_id, from_status, to_status)
        return changed

    def delete(self, paper_id: int) -> bool:
        """Delete a paper; its reviews are removed by the foreign key cascade."""
        with self.db.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM papers WHERE id = ?", (paper_id,))
            conn.commit()
            return cursor.rowcount > 0

    def _find_many(self, where: str, params: tuple, limit: int, offset: int, order: str = "id DESC") -> list[Paper]:
        with self.db.connection() as conn:
            rows = conn.execute(
                f"""
                SELECT {_PAPER_COLUMNS}
                FROM papers
                {where}
                ORDER BY {order}
                LIMIT ? OFFSET ?
                """,
                (*params, limit, offset),
            ).fetchall()
        return [_row_to_paper(row) for row in rows]

    def find_all(self, limit: int = 10, offset: int = 0) -> list[Paper]:
        return self._find_many("", (), limit, offset)

    def find_by_owner(self, owner_id: int, limit: int = 10, offset: int = 0) -> list[Paper]:
        return self._find_many("WHERE owner_id = ?", (owner_id,), limit, offset)

    def find_by_status(self, status: str, limit: int = 10, offset: int = 0) -> list[Paper]:
        return self._find_many("WHERE status = ?", (status,), limit, offset)

    def search(self, query: str, limit: int = 10, offset: int = 0) -> list[Paper]:
        """Case-insensitive substring match on title or abstract."""
        pattern = f"%{_escape_like(query)}%"
        return self._find_many(
            "WHERE title LIKE ? ESCAPE '\\' OR abstract LIKE ? ESCAPE '\\'",
            (pattern, pattern),
            limit,
            offset,
        )

    def find_pending_for_reviewer(self, reviewer_id: int, limit: int = 10, offset: int = 0) -> list[Paper]:
        """Reviewable papers the reviewer has not reviewed yet and does not own.

        Oldest submissions come first.
        """
        placeholders = ",".join(["?"] * len(REVIEWABLE_STATUSES))
        return self._find_many(
            f"""
            WHERE status IN ({placeholders})
              AND owner_id != ?
              AND id NOT IN (SELECT paper_id FROM reviews WHERE reviewer_id = ?)
            """,
            (*REVIEWABLE_STATUSES, reviewer_id, reviewer_id),
            limit,
            offset,
            order="id ASC",
        )


class ReviewRepository:
    """Repository for review CRUD operations using SQLite."""

    def __init__(self, db: Database):
        self.db = db

    def create(self, review: Review) -> Review:
        """Insert a review.

        Raises:
            ConflictError: If the reviewer already reviewed this paper
            NotFoundError: If the paper or reviewer no longer exists
        """
        now = _now()
        with self.db.connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    """
                    INSERT INTO reviews
                    (paper_id, reviewer_id, score, comment, recommendation, metadata, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        review.paper_id,
                        review.reviewer_id,
                        review.score,
                        review.comment,
                        review.recommendation,
                        json.dumps(review.metadata.to_dict()),
                        now,
                        now,
                    ),
                )
            except sqlite3.IntegrityError as e:
                if "UNIQUE" in str(e):
                    raise ConflictError("You have already reviewed this paper") from e
                raise NotFoundError.for_resource("Paper", review.paper_id) from e
            conn.commit()
            review.id = cursor.lastrowid
        review.created_at = review.updated_at = now
        return review

    def find_by_id(self, review_id: int) -> Optional[Review]:
        with self.db.connection() as conn:
            row = conn.execute(
                f"SELECT {_REVIEW_COLUMNS} FROM reviews WHERE id = ?", (review_id,)
            ).fetchone()
        return _row_to_review(row) if row else None

    def update(self, review: Review) -> Review:
        now = _now()
        with self.db.connection() as conn:
            conn.execute(
                """
                UPDATE reviews
                SET score = ?, comment = ?, recommendation = ?, metadata = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    review.score,
                    review.comment,
                    review.recommendation,
                    json.dumps(review.metadata.to_dict()),
                    now,
                    review.id,
                ),
            )
            conn.commit()
        review.updated_at = now
        return review

    def delete(self, review_id: int) -> bool:
        with self.db.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM reviews WHERE id = ?", (review_id,))
            conn.commit()
            return cursor.rowcount > 0

    def find_by_paper(self, paper_id: int) -> list[Review]:
        with self.db.connection() as conn:
            rows = conn.execute(
                f"SELECT {_REVIEW_COLUMNS} FROM reviews WHERE paper_id = ? ORDER BY id ASC",
                (paper_id,),
            ).fetchall()
        return [_row_to_review(row) for row in rows]

    def find_by_reviewer(self, reviewer_id: int, limit: int = 10, offset: int = 0) -> list[Review]:
        with self.db.connection() as conn:
            rows = conn.execute(
                f"""
                SELECT {_REVIEW_COLUMNS} FROM reviews
                WHERE reviewer_id = ?
                ORDER BY id DESC
                LIMIT ? OFFSET ?
                """,
                (reviewer_id, limit, offset),
            ).fetchall()
        return [_row_to_review(row) for row in rows]

    def find_by_paper_and_reviewer(self, paper_id: int, reviewer_id: int) -> Optional[Review]:
        """Existence probe: returns None rather than raising when absent."""
        with self.db.connection() as conn:
            row = conn.execute(
                f"SELECT {_REVIEW_COLUMNS} FROM reviews WHERE paper_id = ? AND reviewer_id = ?",
                (paper_id, reviewer_id),
            ).fetchone()
        return _row_to_review(row) if row else None
