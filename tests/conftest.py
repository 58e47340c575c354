"""Pytest configuration and fixtures for peerreview tests."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from peerreview.api.app import create_app
from peerreview.config import Settings
from peerreview.database.repository import Database, PaperRepository, ReviewRepository, UserRepository
from peerreview.services.paper_service import PaperService
from peerreview.services.review_service import ReviewService
from peerreview.services.user_service import UserService

ABSTRACT = (
    "We study how review eligibility rules interact with paper status "
    "transitions in a small peer-review workflow."
)
COMMENT = "Clear methodology, convincing evaluation."


@pytest.fixture
def db(tmp_path: Path) -> Database:
    """Fresh SQLite database per test."""
    return Database(tmp_path / "test.db")


@pytest.fixture
def paper_repo(db: Database) -> PaperRepository:
    return PaperRepository(db)


@pytest.fixture
def review_repo(db: Database) -> ReviewRepository:
    return ReviewRepository(db)


@pytest.fixture
def user_service(db: Database) -> UserService:
    return UserService(UserRepository(db))


@pytest.fixture
def paper_service(paper_repo: PaperRepository) -> PaperService:
    return PaperService(paper_repo)


@pytest.fixture
def review_service(review_repo, paper_repo, paper_service) -> ReviewService:
    return ReviewService(review_repo, paper_repo, paper_service)


@pytest.fixture
def owner(user_service):
    return user_service.register_user("owner@example.org", "Paper Owner")


@pytest.fixture
def reviewer(user_service):
    return user_service.register_user("rev1@example.org", "First Reviewer", role="reviewer")


@pytest.fixture
def reviewer2(user_service):
    return user_service.register_user("rev2@example.org", "Second Reviewer", role="reviewer")


@pytest.fixture
def make_paper(paper_service, owner):
    """Factory creating a valid draft paper, optionally submitted."""

    def _make(owner_id=None, submit=False, **overrides):
        owner_id = owner_id if owner_id is not None else owner.id
        fields = {
            "title": "Eligibility in Peer Review",
            "abstract": ABSTRACT,
            "authors": ["A. Author", "B. Author"],
            "keywords": ["review", "workflow"],
            "category": "cs.DL",
        }
        fields.update(overrides)
        paper = paper_service.create_paper(owner_id, **fields)
        if submit:
            paper = paper_service.submit_paper(paper.id, owner_id)
        return paper

    return _make


@pytest.fixture
def settings(tmp_path: Path):
    """Isolated settings singleton pointing at a temporary database."""
    Settings.reset()
    s = Settings(db_path=tmp_path / "api.db", metadata_dir=tmp_path / ".metadata")
    yield s
    Settings.reset()


@pytest.fixture
def client(settings) -> TestClient:
    return TestClient(create_app(settings))


@pytest.fixture
def register(client):
    """Register a user over HTTP and return the auth header for them."""

    def _register(email: str, name: str = "Test User", role: str = "researcher") -> dict:
        resp = client.post("/api/v1/users", json={"email": email, "name": name, "role": role})
        assert resp.status_code == 201, resp.text
        return {"X-User-ID": str(resp.json()["data"]["id"])}

    return _register
