"""Command-line interface handlers."""

import argparse
from typing import Optional

import uvicorn

from peerreview.config import SERVER_CONFIG_FILE, Settings, save_server_config
from peerreview.console import ConsoleUI, configure_logging
from peerreview.database.repository import Database, PaperRepository, ReviewRepository
from peerreview.errors import PeerReviewError
from peerreview.models.paper import PAPER_STATUSES
from peerreview.services.paper_service import PaperService
from peerreview.services.review_service import ReviewService
from peerreview.utils.pagination import normalize_page


class PeerReviewCLI:
    """CLI application for PeerReview."""

    def __init__(self, settings: Optional[Settings] = None, ui: Optional[ConsoleUI] = None):
        """Initialize CLI with settings.

        Args:
            settings: Application settings (loads from disk if not provided)
            ui: Console UI (a fresh rich console if not provided)
        """
        self.settings = settings or Settings.load()
        self.ui = ui or ConsoleUI()
        self.db = Database(self.settings.db_path)
        paper_repo = PaperRepository(self.db)
        self.papers = PaperService(paper_repo)
        self.reviews = ReviewService(ReviewRepository(self.db), paper_repo, self.papers)

    def cmd_serve(self, host: Optional[str] = None, port: Optional[int] = None, reload: bool = False) -> None:
        """Run the API server; ``reload`` restarts it when source files change."""
        serve(self.settings, host, port, reload=reload)

    def cmd_init(self) -> None:
        """Create the database schema and write ``server.yaml`` if missing."""
        config_path = self.settings.metadata_dir / SERVER_CONFIG_FILE
        if not config_path.exists():
            self.settings.metadata_dir.mkdir(parents=True, exist_ok=True)
            save_server_config(config_path, self.settings)
            self.ui.info(f"Wrote {config_path}")
        self.ui.success(f"Database ready at {self.db.db_path}")

    def cmd_list(self, status: Optional[str] = None, limit: int = 50) -> None:
        """List papers, optionally by status.

        Args:
            status: One of draft/submitted/under_review/published, or None for all
            limit: Maximum papers to display
        """
        page = normalize_page(1, limit, max_size=max(limit, 1))
        if status:
            papers = self.papers.list_by_status(status, page)
        else:
            papers = self.papers.list_papers(page)
        self.ui.display_papers(papers, f"Papers (status={status or 'all'})")

    def cmd_show(self, paper_id: int) -> None:
        """Show one paper with its reviews and mean score."""
        paper = self.papers.get_paper(paper_id)
        reviews = paper.reviews or []
        self.ui.display_paper_detail(paper, reviews, self.reviews.aggregate_score(paper_id))

    def cmd_pending(self, reviewer_id: int, limit: int = 50) -> None:
        """List papers still awaiting a review from ``reviewer_id``."""
        page = normalize_page(1, limit, max_size=max(limit, 1))
        papers = self.reviews.list_pending(reviewer_id, page)
        self.ui.display_papers(papers, f"Pending reviews for user {reviewer_id}")


def serve(
    settings: Settings,
    host: Optional[str] = None,
    port: Optional[int] = None,
    reload: bool = False,
) -> None:
    uvicorn.run(
        "peerreview.api.app:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="peerreview",
        description="Paper submission and peer-review backend",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default=None, help="Bind address (default: from settings)")
    serve_parser.add_argument("--port", type=int, default=None, help="Port (default: from settings)")
    serve_parser.add_argument("--reload", action="store_true", help="Restart on source changes (development)")

    # init command
    subparsers.add_parser("init", help="Create the database and default settings file")

    # list command
    list_parser = subparsers.add_parser("list", help="List papers")
    list_parser.add_argument(
        "--status",
        default=None,
        choices=list(PAPER_STATUSES),
        help="Filter by status (default: all)",
    )
    list_parser.add_argument(
        "--limit",
        type=int,
        default=50,
        help="Maximum papers to display (default: 50)",
    )

    # show command
    show_parser = subparsers.add_parser("show", help="Show a paper with its reviews")
    show_parser.add_argument("paper_id", type=int, help="Paper ID")

    # pending command
    pending_parser = subparsers.add_parser("pending", help="Papers awaiting a reviewer")
    pending_parser.add_argument("reviewer_id", type=int, help="Reviewer user ID")
    pending_parser.add_argument("--limit", type=int, default=50, help="Maximum papers (default: 50)")

    return parser


def run_cli(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI.

    Returns:
        Process exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    settings = Settings.load()
    configure_logging(settings.log_level)
    cli = PeerReviewCLI(settings)

    try:
        if args.command == "serve":
            cli.cmd_serve(args.host, args.port, args.reload)
        elif args.command == "init":
            cli.cmd_init()
        elif args.command == "list":
            cli.cmd_list(args.status, args.limit)
        elif args.command == "show":
            cli.cmd_show(args.paper_id)
        elif args.command == "pending":
            cli.cmd_pending(args.reviewer_id, args.limit)
    except PeerReviewError as e:
        cli.ui.error(e.message)
        return 1
    return 0
