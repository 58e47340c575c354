"""Console UI and logging setup using Rich."""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from peerreview.models.paper import Paper
from peerreview.models.review import Review

_STATUS_STYLES = {
    "draft": "dim",
    "submitted": "cyan",
    "under_review": "yellow",
    "published": "green",
}


def configure_logging(level: str = "INFO", console: Optional[Console] = None) -> None:
    """Route the standard logging tree through a RichHandler."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


class ConsoleUI:
    """Rich-based console UI for paper and review display."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize console."""
        self.console = console or Console()

    def info(self, message: str) -> None:
        """Print an info message."""
        self.console.print(message)

    def success(self, message: str) -> None:
        """Print a success message in green."""
        self.console.print(f"[green]{message}[/green]")

    def warning(self, message: str) -> None:
        """Print a warning message in yellow."""
        self.console.print(f"[yellow]Warning:[/yellow] {message}")

    def error(self, message: str) -> None:
        """Print an error message in red."""
        self.console.print(f"[red]Error:[/red] {message}")

    def display_papers(self, papers: list[Paper], title: str) -> None:
        """Display papers in a formatted table.

        Args:
            papers: List of papers to display
            title: Table title
        """
        table = Table(title=title)
        table.add_column("ID", justify="right")
        table.add_column("Status")
        table.add_column("Category", overflow="fold")
        table.add_column("Title", overflow="fold")
        table.add_column("Authors", overflow="fold")

        for paper in papers:
            style = _STATUS_STYLES.get(paper.status, "")
            table.add_row(
                str(paper.id) if paper.id else "-",
                f"[{style}]{paper.status}[/{style}]" if style else paper.status,
                paper.category or "-",
                paper.title,
                ", ".join(paper.authors) or "-",
            )

        self.console.print(table)
        if not papers:
            self.console.print("No papers found.")

    def display_paper_detail(self, paper: Paper, reviews: list[Review], score: float) -> None:
        """Display one paper with its reviews and mean score."""
        self.console.print(f"[bold]#{paper.id} {paper.title}[/bold]")
        self.console.print(f"Status: {paper.status}   Owner: {paper.owner_id}   Category: {paper.category or '-'}")
        self.console.print(f"Authors: {', '.join(paper.authors) or '-'}")
        if paper.keywords:
            self.console.print(f"Keywords: {', '.join(paper.keywords)}")
        self.console.print(f"\n{paper.abstract}\n")

        if not reviews:
            self.console.print("No reviews yet.")
            return

        table = Table(title=f"Reviews (mean score {score:.2f})")
        table.add_column("ID", justify="right")
        table.add_column("Reviewer", justify="right")
        table.add_column("Score", justify="right")
        table.add_column("Recommendation")
        table.add_column("Comment", overflow="fold")
        for review in reviews:
            table.add_row(
                str(review.id),
                str(review.reviewer_id),
                str(review.score),
                review.recommendation,
                review.comment,
            )
        self.console.print(table)
