"""Common routes: health check."""

from fastapi import APIRouter

from peerreview import __version__
from peerreview.api.responses import success

router = APIRouter()


@router.get("/health")
def health():
    """Liveness probe."""
    return success({"status": "ok", "service": "peerreview", "version": __version__})
