"""HTTP API."""

from peerreview.api.app import create_app

__all__ = ["create_app"]
