"""Utility functions."""

from peerreview.utils.pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, Page, normalize_page

__all__ = ["DEFAULT_PAGE_SIZE", "MAX_PAGE_SIZE", "Page", "normalize_page"]
