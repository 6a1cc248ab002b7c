"""
HTTP infrastructure.
"""
from .fetcher import HttpPageFetcher

__all__ = ["HttpPageFetcher"]
