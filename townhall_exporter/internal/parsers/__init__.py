"""
Parsers for queue status pages.

This module exports all available parsers.
"""

from townhall_exporter.internal.parsers.base import BaseQueueParser
from townhall_exporter.internal.parsers.waiting_time import WaitingTimePageParser

__all__ = [
    "BaseQueueParser",
    "WaitingTimePageParser",
]
