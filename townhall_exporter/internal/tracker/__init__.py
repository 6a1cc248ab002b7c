"""
Ticket tracking.
"""
from .ticket_tracker import TicketTracker

__all__ = ["TicketTracker"]
