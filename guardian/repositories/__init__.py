"""
Repositories
"""
from guardian.repositories.ticket_repository import TicketRepository

__all__ = ["TicketRepository"]
