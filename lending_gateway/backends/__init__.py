"""Lending backend implementations."""
from .remote import RemoteLendingBackend
from .static import StaticLendingBackend

__all__ = ["RemoteLendingBackend", "StaticLendingBackend"]
