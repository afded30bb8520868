"""Service modules"""
from .lending_service import LendingService

__all__ = ["LendingService"]
