"""Protocol interfaces for the lending gateway."""
from .lending_backend import LendingBackend

__all__ = ["LendingBackend"]
