"""Result models for service operations."""

from whispernotes.models.results.auth import AuthResult

__all__ = ["AuthResult"]
