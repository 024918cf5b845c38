"""Login, registration and session management."""

from fitcoach.auth.service import AuthService

__all__ = ["AuthService"]
