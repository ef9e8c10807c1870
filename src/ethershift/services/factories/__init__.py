"""Factory helpers for runtime sessions."""

from .session_factory import create_new_session

__all__ = ["create_new_session"]
