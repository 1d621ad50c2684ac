"""Background simulation jobs."""

from app.workers.runner import BackgroundRunner

__all__ = ["BackgroundRunner"]
