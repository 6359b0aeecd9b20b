"""Interactive session orchestration for termrelay."""

from termrelay.session.orchestrator import SessionOrchestrator

__all__ = ["SessionOrchestrator"]
