"""Language server session supervision."""

from zap_launcher.session.controller import Session, SessionController, SessionState

__all__ = ["Session", "SessionController", "SessionState"]
