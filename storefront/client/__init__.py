from .session_state import FormResult, SessionState, SessionStatus

__all__ = ["FormResult", "SessionState", "SessionStatus"]
