from services.session_service import SessionService, TokenPair

__all__ = ["SessionService", "TokenPair"]
