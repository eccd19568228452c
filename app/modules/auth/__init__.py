from .users import SessionManager, UserRecord

__all__ = [
    "SessionManager",
    "UserRecord",
]
