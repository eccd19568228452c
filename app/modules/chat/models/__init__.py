from .chat import ChatMessage

__all__ = ["ChatMessage"]
