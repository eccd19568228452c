"""AI tutor chat exports."""

from .models import ChatMessage
from .tutor import TutorChat

__all__ = ["ChatMessage", "TutorChat"]
