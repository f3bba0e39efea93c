# Domain Layer
# ============
# Pure data and editing logic with no external dependencies:
# - review.py:      Review / ReviewResponse records shared by both stores
# - text_buffer.py: cursor-addressed buffer used while composing a response

from .review import Review, ReviewResponse, ResponseState
from .text_buffer import TextBuffer

__all__ = ["Review", "ReviewResponse", "ResponseState", "TextBuffer"]
