# Application Layer
# =================
# Orchestrates a review-answering session:
# - session.py:    pure state machine (states, inputs, effects, transition)
# - collection.py: in-memory, newest-first review set
# - controller.py: runs effects against the store client and the LLM

from .collection import ReviewCollection
from .controller import SessionController
from .session import AppState, InputMode, KeyPress, SessionState, Startup, transition

__all__ = [
    "AppState",
    "InputMode",
    "KeyPress",
    "ReviewCollection",
    "SessionController",
    "SessionState",
    "Startup",
    "transition",
]
