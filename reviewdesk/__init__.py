# reviewdesk - App Store / Google Play Review Responder
# ====================================================
# Browse store reviews and reply to them from one terminal session.
#
# ARCHITECTURE LAYERS:
# - Presentation:   Textual terminal UI (rendering + key translation)
# - Application:    Session state machine and its controller
# - Domain:         Review records and the text buffer (no external dependencies)
# - Infrastructure: Store APIs, credentials, LLM drafting, configuration
#
# The store layer is selected by configuration, so the session never knows
# which store it is talking to.

__version__ = "0.1.0"
