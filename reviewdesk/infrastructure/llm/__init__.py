from .response_generator import ResponseGenerationError, ResponseGenerator

__all__ = ["ResponseGenerationError", "ResponseGenerator"]
