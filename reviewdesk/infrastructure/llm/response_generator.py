"""
Response Generator - LLM-Drafted Replies to Reviews
===================================================

ARCHITECTURAL DECISION:
- Uses an OpenAI-compatible chat completions endpoint
- Falls back to a template reply if no API key is set or the call fails
- draft() always returns text; generate() raises so callers can tell the difference

The generator does not enforce store length limits. The prompt asks for a short
reply, but the caller truncates to whatever the store accepts.

EXTENSIBILITY:
- To use a different model: set REVIEWDESK_AI_MODEL
- To use another OpenAI-compatible provider: set OPENAI_API_URL
"""

import logging
from typing import Optional

import requests

from ..config import LLMSettings, get_settings
from ...domain import Review

logger = logging.getLogger(__name__)


class ResponseGenerationError(Exception):
    """Raised when the LLM cannot produce a reply."""
    pass


class ResponseGenerator:
    """
    Reply drafting service using an LLM.

    USAGE:
        generator = ResponseGenerator()
        text = generator.draft(review)

    FALLBACK BEHAVIOR:
    - If no API key: template reply
    - If API fails or returns nothing: template reply
    """

    SYSTEM_PROMPT_TEMPLATE = (
        "You are a professional app developer responding to app store reviews. "
        "Your responses should be:\n"
        "- Professional, friendly, and appreciative\n"
        "- Acknowledge the user's specific feedback\n"
        "- {length_rule}\n"
        "- Thank users for their time and feedback"
        "{extras}\n\n"
        "Always be genuine and avoid overly promotional language."
    )

    USER_PROMPT_TEMPLATE = (
        "{rating_context}.\n\n"
        "Review title: \"{title}\"\n"
        "Review text: \"{body}\"\n\n"
        "Please generate a professional response to this review."
    )

    RATING_CONTEXT = {
        5: "This is a 5-star positive review",
        4: "This is a 4-star mostly positive review",
        3: "This is a 3-star neutral review",
        2: "This is a 2-star negative review",
        1: "This is a 1-star very negative review",
    }

    def __init__(self, settings: Optional[LLMSettings] = None, max_length: Optional[int] = None):
        """
        Args:
            settings: LLM settings; defaults to the environment-derived settings.
            max_length: Reply length to ask the model for, if the store has a limit.
        """
        self._settings = settings or get_settings().llm
        self._max_length = max_length

        if not self._settings.api_key:
            logger.warning(
                "No OPENAI_API_KEY set. "
                "AI drafts will use a template reply."
            )

    @property
    def is_available(self) -> bool:
        return bool(self._settings.api_key)

    def draft(self, review: Review) -> str:
        """
        Draft a reply to a review. Never raises.

        Returns:
            LLM reply if available, template reply otherwise.
        """
        if self.is_available:
            try:
                return self.generate(review)
            except ResponseGenerationError as e:
                logger.warning(f"AI draft failed: {e}, falling back to template")
        return self.fallback_response(review)

    def generate(self, review: Review) -> str:
        """
        Ask the LLM for a reply.

        Raises:
            ResponseGenerationError: no API key, request failure or empty answer.
        """
        if not self.is_available:
            raise ResponseGenerationError(
                "OpenAI API key is required. Set OPENAI_API_KEY environment variable"
            )

        headers = {
            "Authorization": f"Bearer {self._settings.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self._settings.model,
            "messages": [
                {"role": "system", "content": self.build_system_prompt()},
                {"role": "user", "content": self.build_user_prompt(review)},
            ],
            "temperature": self._settings.temperature,
            "max_tokens": self._settings.max_tokens,
        }

        try:
            response = requests.post(
                self._settings.api_url,
                headers=headers,
                json=payload,
                timeout=self._settings.timeout_seconds,
            )
            response.raise_for_status()
            data = response.json()
        except requests.Timeout as e:
            raise ResponseGenerationError("LLM API timeout") from e
        except requests.RequestException as e:
            raise ResponseGenerationError(f"LLM API error: {e}") from e
        except ValueError as e:
            raise ResponseGenerationError(f"LLM API returned invalid JSON: {e}") from e

        content = self._extract_response_content(data)
        if not content:
            raise ResponseGenerationError("No response content from the LLM")

        logger.debug(f"AI drafted {len(content)} characters for review {review.id}")
        return content

    def build_system_prompt(self) -> str:
        settings = self._settings
        extras = []
        if settings.keywords:
            extras.append(
                "Naturally incorporate these keywords when relevant: "
                + ", ".join(settings.keywords)
            )
        if settings.support_email:
            extras.append(
                f"Encourage users to email {settings.support_email} "
                "for additional feedback or feature requests"
            )
        if settings.custom_instructions:
            extras.append(f"Additional instructions: {settings.custom_instructions}")
        if settings.app_context:
            extras.append(f"Context about the app: {settings.app_context}")

        if self._max_length:
            length_rule = f"Keep responses under {self._max_length} characters"
        else:
            length_rule = "Keep responses concise, a few sentences at most"

        return self.SYSTEM_PROMPT_TEMPLATE.format(
            length_rule=length_rule,
            extras="".join(f"\n- {extra}" for extra in extras),
        )

    def build_user_prompt(self, review: Review) -> str:
        return self.USER_PROMPT_TEMPLATE.format(
            rating_context=self.RATING_CONTEXT.get(review.rating, "This is a review"),
            title=review.title or "(No title)",
            body=review.body or "(No review text)",
        )

    @staticmethod
    def fallback_response(review: Review) -> str:
        """Template reply mentioning the rating and, if present, the title."""
        about = f" about \"{review.title}\"" if review.title else ""
        return (
            f"Thank you for your {review.rating}-star review{about}! "
            "We appreciate your feedback and are constantly working to improve our app."
        )

    def _extract_response_content(self, data: dict) -> str:
        """Extract text content from API response."""
        try:
            choices = data.get("choices", [])
            if choices:
                message = choices[0].get("message", {})
                return (message.get("content") or "").strip()
        except (AttributeError, KeyError, IndexError, TypeError):
            pass
        return ""
