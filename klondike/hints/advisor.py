"""
Hint Advisor - Asks a text-generation model for a friendly hint.

The advisor:
1. Summarizes the visible board
2. Sends the advice prompt to the model
3. Returns the model's text, or a static fallback on any failure

IMPORTANT: The advisor never reads or writes game state beyond the
snapshot it is handed. Failures (no key, timeout, network) never
propagate to the caller.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any
import logging
import os

from ..engine_core.state import GameState
from .cache import HintCache
from .prompts import HintPrompts


logger = logging.getLogger(__name__)

# Environment configuration
HINT_MODEL = os.getenv("KLONDIKE_HINT_MODEL", "gemini-2.5-flash")
HINT_TIMEOUT = float(os.getenv("KLONDIKE_HINT_TIMEOUT", "10"))
HINT_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")

FALLBACK_HINT = "I'm resting right now, but you're doing great!"
EMPTY_HINT = "I'm thinking... try checking if any Aces can move up!"


@dataclass
class HintResult:
    """
    Result of asking for a hint.

    text is always safe to show to the player.
    """
    text: str
    is_fallback: bool = False
    cached: bool = False
    error: str | None = None


class HintAdvisor:
    """
    Gets hints from a text-generation model.

    Usage:
        advisor = HintAdvisor()
        result = advisor.advise(session.game_state)
        show(result.text)

    client is anything with `models.generate_content(model=..., contents=...)`
    returning an object with `.text`, like google.genai.Client. When not
    given, one is created on first use from the configured API key.
    """

    def __init__(
        self,
        client: Any = None,
        model: str = HINT_MODEL,
        api_key: str | None = HINT_API_KEY,
        timeout: float = HINT_TIMEOUT,
        cache: HintCache | None = None,
        use_cache: bool = True,
    ):
        self.client = client
        self.model = model
        self.api_key = api_key
        self.timeout = timeout
        if use_cache:
            self.cache = cache if cache is not None else HintCache()
        else:
            self.cache = None

    def advise(self, state: GameState) -> HintResult:
        """
        Ask the model for a hint about this board.

        Never raises; any failure becomes the fallback message.
        """
        summary = HintPrompts.board_summary(state)
        summary_text = summary.as_text()

        if self.cache is not None:
            cached = self.cache.get(summary_text, self.model)
            if cached is not None:
                return HintResult(text=cached, cached=True)

        try:
            client = self._get_client()
            response = client.models.generate_content(
                model=self.model,
                contents=HintPrompts.advice(summary),
            )
            text = (getattr(response, "text", None) or "").strip()
        except Exception as e:
            logger.warning("Hint request failed: %s", e)
            return HintResult(text=FALLBACK_HINT, is_fallback=True, error=str(e))

        if not text:
            return HintResult(text=EMPTY_HINT, is_fallback=True)

        if self.cache is not None:
            self.cache.put(summary_text, self.model, text)
        return HintResult(text=text)

    def _get_client(self) -> Any:
        """Create the model client on first use."""
        if self.client is not None:
            return self.client

        if not self.api_key:
            raise RuntimeError("No API key configured (set GEMINI_API_KEY)")

        try:
            from google import genai
            from google.genai import types
        except ImportError:
            raise ImportError(
                "google-genai not installed. Install with: pip install 'klondike-engine[hints]'"
            )

        self.client = genai.Client(
            api_key=self.api_key,
            http_options=types.HttpOptions(timeout=int(self.timeout * 1000)),
        )
        return self.client
