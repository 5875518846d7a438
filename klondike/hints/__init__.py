"""
Hints - Natural-language hints from a remote text-generation model.

The hint advisor:
1. Summarizes the visible board as plain text
2. Asks the model for the next move or some encouragement
3. Caches answers by board summary
4. Falls back to a friendly static message on any failure

The model is NEVER used to decide or apply moves.
"""

from .advisor import HintAdvisor, HintResult, FALLBACK_HINT, EMPTY_HINT
from .cache import HintCache, CacheEntry
from .prompts import HintPrompts, BoardSummary

__all__ = [
    "HintAdvisor",
    "HintResult",
    "FALLBACK_HINT",
    "EMPTY_HINT",
    "HintCache",
    "CacheEntry",
    "HintPrompts",
    "BoardSummary",
]
