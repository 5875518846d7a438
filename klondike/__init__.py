"""
Klondike - Single-deck Klondike Solitaire Engine

A deterministic, rules-driven engine for Klondike Solitaire.
The engine deals games and applies player actions, and provides:
- Immutable state snapshots
- Move legality rules
- A reducer with bounded undo history
- Sessions, hints and a REST API for presentation layers
"""

__version__ = "0.1.0"
