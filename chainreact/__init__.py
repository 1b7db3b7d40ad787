"""
Chain Reaction - Orb placement and cascade engine

A deterministic engine for the Chain Reaction board game. It provides:
- Board model and cascade resolution
- Game runs with turn order and elimination
- Minimax AI opponents at five difficulty levels
- Objective-driven puzzles
- Game sessions and an HTTP API
"""

__version__ = "0.1.0"
