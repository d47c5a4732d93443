"""
Parlor - Turn-Based Multiplayer Game Engine

A rules-driven engine that hosts six game variants behind one session lifecycle:
- Tic-tac-toe, connect four and checkers (two players, alternating turns)
- Sliding puzzle (solo or two-player race)
- Quick draw (drawing and guessing, up to 8 players)
- Word guess (one daily puzzle per player)

Every variant supplies a Ruleset; the SessionManager owns matchmaking,
turn enforcement and atomic writes against the Store.
"""

__version__ = "0.1.0"
