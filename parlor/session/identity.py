"""
Identity - Maps an authenticated caller to a stable player id.

Authentication itself happens elsewhere. The engine only needs a resolver
that turns whatever credential reached it into a PlayerId, or None when
the caller is anonymous.
"""

from __future__ import annotations
from abc import ABC, abstractmethod


class IdentityResolver(ABC):
    @abstractmethod
    def resolve(self, credential: str | None) -> str | None:
        """PlayerId for the credential, or None when unresolved."""


class HeaderIdentityResolver(IdentityResolver):
    """Trusts the credential as the player id (dev servers and tests)."""

    def resolve(self, credential: str | None) -> str | None:
        if credential is None:
            return None
        player_id = credential.strip()
        return player_id or None


class TokenIdentityResolver(IdentityResolver):
    """Looks tokens up in a fixed table issued by an upstream auth service."""

    def __init__(self, tokens: dict[str, str] | None = None):
        self._tokens = dict(tokens or {})

    def register(self, token: str, player_id: str) -> None:
        self._tokens[token] = player_id

    def resolve(self, credential: str | None) -> str | None:
        if not credential:
            return None
        if credential.lower().startswith("bearer "):
            credential = credential[len("bearer "):]
        return self._tokens.get(credential.strip())
