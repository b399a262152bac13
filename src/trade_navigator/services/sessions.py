"""
Session providers - map bearer tokens to user ids.
"""
from typing import Optional, Protocol


class SessionProvider(Protocol):
    def resolve(self, token: str) -> Optional[str]:
        """Return the user id for a token, or None."""
        ...


class StaticTokenSessionProvider:
    """Resolves tokens from a fixed token → user id map."""

    def __init__(self, tokens: dict[str, str]):
        self.tokens = dict(tokens)

    def resolve(self, token: str) -> Optional[str]:
        return self.tokens.get(token)
