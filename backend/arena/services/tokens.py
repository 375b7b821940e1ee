import secrets
from typing import Callable, Dict, Optional

from arena.models import SessionToken


DEFAULT_TTL_MS = 24 * 60 * 60 * 1000


class SessionTokenBroker:
    """Single-use tokens binding a display name to a score.

    Minted on disconnect, redeemed on the next setUsername with the same
    name. Redemption failures never say why.
    """

    def __init__(self, now_ms: Callable[[], int], logger, ttl_ms: int = DEFAULT_TTL_MS):
        self._now_ms = now_ms
        self.logger = logger
        self.ttl_ms = ttl_ms
        self.tokens: Dict[str, SessionToken] = {}

    def __len__(self) -> int:
        return len(self.tokens)

    def __contains__(self, token) -> bool:
        return token in self.tokens

    def _is_expired(self, entry: SessionToken, now: int) -> bool:
        return now - entry.created >= self.ttl_ms

    def mint(self, name: str, score: int) -> SessionToken:
        now = self._now_ms()
        token = f"session_{now}_{secrets.token_hex(8)}"
        entry = SessionToken(token=token, name=name, score=score, created=now)
        self.tokens[token] = entry
        self.logger.info(f"[token-mint] {name} score={score}")
        return entry

    def redeem(self, token: Optional[str], name: str) -> Optional[int]:
        """Return the bound score and consume the token, or None."""
        if not token or not isinstance(token, str):
            return None
        entry = self.tokens.get(token)
        if entry is None:
            return None
        if self._is_expired(entry, self._now_ms()):
            del self.tokens[token]
            self.logger.info(f"[token-expired] token for {entry.name} presented after expiry")
            return None
        if entry.name != name:
            self.logger.info(f"[token-mismatch] expected {name}, token bound to {entry.name}")
            return None
        del self.tokens[token]
        self.logger.info(f"[token-redeem] {name} restored score {entry.score}")
        return entry.score

    def sweep(self) -> int:
        now = self._now_ms()
        expired = [t for t, entry in self.tokens.items() if self._is_expired(entry, now)]
        for t in expired:
            del self.tokens[t]
        if expired:
            self.logger.info(f"[token-sweep] removed {len(expired)} expired tokens")
        return len(expired)
