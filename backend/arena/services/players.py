import math
from typing import Any, Optional, Tuple

from arena.models import PLAYER_COLORS, Player, SessionToken
from arena.services.collection import check_pill_collection


MAX_USERNAME_LENGTH = 15


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def parse_username_payload(data: Any) -> Tuple[Optional[str], Optional[str]]:
    """Accept either a bare string or {'username', 'sessionToken'}."""
    if isinstance(data, str):
        return data, None
    if isinstance(data, dict):
        username = data.get('username')
        token = data.get('sessionToken')
        return (username if isinstance(username, str) else None,
                token if isinstance(token, str) else None)
    return None, None


def sanitize_username(username: Optional[str]) -> Optional[str]:
    if not isinstance(username, str):
        return None
    clean = username.strip()[:MAX_USERNAME_LENGTH]
    return clean or None


def add_player(ctx, sid: str) -> Player:
    with ctx.lock:
        x, y = ctx.random_spawn_point()
        player = Player(
            id=sid,
            x=x,
            y=y,
            color=ctx.rng.choice(PLAYER_COLORS),
            name=f"Player {ctx.next_player_number}",
            lastActivity=ctx.now_ms(),
        )
        ctx.next_player_number += 1
        ctx.players[sid] = player
        ctx.logger.info(f"[connect] {sid} joined as {player.name} ({ctx.player_count} online)")
        return player


def set_username(ctx, sid: str, data: Any) -> Optional[Player]:
    """Rename a player and resolve its starting score.

    The score comes from a session token only when the token is live and
    bound to exactly this name; anything else starts the player at 0.
    """
    username, token = parse_username_payload(data)
    clean = sanitize_username(username)
    if clean is None:
        return None
    with ctx.lock:
        player = ctx.players.get(sid)
        if player is None:
            return None
        player.name = clean
        restored = ctx.tokens.redeem(token, clean) if token else None
        player.score = restored if restored is not None else 0
        ctx.record_score(player)
        ctx.logger.info(f"[set-username] {sid} is now {clean} (score {player.score})")
        ctx.broadcaster.to_all('playerUpdate', player.to_update())
        return player


def move_player(ctx, sid: str, data: Any) -> bool:
    """Apply a client position update. Returns True if it was accepted."""
    if not isinstance(data, dict):
        return False
    x, y = data.get('x'), data.get('y')
    if not (_is_number(x) and _is_number(y)):
        return False
    with ctx.lock:
        player = ctx.players.get(sid)
        if player is None or not player.is_alive:
            return False
        now = ctx.now_ms()
        if now - (player.lastMovementUpdate or 0) < ctx.move_throttle_ms:
            return False

        player.x = x
        player.y = y
        if _is_number(data.get('direction')):
            player.direction = data['direction']
        if _is_number(data.get('weaponAngle')):
            player.weaponAngle = data['weaponAngle']
        player.lastActivity = now
        player.lastMovementUpdate = now

        check_pill_collection(ctx, player)

        # The sender renders its own input; echoing back causes jitter
        ctx.broadcaster.to_others('playerUpdate', player.to_update(), sid)
        return True


def respawn_player(ctx, sid: str) -> Optional[Player]:
    with ctx.lock:
        player = ctx.players.get(sid)
        if player is None:
            return None
        player.x, player.y = ctx.random_spawn_point()
        player.health = player.maxHealth
        ctx.broadcaster.to_all('playerRespawned', player.to_dict())
        return player


def remove_player(ctx, sid: str) -> Optional[SessionToken]:
    """Drop a player on disconnect, minting a resume token if it scored."""
    with ctx.lock:
        player = ctx.players.get(sid)
        if player is None:
            return None
        token = None
        if player.name and player.score > 0:
            ctx.daily.report(player.name, player.score)
            token = ctx.tokens.mint(player.name, player.score)
            # The transport may already be gone; delivery is best effort
            ctx.broadcaster.to_one('sessionToken', {
                'token': token.token,
                'name': player.name,
                'score': player.score,
            }, sid)

        ctx.broadcaster.to_all('playerLeft', sid)
        del ctx.players[sid]
        ctx.broadcaster.to_all('playerCountUpdate', ctx.player_count)
        ctx.logger.info(f"[disconnect] {sid} ({player.name}) left, {ctx.player_count} online")
        return token
