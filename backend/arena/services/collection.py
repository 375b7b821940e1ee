import math
from typing import Optional

from arena.models import PILL_SIZE, PLAYER_RADIUS, Pill, Player


PICKUP_DISTANCE = PLAYER_RADIUS + PILL_SIZE / 2


def check_pill_collection(ctx, player: Player) -> Optional[Pill]:
    """Collect the first pill within reach of ``player``.

    Stops at the first hit, so stacked pills go one per accepted move.
    Caller holds ``ctx.lock``.
    """
    for pill_id, pill in ctx.pills.items():
        if math.hypot(player.x - pill.x, player.y - pill.y) > PICKUP_DISTANCE:
            continue

        del ctx.pills[pill_id]
        player.score = (player.score or 0) + pill.points
        ctx.record_score(player)
        ctx.broadcaster.to_all('pillCollected', {
            'pillId': pill_id,
            'playerId': player.id,
            'points': pill.points,
            'newScore': player.score,
        })
        ctx.logger.info(f"[pill-collect] {player.name} +{pill.points} -> {player.score}")

        ctx.daily.report(player.name, player.score)
        ctx.all_time.report(player.name, player.score)
        return pill
    return None
