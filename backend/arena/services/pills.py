import uuid
from typing import Optional

from arena.models import Pill


def spawn_pill(ctx) -> Optional[Pill]:
    """Add one pill at a random interior point unless the pool is full."""
    with ctx.lock:
        if len(ctx.pills) >= ctx.max_pills:
            return None
        now = ctx.now_ms()
        x, y = ctx.random_spawn_point()
        pill = Pill(id=f"pill_{now}_{uuid.uuid4().hex[:12]}", x=x, y=y, points=1, spawnTime=now)
        ctx.pills[pill.id] = pill
        payload = pill.to_dict()
        payload['animated'] = True
        ctx.broadcaster.to_all('pillSpawned', payload)
        return pill
