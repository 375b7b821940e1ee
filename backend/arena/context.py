import random
import threading
import time
from collections import OrderedDict
from typing import Callable, Dict, Optional, Tuple

from arena.broadcast import Broadcaster
from arena.models import Pill, Player, ScoreRecord
from arena.services.leaderboard import AllTimeLeaderboard, DailyLeaderboard
from arena.services.persistence import JsonStore
from arena.services.tokens import SessionTokenBroker


class GameContext:
    """All shared server state for one app instance.

    Socket handlers and background timers receive this object and must hold
    ``lock`` while touching any of its maps.
    """

    def __init__(self, config, socketio, logger, clock: Callable[[], float] = time.time,
                 rng: Optional[random.Random] = None):
        self.config = config
        self.logger = logger
        self.clock = clock
        self.rng = rng or random.Random()
        self.lock = threading.RLock()

        self.map_width = int(config.get('MAP_WIDTH', 4800))
        self.map_height = int(config.get('MAP_HEIGHT', 3200))
        self.spawn_margin = int(config.get('SPAWN_MARGIN', 100))
        self.max_pills = int(config.get('MAX_PILLS', 30))
        self.move_throttle_ms = int(config.get('MOVE_THROTTLE_MS', 16))
        self.respawn_delay_ms = int(config.get('RESPAWN_DELAY_MS', 3000))

        self.socketio = socketio
        self.broadcaster = Broadcaster(socketio, namespace=config.get('SOCKETIO_NAMESPACE', '/'))
        self.store = JsonStore(config.get('DATA_DIR', '.'), logger)

        self.players: Dict[str, Player] = {}
        self.pills: 'OrderedDict[str, Pill]' = OrderedDict()
        self.player_scores: Dict[str, ScoreRecord] = {}
        self.next_player_number = 1

        ttl_ms = int(config.get('TOKEN_TTL_SEC', 24 * 60 * 60)) * 1000
        self.tokens = SessionTokenBroker(self.now_ms, logger, ttl_ms=ttl_ms)
        self.daily = DailyLeaderboard(self.store, self.broadcaster, self.clock, logger)
        self.all_time = AllTimeLeaderboard(self.store, self.broadcaster, self.clock, logger)

    @property
    def player_count(self) -> int:
        return len(self.players)

    def now_ms(self) -> int:
        return int(round(self.clock() * 1000))

    def random_spawn_point(self) -> Tuple[float, float]:
        m = self.spawn_margin
        return (
            m + self.rng.random() * (self.map_width - 2 * m),
            m + self.rng.random() * (self.map_height - 2 * m),
        )

    def load(self) -> None:
        """Read persisted documents; missing or bad files leave empty state."""
        with self.lock:
            self.player_scores = self.store.load_player_scores()
            self.daily.load()
            self.all_time.load()

    def record_score(self, player: Player) -> None:
        key = ScoreRecord.key_for(player.name, player.id)
        self.player_scores[key] = ScoreRecord(name=player.name, score=player.score, lastSeen=self.now_ms())
        self.store.save_player_scores(self.player_scores)

    def flush_all(self) -> None:
        with self.lock:
            self.store.save_player_scores(self.player_scores)
            self.daily.save()
            self.all_time.save()
        self.logger.info('[shutdown-flush] all data saved')

    def snapshot(self) -> dict:
        self.daily.update_time_remaining()
        return {
            'players': {sid: p.to_dict() for sid, p in self.players.items()},
            'playerCount': self.player_count,
            'pills': {pid: pill.to_dict() for pid, pill in self.pills.items()},
            'dailyLeaderboard': self.daily.snapshot(),
            'allTimeLeaderboard': {'topScores': self.all_time.top()},
        }
