from datetime import datetime, timedelta
from typing import Callable, Dict, List

from arena.models import AllTimeEntry, DailyEntry


DAILY_TOP_N = 10
ALL_TIME_TOP_N = 3


def day_identifier(moment: datetime) -> str:
    """Calendar day label, e.g. ``Mon Oct 19 2026``."""
    return moment.strftime('%a %b %d %Y')


def short_date(moment: datetime) -> str:
    return f"{moment.month}/{moment.day}/{moment.year}"


def next_midnight_ms(now_s: float) -> int:
    """Epoch ms of the next local midnight after ``now_s``."""
    today = datetime.fromtimestamp(now_s).date()
    midnight = datetime.combine(today + timedelta(days=1), datetime.min.time())
    return int(midnight.timestamp() * 1000)


class DailyLeaderboard:
    """Name-keyed standings that reset at local midnight."""

    def __init__(self, store, broadcaster, clock: Callable[[], float], logger):
        self.store = store
        self.broadcaster = broadcaster
        self.clock = clock
        self.logger = logger
        self.current_day = day_identifier(self._now())
        self.entries: Dict[str, DailyEntry] = {}
        self.reset_time = 0
        self.time_remaining = 0

    def _now(self) -> datetime:
        return datetime.fromtimestamp(self.clock())

    def _now_ms(self) -> int:
        return int(round(self.clock() * 1000))

    def load(self) -> None:
        saved = self.store.load_daily()
        today = day_identifier(self._now())
        if saved and saved.get('currentDay') == today:
            self.current_day = today
            self.entries = dict(saved['entries'])
            self.logger.info(f"[daily-load] loaded daily leaderboard with {len(self.entries)} entries")
        elif saved:
            self.logger.info('[daily-load] new day detected, starting fresh daily leaderboard')
        self.reset_time = next_midnight_ms(self.clock())
        self.update_time_remaining()
        self.logger.info(f"[daily-schedule] next reset at {datetime.fromtimestamp(self.reset_time / 1000)}")

    def save(self) -> bool:
        return self.store.save_daily(self.current_day, self.entries, self.reset_time)

    def update_time_remaining(self) -> int:
        self.time_remaining = max(0, self.reset_time - self._now_ms())
        return self.time_remaining

    def top(self, n: int = DAILY_TOP_N) -> List[dict]:
        ranked = sorted(self.entries.values(), key=lambda e: e.score, reverse=True)
        return [e.to_dict() for e in ranked[:n]]

    def snapshot(self) -> dict:
        return {
            'topScores': self.top(),
            'timeRemaining': self.time_remaining,
            'currentDay': self.current_day,
        }

    def report(self, name: str, score: int) -> None:
        # Latest score always wins, even when lower than the stored one
        self.entries[name] = DailyEntry(name=name, score=score, timestamp=self._now_ms())
        self.save()
        self.logger.info(f"[daily-update] {name} - {score} points")
        self.broadcaster.to_all('dailyLeaderboardUpdate', {
            'topScores': self.top(),
            'currentDay': self.current_day,
        })

    def reset(self) -> None:
        if self.entries:
            final = ', '.join(f"{e['name']}={e['score']}" for e in self.top(len(self.entries)))
            self.logger.info(f"[daily-final] {self.current_day}: {final}")
        self.entries.clear()
        self.current_day = day_identifier(self._now())
        self.reset_time = next_midnight_ms(self.clock())
        self.update_time_remaining()
        self.save()
        self.broadcaster.to_all('dailyLeaderboardReset', {
            'newDay': self.current_day,
            'timeRemaining': self.time_remaining,
        })
        self.logger.info(f"[daily-reset] new daily leaderboard started for {self.current_day}")

    def tick(self) -> bool:
        """One countdown step. Returns True when a reset happened."""
        did_reset = False
        if self.update_time_remaining() <= 0:
            self.reset()
            did_reset = True
        self.broadcaster.to_all('timeUpdate', {'timeRemaining': self.time_remaining})
        return did_reset


class AllTimeLeaderboard:
    """Best-ever score per name, capped to the top three."""

    def __init__(self, store, broadcaster, clock: Callable[[], float], logger):
        self.store = store
        self.broadcaster = broadcaster
        self.clock = clock
        self.logger = logger
        self.entries: List[AllTimeEntry] = []

    def load(self) -> None:
        entries = sorted(self.store.load_all_time(), key=lambda e: e.score, reverse=True)
        seen = set()
        self.entries = []
        for entry in entries:
            if entry.name in seen:
                continue
            seen.add(entry.name)
            self.entries.append(entry)
        del self.entries[ALL_TIME_TOP_N:]

    def save(self) -> bool:
        return self.store.save_all_time(self.entries)

    def top(self) -> List[dict]:
        return [e.to_dict() for e in self.entries]

    def report(self, name: str, score: int) -> None:
        now_s = self.clock()
        new_entry = AllTimeEntry(
            name=name,
            score=score,
            timestamp=int(round(now_s * 1000)),
            date=short_date(datetime.fromtimestamp(now_s)),
        )
        existing = next((i for i, e in enumerate(self.entries) if e.name == name), None)
        if existing is not None:
            if score > self.entries[existing].score:
                self.entries[existing] = new_entry
                self.logger.info(f"[alltime-update] {name}'s best is now {score}")
        else:
            self.entries.append(new_entry)
            self.logger.info(f"[alltime-add] {name} with {score}")

        self.entries.sort(key=lambda e: e.score, reverse=True)
        del self.entries[ALL_TIME_TOP_N:]
        self.save()
        self.broadcaster.to_all('allTimeLeaderboardUpdate', {'topScores': self.top()})
