import json
import os
from typing import Any, Dict, List, Optional

from arena.models import AllTimeEntry, DailyEntry, ScoreRecord


PLAYER_SCORES_FILE = 'player_scores.json'
DAILY_LEADERBOARD_FILE = 'daily_leaderboard.json'
ALL_TIME_LEADERBOARD_FILE = 'all_time_leaderboard.json'


class JsonStore:
    """Load/save for the three persisted documents.

    Every failure is logged and degrades to an empty default; nothing here
    raises into a socket handler or timer.
    """

    def __init__(self, data_dir: str, logger):
        self.data_dir = data_dir
        self.logger = logger

    def _path(self, filename: str) -> str:
        return os.path.join(self.data_dir, filename)

    def _read(self, filename: str, expected_type) -> Optional[Any]:
        path = self._path(filename)
        if not os.path.exists(path):
            return None
        try:
            with open(path, 'r', encoding='utf-8') as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            self.logger.error(f"[persist-error] failed to read {path}: {exc}")
            return None
        if not isinstance(data, expected_type):
            self.logger.error(f"[persist-error] unexpected content in {path}, ignoring")
            return None
        return data

    def _write(self, filename: str, data) -> bool:
        path = self._path(filename)
        try:
            os.makedirs(self.data_dir, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as fh:
                json.dump(data, fh, indent=2)
        except (OSError, TypeError, ValueError) as exc:
            self.logger.error(f"[persist-error] failed to write {path}: {exc}")
            return False
        return True

    # ---- player score ledger ----

    def load_player_scores(self) -> Dict[str, ScoreRecord]:
        raw = self._read(PLAYER_SCORES_FILE, dict) or {}
        records: Dict[str, ScoreRecord] = {}
        for key, value in raw.items():
            try:
                records[key] = ScoreRecord(
                    name=str(value['name']),
                    score=int(value['score']),
                    lastSeen=int(value.get('lastSeen', 0)),
                )
            except (KeyError, TypeError, ValueError, AttributeError):
                self.logger.warning(f"[persist-skip] bad score record {key!r}")
        self.logger.info(f"[persist-load] loaded {len(records)} player scores")
        return records

    def save_player_scores(self, records: Dict[str, ScoreRecord]) -> bool:
        ok = self._write(PLAYER_SCORES_FILE, {k: r.to_dict() for k, r in records.items()})
        if ok:
            self.logger.debug(f"[persist-save] saved {len(records)} player scores")
        return ok

    # ---- daily leaderboard ----

    def load_daily(self) -> Optional[Dict[str, Any]]:
        """Return {'currentDay', 'entries', 'resetTime'} or None."""
        raw = self._read(DAILY_LEADERBOARD_FILE, dict)
        if raw is None:
            return None
        entries: Dict[str, DailyEntry] = {}
        top_scores = raw.get('topScores') or {}
        if not isinstance(top_scores, dict):
            top_scores = {}
        for key, value in top_scores.items():
            try:
                entries[key] = DailyEntry(
                    name=str(value['name']),
                    score=int(value['score']),
                    timestamp=int(value.get('timestamp', 0)),
                )
            except (KeyError, TypeError, ValueError, AttributeError):
                self.logger.warning(f"[persist-skip] bad daily entry {key!r}")
        return {
            'currentDay': raw.get('currentDay'),
            'entries': entries,
            'resetTime': raw.get('resetTime'),
        }

    def save_daily(self, current_day: str, entries: Dict[str, DailyEntry], reset_time) -> bool:
        return self._write(DAILY_LEADERBOARD_FILE, {
            'currentDay': current_day,
            'topScores': {k: e.to_dict() for k, e in entries.items()},
            'resetTime': reset_time,
        })

    # ---- all-time leaderboard ----

    def load_all_time(self) -> List[AllTimeEntry]:
        raw = self._read(ALL_TIME_LEADERBOARD_FILE, list) or []
        entries = [e for e in (AllTimeEntry.from_dict(item) for item in raw if isinstance(item, dict)) if e]
        self.logger.info(f"[persist-load] loaded all-time leaderboard with {len(entries)} entries")
        return entries

    def save_all_time(self, entries: List[AllTimeEntry]) -> bool:
        return self._write(ALL_TIME_LEADERBOARD_FILE, [e.to_dict() for e in entries])
