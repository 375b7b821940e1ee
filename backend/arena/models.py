from dataclasses import dataclass, field, asdict
from typing import Optional


PLAYER_COLORS = [
    '#00d4ff', '#7c3aed', '#ef4444', '#22c55e',
    '#f97316', '#eab308', '#ec4899', '#14b8a6',
]

PLAYER_RADIUS = 20
PILL_SIZE = 45
MAX_HEALTH = 100


@dataclass
class Player:
    id: str
    x: float
    y: float
    color: str
    name: str
    health: int = MAX_HEALTH
    maxHealth: int = MAX_HEALTH
    angle: float = 0
    direction: float = 1
    weaponAngle: float = 0
    kills: int = 0
    score: int = 0
    lastActivity: int = 0
    lastMovementUpdate: int = 0

    @property
    def is_alive(self) -> bool:
        return self.health > 0

    def to_dict(self):
        return asdict(self)

    def to_update(self):
        """Fields relayed in playerUpdate events."""
        return {
            'id': self.id,
            'x': self.x,
            'y': self.y,
            'health': self.health,
            'maxHealth': self.maxHealth,
            'color': self.color,
            'name': self.name,
            'direction': self.direction,
            'weaponAngle': self.weaponAngle or 0,
            'score': self.score,
        }


@dataclass
class Pill:
    id: str
    x: float
    y: float
    points: int = 1
    spawnTime: int = 0

    def to_dict(self):
        return asdict(self)


@dataclass
class ScoreRecord:
    name: str
    score: int
    lastSeen: int

    @staticmethod
    def key_for(name: str, sid: str) -> str:
        return f"{name}_{sid}"

    def to_dict(self):
        return asdict(self)


@dataclass
class SessionToken:
    token: str
    name: str
    score: int
    created: int


@dataclass
class DailyEntry:
    name: str
    score: int
    timestamp: int

    def to_dict(self):
        return asdict(self)


@dataclass
class AllTimeEntry:
    name: str
    score: int
    timestamp: int
    date: str = field(default='')

    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_dict(cls, data) -> Optional['AllTimeEntry']:
        try:
            return cls(
                name=str(data['name']),
                score=int(data['score']),
                timestamp=int(data.get('timestamp', 0)),
                date=str(data.get('date', '')),
            )
        except (KeyError, TypeError, ValueError):
            return None
