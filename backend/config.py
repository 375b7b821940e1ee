import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Directory holding player_scores.json, daily_leaderboard.json, all_time_leaderboard.json
    DATA_DIR = os.environ.get('DATA_DIR') or '.'
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    HOST = os.environ.get('HOST', '0.0.0.0' if os.environ.get('FLASK_ENV') == 'production' else 'localhost')
    PORT = int(os.environ.get('PORT', '3000'))
    # Play field
    MAP_WIDTH = int(os.environ.get('MAP_WIDTH', '4800'))
    MAP_HEIGHT = int(os.environ.get('MAP_HEIGHT', '3200'))
    SPAWN_MARGIN = int(os.environ.get('SPAWN_MARGIN', '100'))
    # Pills
    MAX_PILLS = int(os.environ.get('MAX_PILLS', '30'))
    PILL_SPAWN_INTERVAL_MS = int(os.environ.get('PILL_SPAWN_INTERVAL_MS', '500'))
    INITIAL_PILL_SPAWN_INTERVAL_MS = int(os.environ.get('INITIAL_PILL_SPAWN_INTERVAL_MS', '100'))
    # Movement: minimum gap between accepted moves per connection (ms)
    MOVE_THROTTLE_MS = int(os.environ.get('MOVE_THROTTLE_MS', '16'))
    RESPAWN_DELAY_MS = int(os.environ.get('RESPAWN_DELAY_MS', '3000'))
    # Timers (seconds)
    SCORE_FLUSH_INTERVAL_SEC = int(os.environ.get('SCORE_FLUSH_INTERVAL_SEC', '30'))
    TOKEN_SWEEP_INTERVAL_SEC = int(os.environ.get('TOKEN_SWEEP_INTERVAL_SEC', '3600'))
    TOKEN_TTL_SEC = int(os.environ.get('TOKEN_TTL_SEC', str(24 * 60 * 60)))
    # Background timers are skipped when TESTING unless this is set
    ENABLE_TIMERS = os.environ.get('ENABLE_TIMERS', '1') not in ('0', 'false', 'False')
