from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)

@main.route('/health')
def health():
    return jsonify({'status': 'OK', 'timestamp': datetime.now(timezone.utc).isoformat()}), 200

@main.route('/api/leaderboards')
def leaderboards():
    """
    Returns the current daily and all-time leaderboards.
    """
    ctx = current_app.extensions['arena']
    with ctx.lock:
        ctx.daily.update_time_remaining()
        return jsonify({
            'dailyLeaderboard': ctx.daily.snapshot(),
            'allTimeLeaderboard': {'topScores': ctx.all_time.top()},
        }), 200
