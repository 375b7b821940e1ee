from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

allowed_origins = "*"
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)

def create_app(config_class=Config, clock=None, rng=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Shared game state lives on the app so test apps stay isolated
    from arena.context import GameContext
    context_kwargs = {'rng': rng}
    if clock is not None:
        context_kwargs['clock'] = clock
    ctx = GameContext(flask_app.config, socketio, flask_app.logger, **context_kwargs)
    ctx.load()
    flask_app.extensions['arena'] = ctx

    # Import and register blueprints here
    from arena.main import main
    flask_app.register_blueprint(main)

    from arena.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=flask_app.config.get('SOCKETIO_NAMESPACE', '/'))

    @click.command('reset-daily')
    def reset_daily_command():
        """Clears today's leaderboard on disk. Run it while the server is stopped."""
        with ctx.lock:
            ctx.daily.reset()
        click.echo(f'Daily leaderboard reset for {ctx.daily.current_day}')

    @click.command('show-leaderboards')
    def show_leaderboards_command():
        """Prints the daily and all-time leaderboards."""
        with ctx.lock:
            daily = ctx.daily.top()
            all_time = ctx.all_time.top()
        click.echo(f'Daily ({ctx.daily.current_day}):')
        for idx, entry in enumerate(daily, start=1):
            click.echo(f"  {idx}. {entry['name']}: {entry['score']}")
        click.echo('All-time:')
        for idx, entry in enumerate(all_time, start=1):
            click.echo(f"  {idx}. {entry['name']}: {entry['score']} ({entry['date']})")

    flask_app.cli.add_command(reset_daily_command)
    flask_app.cli.add_command(show_leaderboards_command)

    return flask_app
