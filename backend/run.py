import signal
import sys

from arena import create_app, socketio
from arena.services.scheduler import start_background_timers

app = create_app()


def _graceful_shutdown(signum, frame):
    app.logger.info(f"[shutdown] signal {signum} received, flushing data")
    app.extensions['arena'].flush_all()
    sys.exit(0)


if __name__ == '__main__':
    signal.signal(signal.SIGINT, _graceful_shutdown)
    signal.signal(signal.SIGTERM, _graceful_shutdown)
    # Timers only run in the server process, never for `flask` CLI commands
    start_background_timers(app, app.extensions['arena'])
    # Use SocketIO server to enable websockets in dev
    socketio.run(app, host=app.config['HOST'], port=app.config['PORT'], allow_unsafe_werkzeug=True)
