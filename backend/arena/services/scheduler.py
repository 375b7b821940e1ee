from arena.services.pills import spawn_pill
from arena.services.players import respawn_player


def daily_tick(ctx) -> bool:
    with ctx.lock:
        return ctx.daily.tick()


def flush_scores(ctx) -> bool:
    """Opportunistic ledger save; skipped while the ledger is empty."""
    with ctx.lock:
        if not ctx.player_scores:
            return False
        return ctx.store.save_player_scores(ctx.player_scores)


def sweep_tokens(ctx) -> int:
    with ctx.lock:
        return ctx.tokens.sweep()


def schedule_respawn(app, ctx, sid: str) -> None:
    """Respawn ``sid`` after the configured delay if it is still connected.

    Runs inline in TESTING mode so tests stay deterministic.
    """
    delay = ctx.respawn_delay_ms / 1000.0
    socketio = ctx.socketio

    def _worker(target_sid: str, wait: float):
        if wait:
            socketio.sleep(wait)
        player = respawn_player(ctx, target_sid)
        if player is None:
            app.logger.info(f"[respawn-skip] {target_sid} disconnected before respawn")
        else:
            app.logger.info(f"[respawn] {player.name} back at ({player.x:.0f}, {player.y:.0f})")

    if app.config.get('TESTING'):
        _worker(sid, delay)
    else:
        socketio.start_background_task(_worker, sid, delay)


def _every(app, interval: float, job, name: str, ctx):
    socketio = ctx.socketio

    def _loop():
        app.logger.info(f"[timer-start] {name} every {interval}s")
        while True:
            socketio.sleep(interval)
            try:
                job(ctx)
            except Exception:
                app.logger.exception(f"[timer-error] {name} failed")

    return socketio.start_background_task(_loop)


def _initial_spawn_ramp(app, ctx, interval: float):
    socketio = ctx.socketio

    def _ramp():
        # One pill per step so startup does not burst the whole pool at once
        for _ in range(ctx.max_pills):
            try:
                spawn_pill(ctx)
            except Exception:
                app.logger.exception('[timer-error] initial pill spawn failed')
            socketio.sleep(interval)
        app.logger.info(f"[pill-ramp] initial {ctx.max_pills} pills spawned gradually")

    return socketio.start_background_task(_ramp)


def start_background_timers(app, ctx) -> None:
    """Start the countdown, flush, sweep and spawn timers.

    No-ops in TESTING mode unless ENABLE_TIMERS_IN_TESTS is set.
    """
    if app.config.get('TESTING') and not app.config.get('ENABLE_TIMERS_IN_TESTS'):
        return
    if not app.config.get('ENABLE_TIMERS', True):
        return

    _every(app, 1.0, daily_tick, 'daily-countdown', ctx)
    _every(app, float(app.config.get('SCORE_FLUSH_INTERVAL_SEC', 30)), flush_scores, 'score-flush', ctx)
    _every(app, float(app.config.get('TOKEN_SWEEP_INTERVAL_SEC', 3600)), sweep_tokens, 'token-sweep', ctx)
    _initial_spawn_ramp(app, ctx, app.config.get('INITIAL_PILL_SPAWN_INTERVAL_MS', 100) / 1000.0)
    _every(app, app.config.get('PILL_SPAWN_INTERVAL_MS', 500) / 1000.0, spawn_pill, 'pill-spawn', ctx)
