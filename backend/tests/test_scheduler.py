from datetime import datetime

import pytest

from config import Config

from arena.services.persistence import PLAYER_SCORES_FILE
from arena.services.players import add_player, set_username
from arena.services.scheduler import (
    daily_tick,
    flush_scores,
    schedule_respawn,
    start_background_timers,
    sweep_tokens,
)


def test_flush_skipped_while_ledger_empty(ctx, tmp_path):
    assert flush_scores(ctx) is False
    assert not (tmp_path / PLAYER_SCORES_FILE).exists()


def test_flush_writes_ledger(recording_ctx, tmp_path):
    ctx = recording_ctx
    add_player(ctx, 'sid-1')
    set_username(ctx, 'sid-1', 'Dana')
    (tmp_path / PLAYER_SCORES_FILE).unlink()
    assert flush_scores(ctx) is True
    assert 'Dana_sid-1' in (tmp_path / PLAYER_SCORES_FILE).read_text(encoding='utf-8')


def test_sweep_uses_context_clock(ctx, clock):
    ctx.tokens.mint('Old', 5)
    clock.advance(seconds=24 * 60 * 60 + 1)
    assert sweep_tokens(ctx) == 1
    assert len(ctx.tokens) == 0


def test_daily_tick_rolls_over_at_midnight(recording_ctx, recorder, clock):
    ctx = recording_ctx
    ctx.daily.report('Eve', 3)
    assert daily_tick(ctx) is False
    clock.set(datetime(2026, 10, 20, 0, 0, 0))
    assert daily_tick(ctx) is True
    assert ctx.daily.entries == {}
    assert len(recorder.named('timeUpdate')) == 2


def test_respawn_for_departed_player_is_discarded(flask_app, recording_ctx, recorder):
    schedule_respawn(flask_app, recording_ctx, 'gone')
    assert recorder.named('playerRespawned') == []


def test_timers_not_started_in_testing(flask_app, ctx, monkeypatch):
    started = []
    monkeypatch.setattr(ctx.socketio, 'start_background_task',
                        lambda *a, **kw: started.append(a))
    start_background_timers(flask_app, ctx)
    assert started == []

class StopTimer(Exception):
    pass


@pytest.fixture()
def run_tasks_inline(monkeypatch):
    """Runs background tasks synchronously and records every sleep."""
    from arena import socketio
    sleeps = []
    started = []

    def _start(fn, *args, **kwargs):
        started.append(fn)
        try:
            fn(*args, **kwargs)
        except StopTimer:
            pass

    def _sleep(seconds):
        sleeps.append(seconds)
        if stop_on_sleep:
            raise StopTimer()

    stop_on_sleep = []
    monkeypatch.setattr(socketio, 'start_background_task', _start)
    monkeypatch.setattr(socketio, 'sleep', _sleep)
    return {'sleeps': sleeps, 'started': started, 'stop_on_sleep': stop_on_sleep}


def production_intervals():
    return {
        'RESPAWN_DELAY_MS': Config.RESPAWN_DELAY_MS,
        'INITIAL_PILL_SPAWN_INTERVAL_MS': Config.INITIAL_PILL_SPAWN_INTERVAL_MS,
        'PILL_SPAWN_INTERVAL_MS': Config.PILL_SPAWN_INTERVAL_MS,
        'SCORE_FLUSH_INTERVAL_SEC': Config.SCORE_FLUSH_INTERVAL_SEC,
        'TOKEN_SWEEP_INTERVAL_SEC': Config.TOKEN_SWEEP_INTERVAL_SEC,
    }


def test_create_app_never_starts_timers(make_app, run_tasks_inline):
    make_app(ENABLE_TIMERS=True, ENABLE_TIMERS_IN_TESTS=True)
    assert run_tasks_inline['started'] == []


def test_timer_intervals(make_app, run_tasks_inline):
    app = make_app(ENABLE_TIMERS=True, ENABLE_TIMERS_IN_TESTS=True, **production_intervals())
    ctx = app.extensions['arena']
    run_tasks_inline['stop_on_sleep'].append(True)

    start_background_timers(app, ctx)

    # countdown, flush, sweep, ramp, steady spawn
    assert len(run_tasks_inline['started']) == 5
    assert run_tasks_inline['sleeps'] == [1.0, 30.0, 3600.0, 0.1, 0.5]
    # The ramp spawns before its first pause
    assert len(ctx.pills) == 1


def test_respawn_waits_three_seconds(make_app, run_tasks_inline, monkeypatch):
    app = make_app(**production_intervals())
    monkeypatch.setitem(app.config, 'TESTING', False)
    ctx = app.extensions['arena']
    player = add_player(ctx, 'sid-1')
    player.health = 0

    schedule_respawn(app, ctx, 'sid-1')

    assert run_tasks_inline['sleeps'] == [3.0]
    assert player.health == player.maxHealth
