from flask import current_app, request
from flask_socketio import emit

from arena import socketio
from arena.services.players import add_player, move_player, remove_player, set_username
from arena.services.scheduler import schedule_respawn


def _ctx():
    return current_app.extensions['arena']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect():
    ctx = _ctx()
    sid = _get_sid()
    player = add_player(ctx, sid)
    with ctx.lock:
        emit('gameState', ctx.snapshot())
        ctx.broadcaster.to_all('playerUpdate', player.to_update())
        ctx.broadcaster.to_all('playerCountUpdate', ctx.player_count)


def handle_disconnect(*args):
    remove_player(_ctx(), _get_sid())


def handle_set_username(data=None):
    set_username(_ctx(), _get_sid(), data)


def handle_move(data=None):
    move_player(_ctx(), _get_sid(), data)


def handle_respawn(*args):
    ctx = _ctx()
    sid = _get_sid()
    if sid not in ctx.players:
        return
    schedule_respawn(current_app._get_current_object(), ctx, sid)


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('setUsername', handle_set_username, namespace=namespace)
    socketio.on_event('move', handle_move, namespace=namespace)
    socketio.on_event('respawn', handle_respawn, namespace=namespace)
