"""Arena domain services: persistence, tokens, leaderboards, pills, players, timers.

This package contains the game rules that socket handlers and HTTP routes
call into, keeping transport concerns separated from core game mechanics.
"""
