"""Game domain services: grid generation, session lifecycle and timers.

This package contains the word-search game logic imported by HTTP routes
and socket handlers, keeping transport concerns separated from core game
mechanics.
"""
