"""Core — pure functions and types with no IO.

Invariants:
    - Nothing here touches the network, the database or the filesystem
    - Shell modules (api/, services/) import from core, never the reverse
"""
