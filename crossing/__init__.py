"""
Crossing - River Crossing Puzzle Engine

A deterministic state machine for the farmer / cat / rabbit / vegetable
river-crossing puzzle. The package provides:
- The puzzle engine (state, moves, rules, events)
- A move log that records every event per user and session
- Session management and CSV export of play logs
- A REST API and a text-mode CLI
"""

__version__ = "0.1.0"
