"""Core Layer — pure marketplace rules, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic (clocks and RNGs are passed in or defaulted)

Design Decisions:
    - Calculators (completion score, earnings split, badges, coins) are plain
      functions over dataclasses so they can be tested without a database
"""
