"""
Finance Tracker - Source Package

Client-side personal finance tracker. All financial records live in
in-memory store slices mirrored to a durable document store.

DESIGN PRINCIPLES:
1. Reads are synchronous, writes persist in the background
2. The persisted snapshot is the only source of truth across restarts
3. Snapshots are versioned and migrated on load
4. Empty collections are seeded with deterministic defaults
5. Storage backend is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
