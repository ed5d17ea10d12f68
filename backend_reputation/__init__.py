"""
Backend Reputation: time-decayed, relation-aware contribution scoring.

Turns snapshot interaction logs (comments, votes, proposals, reviews) into
per-actor reputation scores plus a full audit trail. Modular architecture with
clear separation between snapshot loading, the analysis engine, object storage
and the worker entrypoint that runs an algorithm for one run id.
"""

__version__ = "0.1.0"
