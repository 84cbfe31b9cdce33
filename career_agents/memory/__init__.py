"""Memory subsystem package.

Architectural role:
    Holds the in-memory session store (`session_store`) that binds sessions to
    owners and serializes concurrent orchestration calls per session.
"""
