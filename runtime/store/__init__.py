"""
Storage abstractions for the DocChat runtime.

Includes:
- TurnLog: append-only, ordered conversation turns
- ContextStore: the single grounding text of a session
- SessionStore: in-memory session_id -> controller registry
- LogStore: append-only event logging for debugging / analysis
"""
