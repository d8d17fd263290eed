"""
Runtime package for the DocChat document conversation service.

This package contains:
- API layer (FastAPI server + routes)
- Agents (the ConversationController state machine)
- Stores (turn log, context, sessions, event log)
- Transports (chat answer services)
- Models (Pydantic models for sessions and HTTP payloads)
"""
