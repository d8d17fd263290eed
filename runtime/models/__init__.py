"""
Pydantic models used by the DocChat runtime.

Split into:
- session_models: Session + Turn + SessionStatus
- api_models: HTTP request/response schemas
"""
