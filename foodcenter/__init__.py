"""
Food center API.

Responsibilities:
- Serve food center records over HTTP with geo and free-text search.
- Keep basic user records and session-based login.
"""
