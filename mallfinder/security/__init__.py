"""Security package - roles, permissions and per-request session context."""
