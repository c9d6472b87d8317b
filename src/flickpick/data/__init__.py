"""Content suppliers and the session-memory persistence layer."""
