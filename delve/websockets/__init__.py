"""Socket.IO event handlers (imported by delve/__init__ for registration)."""
