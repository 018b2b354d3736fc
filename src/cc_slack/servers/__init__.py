"""HTTP server receiving Claude Code hook events."""
