"""Background jobs for the engine app."""
