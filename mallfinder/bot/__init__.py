"""Bot wiring: handler registration, notification delivery and entry point."""
