"""Runtime wiring: scheduler, services, and the context that owns them."""
