"""Infrastructure layer - database engine, event bus, external adapters."""
