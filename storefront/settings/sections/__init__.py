"""Settings sections, one per concern."""
