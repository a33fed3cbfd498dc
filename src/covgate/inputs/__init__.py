"""Coverage report readers."""
