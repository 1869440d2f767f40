"""HTTP boundary for the UI."""
