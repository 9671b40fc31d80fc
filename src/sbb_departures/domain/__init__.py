"""Domain layer for SBB departures."""
