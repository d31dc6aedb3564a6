"""Stream driver and runner helpers."""
