"""Domain rules and API I/O models."""
