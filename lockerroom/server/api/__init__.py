"""API routers for the LockerRoom server."""
