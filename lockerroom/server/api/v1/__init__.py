"""Version 1 of the LockerRoom REST API."""
