"""
Domain services for the LockerRoom server.

Each module exposes async functions that take a :class:`SqlRepoBundle`
and the acting user, enforce permissions and invariants, and raise
:class:`~lockerroom.core.errors.LockerRoomError` subclasses on failure.
"""
