"""LockerRoom.

Backend service for LockerRoom, a social platform for student athletes.

High-level architecture
-----------------------

The codebase is split into two layers:

- ``lockerroom.core``: framework-agnostic pieces shared by every part of the
  service.

  - Logging and optional Logfire monitoring.
  - The domain exception hierarchy.
  - SQLModel entities, async repositories and session management.
  - Domain enums (roles, submission lifecycle) and API I/O models.

- ``lockerroom.server``: the FastAPI application.

  - Settings loaded from the environment.
  - Service modules holding the product rules (feed pagination, enrollment
    limits, subscription bookkeeping, the XEN Watch review workflow, ...).
  - Versioned REST routers under ``/api/v1``.

Typical request flow
--------------------

1. A router resolves the caller from the bearer token.
2. The router calls a service function with the request-scoped session.
3. The service enforces permissions and invariants, raising
   ``lockerroom.core.errors.LockerRoomError`` subclasses on violation.
4. Exception handlers translate those errors into coarse HTTP categories.
"""

__version__ = "0.1.0"
