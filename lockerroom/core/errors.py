from __future__ import annotations


class LockerRoomError(Exception):
    status_code: int = 400
    code: str = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(LockerRoomError):
    status_code = 404
    code = "not_found"

    def __init__(self, entity: str, entity_id: str | int | None = None) -> None:
        if entity_id is None:
            super().__init__(f"{entity} not found")
        else:
            super().__init__(f"{entity} '{entity_id}' not found")


class AuthenticationError(LockerRoomError):
    status_code = 401
    code = "unauthorized"


class PermissionDeniedError(LockerRoomError):
    status_code = 403
    code = "forbidden"


class DomainValidationError(LockerRoomError):
    status_code = 400
    code = "validation_error"


class ConflictError(LockerRoomError):
    status_code = 409
    code = "conflict"


class InvalidTransitionError(ConflictError):
    code = "invalid_transition"

    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"Cannot move submission from '{current}' to '{target}'")
        self.current = current
        self.target = target


class EnrollmentLimitError(ConflictError):
    code = "enrollment_limit_reached"

    def __init__(self, current_count: int, max_students: int) -> None:
        super().__init__(
            f"Student enrollment limit reached ({current_count}/{max_students}). "
            "Please contact system admin to increase capacity."
        )
        self.current_count = current_count
        self.max_students = max_students
