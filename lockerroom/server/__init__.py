"""
LockerRoom Server Package.

This package contains the web server implementation for the LockerRoom platform.
It includes the API definition, service logic, and configuration.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    core: Settings and constants.
    services: Product rules invoked by the routers.
    exception_handlers: Translation of errors into HTTP responses.
    middleware: Request logging and timing.
"""
