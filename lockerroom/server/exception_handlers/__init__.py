"""
Exception handlers for the LockerRoom server.

This package contains custom exception handlers for domain errors and
unhandled exceptions, and a setup function to register them with the
FastAPI application.
"""

from .global_handler import setup_exception_handlers

__all__ = ["setup_exception_handlers"]
