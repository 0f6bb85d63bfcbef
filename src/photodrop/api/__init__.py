"""Photodrop — FastAPI REST API layer.

This package contains the FastAPI application factory, Pydantic response
models, the error envelope, and the upload size guard.

Modules
-------
main
    ``create_app()`` factory with all route handlers and the ``main()`` CLI
    entry point.
models
    Pydantic models for API responses.
errors
    ``ApiError`` and its JSON exception handler.
middleware
    Early rejection of oversized upload requests.
"""
