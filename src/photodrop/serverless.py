"""Serverless entry point.

Wraps the Photodrop application in a Lambda-style ``handler(event, context)``
so it can run as a Netlify or AWS Lambda function.  Function runtimes only
offer a writable temp directory, so uploads and the database live under it
(see :func:`~photodrop.core.config.serverless_config`); nothing survives a
cold start.

Deploy with the handler path ``photodrop.serverless.handler``.
"""

from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI
from mangum import Mangum

from photodrop.api.main import create_app
from photodrop.core.config import serverless_config


def create_serverless_app(base_dir: Path | None = None) -> FastAPI:
    """Build the application with ephemeral storage and open CORS."""
    return create_app(serverless_config(base_dir), serverless=True)


def create_handler(base_dir: Path | None = None) -> Mangum:
    """Build a Lambda handler around a fresh serverless application."""
    return Mangum(create_serverless_app(base_dir), lifespan="off")


handler = create_handler()
