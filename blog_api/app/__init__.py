"""
Application package initializer.

The application is organised into a few small layers: ``core`` holds
configuration, logging, errors and the document store; ``schemas``
defines the request and response bodies; ``services`` holds the
business logic; and ``api/v1`` exposes the HTTP routes.
"""

from .main import app, create_app  # noqa: F401
