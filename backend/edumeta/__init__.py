"""Application package for the educational platform metadata store.

This package exposes the model, repository, service and route modules
used by the FastAPI application. It is intentionally lightweight;
individual modules contain the concrete implementations and
documentation.
"""
