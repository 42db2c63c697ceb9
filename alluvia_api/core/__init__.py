"""Core configuration, errors, logging and Pydantic models.

Contains:
- config.py: settings, asset paths and output key conventions
- errors.py: exception taxonomy and the API error payload
- logging.py: structlog setup
- models_io.py: request/response schemas used across routers
"""
