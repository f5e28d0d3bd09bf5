"""
Shared FastAPI dependencies.
"""

import logging

from fastapi import Request


def get_app_logger(request: Request) -> logging.Logger:
    """The logger built at application startup."""
    return request.app.state.logger
