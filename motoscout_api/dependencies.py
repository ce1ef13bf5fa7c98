"""
Request dependencies shared by the route modules.
"""
from fastapi import Request

from motoscout.core import SearchSession


def get_session(request: Request) -> SearchSession:
    """The SearchSession created at application startup."""
    return request.app.state.session
