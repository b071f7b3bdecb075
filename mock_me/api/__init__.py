"""
API routers package.
"""
from mock_me.api import health, users, interviews, voice_interview, errors, static

__all__ = ["health", "users", "interviews", "voice_interview", "errors", "static"]
