"""
UI package for the Clubhouse team manager.

This package contains the Flask JSON API used by the app's screens and the
mapping from service error kinds to user-facing messages.
"""
from .web_app import create_app, run_web_app, WebAppState
from .messages import error_message

__all__ = ["create_app", "run_web_app", "WebAppState", "error_message"]
