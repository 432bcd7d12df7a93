"""
UI package for the Local XI lineup manager.

This package contains the Flask web server and its JSON API.
"""
from .web_app import WebAppState, create_app, run_web_app

__all__ = ["WebAppState", "create_app", "run_web_app"]
