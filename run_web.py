#!/usr/bin/env python3
"""
Main entry point for the Local XI lineup manager web application.

This script launches the Flask-based web server.
"""
import logging
import os

from localxi.ui.web_app import run_web_app

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    # Serve static files from the project root
    project_root = os.path.dirname(os.path.abspath(__file__))
    run_web_app(static_folder=project_root)
