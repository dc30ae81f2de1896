#!/usr/bin/env python3
"""
Main entry point for the Clubhouse web API.

This script configures logging from the environment and launches the Flask
server.
"""
import logging

from clubhouse.ui.web_app import run_web_app
from clubhouse.utils import AppConfig

if __name__ == "__main__":
    config = AppConfig.from_env()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    run_web_app(config)
