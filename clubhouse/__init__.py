"""
Clubhouse

Client-resident core for running one or several sports teams: roster,
schedule, invitations, payments, chat and notifications.

This package provides the entity store and its services, plus a Flask JSON
API the app's screens talk to.
"""
from .models import AppState, Team, Player
from .services import ServiceFactory, TeamStore, PersistenceService
from .ui import create_app, run_web_app
from .utils import AppConfig, APP_TITLE

__version__ = "1.0.0"

__all__ = [
    "AppState", "Team", "Player", "ServiceFactory", "TeamStore", "PersistenceService",
    "create_app", "run_web_app", "AppConfig", "APP_TITLE",
]
