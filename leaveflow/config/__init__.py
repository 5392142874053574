"""
Configuration package for the leave workflow engine.

This package contains the configuration modules for the application:
environment settings, logging and database connections.
"""

from leaveflow.config.settings import settings, get_settings
from leaveflow.config.logging import setup_logging, get_logger
from leaveflow.config.database import get_db_session, get_db_context, init_db

__all__ = [
    'settings',
    'get_settings',
    'setup_logging',
    'get_logger',
    'get_db_session',
    'get_db_context',
    'init_db',
]
