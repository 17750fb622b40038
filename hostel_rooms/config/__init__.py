"""
Configuration package for the hostel room allocation service.

Environment settings and logging setup.
"""

from hostel_rooms.config.settings import Settings, get_settings, settings
from hostel_rooms.config.logging import get_logger, setup_logging

__all__ = ['Settings', 'get_settings', 'settings', 'get_logger', 'setup_logging']
