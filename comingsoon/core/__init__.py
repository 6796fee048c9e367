"""
Core
====

Shared services used by every blueprint module: configuration, the
database handle, logging, rate limiting, error handling and security
headers.
"""

from .config import Config
from .database import db, init_database
from .logging_service import LoggingService, event_log
from .rate_limit import FixedWindowRateLimiter, RateLimiter, limiter

__all__ = [
    'Config', 'db', 'init_database', 'LoggingService', 'event_log',
    'FixedWindowRateLimiter', 'RateLimiter', 'limiter',
]
