"""
In-memory fixed window rate limiting, keyed by client IP.

Counters are per process. Running several instances multiplies the
effective limit by the instance count.
"""

import logging
import math
import threading
import time
from collections import namedtuple
from functools import wraps

from flask import current_app, jsonify, request

from .logging_service import event_log

logger = logging.getLogger(__name__)

RateLimitResult = namedtuple('RateLimitResult', ['allowed', 'limit', 'remaining', 'reset_at'])


class FixedWindowRateLimiter:
    """
    Counts hits per key inside a fixed window.

    A key's window opens on its first hit and lasts `window_seconds`; once it
    has elapsed the next hit opens a fresh window with the count back at one.
    Denied hits still count, so hammering does not earn extra attempts.
    """

    def __init__(self, limit, window_seconds, name='default', clock=time.monotonic):
        self.limit = limit
        self.window_seconds = window_seconds
        self.name = name
        self._clock = clock
        self._windows = {}  # key -> [window_start, count]
        self._lock = threading.Lock()
        self._last_prune = clock()

    def _prune(self, now):
        """Drop windows that have expired (at most once per window)"""
        if now - self._last_prune < self.window_seconds:
            return
        expired = [k for k, (start, _) in self._windows.items()
                   if now - start >= self.window_seconds]
        for key in expired:
            del self._windows[key]
        self._last_prune = now

    def hit(self, key):
        """Record one hit for `key` and report whether it is within the limit"""
        with self._lock:
            now = self._clock()
            self._prune(now)

            window = self._windows.get(key)
            if window is None or now - window[0] >= self.window_seconds:
                window = [now, 0]
                self._windows[key] = window
            window[1] += 1

            count = window[1]
            reset_at = window[0] + self.window_seconds

        return RateLimitResult(
            allowed=count <= self.limit,
            limit=self.limit,
            remaining=max(self.limit - count, 0),
            reset_at=reset_at,
        )

    def seconds_until_reset(self, result):
        return max(int(math.ceil(result.reset_at - self._clock())), 0)

    def reset(self, key=None):
        """Clear one key, or every key when none is given"""
        with self._lock:
            if key is None:
                self._windows.clear()
            else:
                self._windows.pop(key, None)

    def __len__(self):
        return len(self._windows)


def get_client_ip():
    """Client IP as seen after ProxyFix has applied the trusted hops"""
    return request.remote_addr or 'unknown'


class RateLimiter:
    """
    Flask extension holding the two policies: a general one checked for
    every request and a strict one for email signups.

    Usage:
        limiter = RateLimiter()
        limiter.init_app(app)

        @bp.route('/subscribe', methods=['POST'])
        @limiter.limit_signups
        def subscribe(): ...
    """

    GENERAL_MESSAGE = 'Too many requests, please try again later.'
    SIGNUP_MESSAGE = 'Too many email signup attempts, please try again later.'

    def __init__(self, app=None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        window = app.config.get('RATELIMIT_WINDOW_SECONDS', 15 * 60)
        app.extensions['rate_limiter'] = {
            'general': FixedWindowRateLimiter(
                app.config.get('RATELIMIT_GENERAL', 100), window, name='general'),
            'signup': FixedWindowRateLimiter(
                app.config.get('RATELIMIT_SIGNUP', 5), window, name='signup'),
        }
        app.before_request(self._check_general)
        app.after_request(self._apply_headers)

    @staticmethod
    def policy(name):
        return current_app.extensions['rate_limiter'][name]

    @staticmethod
    def _enabled():
        return current_app.config.get('RATELIMIT_ENABLED', True)

    def _check(self, name, message):
        """Hit the named policy; returns a 429 response or None"""
        limiter = self.policy(name)
        ip = get_client_ip()
        result = limiter.hit(ip)
        request.environ['comingsoon.ratelimit'] = (limiter, result)

        if result.allowed:
            return None

        retry_after = limiter.seconds_until_reset(result)
        logger.warning(f"Rate limit '{name}' exceeded by {ip}")
        event_log.warning('rate_limit', f"Rate limit '{name}' exceeded", {'ip': ip})
        response = jsonify({
            'success': False,
            'message': message,
            'retry_after': retry_after,
        })
        response.status_code = 429
        response.headers['Retry-After'] = str(retry_after)
        return response

    def _check_general(self):
        if not self._enabled():
            return None
        return self._check('general', self.GENERAL_MESSAGE)

    def _apply_headers(self, response):
        """Standard RateLimit-* headers for the most specific policy applied"""
        state = request.environ.get('comingsoon.ratelimit')
        if state is not None:
            limiter, result = state
            response.headers['RateLimit-Limit'] = str(result.limit)
            response.headers['RateLimit-Remaining'] = str(result.remaining)
            response.headers['RateLimit-Reset'] = str(limiter.seconds_until_reset(result))
        return response

    def limit_signups(self, f):
        """Decorator applying the strict signup policy to a view"""
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if self._enabled():
                denied = self._check('signup', self.SIGNUP_MESSAGE)
                if denied is not None:
                    return denied
            return f(*args, **kwargs)
        return decorated_function


limiter = RateLimiter()
