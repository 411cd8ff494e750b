"""PIN gate for the admin panel.

The server keeps no session: a successful login only tells the client it may
show the admin UI. The PIN is a single shared secret from ADMIN_PIN and is
compared in plaintext, which is the accepted level of protection for this site.
"""
import logging
from datetime import datetime, timezone
from functools import wraps

from flask import current_app, request

from errors import AuthError, ConfigError, ValidationError

logger = logging.getLogger(__name__)

SERVICE_NAME = 'Portfolio Admin Auth'
SERVICE_VERSION = '1.0.0'
PIN_HEADER = 'X-Admin-PIN'


def utc_timestamp():
    return datetime.now(timezone.utc).isoformat()


def _normalize_pin(pin):
    if pin is None or isinstance(pin, bool):
        return ''
    return str(pin).strip()


def _require_inputs(pin, secret):
    submitted = _normalize_pin(pin)
    if not submitted:
        raise ValidationError('PIN is required')
    if not secret:
        logger.error("ADMIN_PIN environment variable is not set")
        raise ConfigError('Server configuration error')
    return submitted


def login(pin, secret):
    """Check the PIN; raise AuthError on mismatch"""
    submitted = _require_inputs(pin, secret)
    if submitted != str(secret):
        logger.warning("Failed admin login attempt")
        raise AuthError('Invalid PIN', data={'authenticated': False})
    logger.info("Admin login successful")
    return {'authenticated': True, 'timestamp': utc_timestamp()}


def verify(pin, secret):
    """Same comparison as login() but reports the result instead of failing"""
    submitted = _require_inputs(pin, secret)
    return {'valid': submitted == str(secret), 'timestamp': utc_timestamp()}


def status():
    return {
        'service': SERVICE_NAME,
        'version': SERVICE_VERSION,
        'timestamp': utc_timestamp(),
    }


def pin_required(f):
    """Decorator to require the admin PIN header on write routes when REQUIRE_PIN_FOR_WRITES is on"""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if current_app.config.get('REQUIRE_PIN_FOR_WRITES'):
            secret = current_app.config.get('ADMIN_PIN')
            submitted = request.headers.get(PIN_HEADER)
            if not _normalize_pin(submitted):
                raise AuthError('Admin PIN header is required')
            login(submitted, secret)
        return f(*args, **kwargs)

    return decorated_function
