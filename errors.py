"""Error taxonomy for the portfolio API.

Every error carries the HTTP status it maps to, so the request boundary can
turn it into the JSON envelope without a lookup table.
"""


class PortfolioError(Exception):
    """Base class for errors surfaced to API clients"""

    status_code = 500

    def __init__(self, message, data=None, error=None):
        super().__init__(message)
        self.message = message
        self.data = data
        self.error = error

    def to_dict(self):
        payload = {'success': False, 'message': self.message}
        if self.error:
            payload['error'] = self.error
        if self.data is not None:
            payload['data'] = self.data
        return payload


class ValidationError(PortfolioError):
    """Missing or malformed input"""
    status_code = 400


class AuthError(PortfolioError):
    """PIN mismatch"""
    status_code = 401


class NotFoundError(PortfolioError):
    """Id lookup miss"""
    status_code = 404


class ConfigError(PortfolioError):
    """Required server configuration is absent"""
    status_code = 500


class StorageError(PortfolioError):
    """Disk or database read/write failure, or a malformed document"""
    status_code = 500
