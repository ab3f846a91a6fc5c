"""
Error kinds raised by the Bloom Watch service layer
"""


class BloomServiceError(Exception):
    """Base class for all service errors"""


class InvalidRequest(BloomServiceError):
    """A required field is missing from the client request"""


class ExternalUnavailable(BloomServiceError):
    """The forecasting service failed, timed out or returned a non-success status"""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class FixtureUnreadable(BloomServiceError):
    """The mock predictions file is missing or malformed"""


class PersistenceFailure(BloomServiceError):
    """Archiving an observation to MongoDB failed"""
