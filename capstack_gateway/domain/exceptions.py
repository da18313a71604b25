"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ProfileUnavailableError(DomainException):
    """Profile store could not be read (the caller falls back to the default profile)"""

    pass


class AuthenticationError(DomainException):
    """Credentials or bearer token rejected"""

    pass


class UserAlreadyExistsError(DomainException):
    """Registration attempted with an email that is already taken"""

    pass


class NotificationError(DomainException):
    """Notification webhook rejected the event after all retries"""

    pass
