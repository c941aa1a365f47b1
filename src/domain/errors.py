from __future__ import annotations


class AccountDeletionError(Exception):
    """Base class for failures surfaced by the account deletion handler."""


class AuthResolutionError(AccountDeletionError):
    """Bearer credential missing, malformed or not recognized."""


class ProfileDeleteError(AccountDeletionError):
    """Profile row could not be deleted. Logged and tolerated by default."""


class IdentityDeleteError(AccountDeletionError):
    """Auth user could not be deleted. Always fatal."""


class NotificationForwardingError(Exception):
    """Base class for per-event failures in the notification forwarder.

    These never escape the listener loop; the event is logged and dropped.
    """


class InvalidPayloadError(NotificationForwardingError):
    pass


class TokenLookupError(NotificationForwardingError):
    pass


class GatewayAuthError(NotificationForwardingError):
    pass


class GatewaySendError(NotificationForwardingError):
    def __init__(self, message: str, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
