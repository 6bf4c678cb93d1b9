"""Error taxonomy shared by services, stores and routes."""

from __future__ import annotations

from fastapi import status


class MarketplaceError(Exception):
    """Base class for errors surfaced to API callers."""

    code = "internal_failure"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.code)
        self.message = message or self.code


class InvalidInput(MarketplaceError):
    code = "invalid_input"
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(MarketplaceError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class InsufficientBalance(MarketplaceError):
    code = "insufficient_balance"
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidTransition(MarketplaceError):
    """Raised when a withdrawal request is moved out of a state that forbids it."""

    code = "invalid_transition"
    status_code = status.HTTP_409_CONFLICT


class AlreadySettled(MarketplaceError):
    """Raised by stores when an order id already has a settlement row."""

    code = "already_settled"
    status_code = status.HTTP_200_OK

    def __init__(self, order_id: str) -> None:
        super().__init__(f"Order {order_id} is already settled")
        self.order_id = order_id


class InternalFailure(MarketplaceError):
    code = "internal_failure"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
