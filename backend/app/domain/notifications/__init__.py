"""Entry confirmation notifications."""

from .dispatcher import ConfirmationDispatcher, deliver_confirmation

__all__ = ["ConfirmationDispatcher", "deliver_confirmation"]
