"""
Exception hierarchy for SimpBot.

Expected non-events (direct messages, muted users, text without a prefix)
are reported as pipeline outcomes, never as exceptions. Exceptions are kept
for infrastructure problems.
"""


class SimpBotError(Exception):
    """Base class for all SimpBot errors."""


class ChannelNotFoundError(SimpBotError):
    """No destination channel could be located for a send or delete."""


class DeliveryError(SimpBotError):
    """The chat platform rejected a send or delete request."""


class StorageError(SimpBotError):
    """The configuration store could not be read or written."""
