"""Exception taxonomy for the dispatch core.

Unknown mediator senders are deliberately absent: messages from them are
dropped, not reported.  Unresolved chain requests cannot happen for a
non-empty chain, so the only chain failure is a construction-time one.
"""

from __future__ import annotations


class DispatchError(Exception):
    """Base class for every error raised by the dispatch core."""

    code = "DISPATCH_ERROR"


class DuplicateParticipantError(DispatchError):
    """A participant name is already registered and replacement is off."""

    code = "DUPLICATE_PARTICIPANT"

    def __init__(self, name: str) -> None:
        super().__init__(f"Participant already registered: {name}")
        self.name = name


class UnknownStrategyError(DispatchError):
    """Requested strategy identifier is not in the catalog."""

    code = "UNKNOWN_STRATEGY"

    def __init__(self, strategy_id: str) -> None:
        super().__init__("Unknown strategy type")
        self.strategy_id = strategy_id


class MalformedInputError(DispatchError):
    """A structurally invalid input line or token."""

    code = "MALFORMED_INPUT"

    def __init__(self, detail: str = "") -> None:
        super().__init__("Invalid input")
        self.detail = detail


class ChainConfigurationError(DispatchError):
    """An escalation chain was built from an invalid link sequence."""

    code = "CHAIN_CONFIGURATION"
