from typing import List, Optional


class BlockValidationError(Exception):
    """A block request broke one of the creation rules.

    ``rule`` is one of ``malformed``, ``ordering``, ``staleness`` or
    ``overlap``. Overlap failures carry the conflicting blocks so the caller
    can show them.
    """

    def __init__(self, rule: str, message: str, conflicting_blocks: Optional[List] = None):
        super().__init__(message)
        self.rule = rule
        self.message = message
        self.conflicting_blocks = conflicting_blocks or []

    @property
    def status_code(self) -> int:
        return 409 if self.rule == "overlap" else 400


class AuthError(Exception):
    """Missing, expired or otherwise invalid identity token."""


class TransportError(Exception):
    """The email could not be handed to any transport. Retryable."""


class IdentityLookupError(Exception):
    """User metadata could not be fetched from the identity service."""
