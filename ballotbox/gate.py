"""Administrator check for election management operations."""

import logging
from typing import Any, Hashable

from ballotbox.errors import PermissionDenied

logger = logging.getLogger(__name__)


class IdentityGate:
    """Guards administrative operations behind a single owner identity.

    The owner is fixed when the gate is constructed. Caller identities are
    opaque values supplied by the surrounding runtime and are only ever
    compared for equality.
    """

    def __init__(self, owner: Hashable):
        if owner is None:
            raise ValueError("owner identity is required")
        self._owner = owner

    @property
    def owner(self) -> Hashable:
        return self._owner

    def is_admin(self, caller: Any) -> bool:
        return caller == self._owner

    def require_admin(self, caller: Any, operation: str = "") -> None:
        """Raise PermissionDenied unless caller is the owner."""
        if not self.is_admin(caller):
            logger.debug("Refused %s for caller %r", operation or "admin operation", caller)
            raise PermissionDenied(caller, operation)
