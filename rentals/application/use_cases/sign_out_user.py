"""Sign out use case"""

import logging
from typing import Optional

from ...domain.value_objects.session import SessionIdentity
from ..dtos.results import ActionResult

logger = logging.getLogger(__name__)


class SignOutUseCase:
    """Ends the caller's session.

    The token is the whole session, so signing out means the route drops the
    cookie. Signing out without a session is not an error.
    """

    async def execute(self, identity: Optional[SessionIdentity]) -> ActionResult:
        if identity is not None:
            logger.info("User %s signed out", identity.id)
        return ActionResult(success=True, message="Signed out successfully")
