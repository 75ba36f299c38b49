"""Time-limited admin authorization behind a shared password."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from plant_catalog.domain.sessions import ChatSession, PendingAction, WaitingFor

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of a password submission."""

    authenticated: bool
    resume: PendingAction | None = None


@dataclass
class AuthGate:
    """Grants, checks and revokes admin access stored on a chat session.

    Access expires at a fixed time after the password was accepted and is
    not extended by later privileged actions. Expiry is only evaluated
    when ``is_authorized`` is called.
    """

    password: str
    timeout_minutes: int

    def is_authorized(self, session: ChatSession, now: datetime) -> bool:
        """Return true while ``now`` is strictly before the expiry."""
        if session.authorized_until is None:
            return False
        return now < session.authorized_until

    def challenge(self, session: ChatSession, pending_action: PendingAction) -> None:
        """Ask for the password and remember what to resume afterwards."""
        session.waiting_for = WaitingFor.AWAITING_PASSWORD
        session.pending_action = pending_action

    def verify(
        self, session: ChatSession, submitted: str, now: datetime
    ) -> VerificationResult:
        """Check a submitted password; on success grant access until timeout."""
        if submitted != self.password:
            _logger.info("Admin password rejected")
            return VerificationResult(authenticated=False)
        session.authorized_until = now + timedelta(minutes=self.timeout_minutes)
        resume = session.pending_action
        session.pending_action = None
        session.waiting_for = WaitingFor.NONE
        _logger.info("Admin access granted until %s", session.authorized_until)
        return VerificationResult(authenticated=True, resume=resume)

    def revoke(self, session: ChatSession) -> None:
        """End admin access immediately."""
        session.authorized_until = None
