"""Session verification."""

from __future__ import annotations

import logging

from core.domain.models import ThrottleStatus
from core.errors import AuthenticationError
from core.interfaces.harvest import HarvestGateway

logger = logging.getLogger(__name__)


def authenticate(gateway: HarvestGateway) -> ThrottleStatus:
    """Check the session status once; any status other than 200 aborts the run."""

    status = gateway.get_throttle_status()
    if not status.ok:
        logger.error("Session status check returned HTTP %s", status.code)
        raise AuthenticationError(status.code)
    logger.info("Authenticated against Harvest")
    return status
