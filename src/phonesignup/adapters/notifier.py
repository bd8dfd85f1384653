"""
Logging admin notifier adapter - Implements AdminNotifier protocol.

Writes a WARNING-level record per new account so it stands out in the
operator's log stream.
"""

import logging

logger = logging.getLogger(__name__)


class LoggingAdminNotifier:
    """Implements AdminNotifier protocol via logging."""

    def notify_admins(
        self, user_id: str, email: str | None, enabled: bool, group_id: str
    ) -> None:
        logger.warning(
            "[ADMIN] New account '%s' (email=%s, enabled=%s, group=%s)",
            user_id,
            email or "",
            enabled,
            group_id or "-",
        )
