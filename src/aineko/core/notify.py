"""Desktop notifications via notify-send."""

import logging
import subprocess

logger = logging.getLogger(__name__)

APP_NAME = "Aineko"


def send_desktop_notification(summary: str, body: str) -> bool:
    """Send a desktop notification.

    Args:
        summary: Notification title.
        body: Notification text.

    Returns:
        True if notify-send succeeded, False otherwise.
    """
    try:
        result = subprocess.run(
            [
                "notify-send",
                f"--app-name={APP_NAME}",
                "--urgency=normal",
                summary,
                body,
            ],
            capture_output=True,
            text=True,
        )
    except OSError as e:
        logger.warning("Failed to send desktop notification: %s", e)
        return False

    if result.returncode != 0:
        logger.warning(
            "notify-send exited with %d: %s",
            result.returncode,
            result.stderr.strip(),
        )
        return False
    return True
