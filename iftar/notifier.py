"""Desktop notifications for the iftar reminder and the iftar moment."""

import logging

from plyer import notification as plyer_notification

logger = logging.getLogger(__name__)

APP_NAME = "Iftar Countdown"
APP_ICON = ""  # Path to icon file; empty = default


def _send_plyer(title: str, message: str, timeout: int = 10) -> None:
    """Send a desktop notification via plyer (cross-platform)."""
    kwargs = dict(
        app_name=APP_NAME,
        title=title,
        message=message,
        timeout=timeout,
    )
    if APP_ICON:
        kwargs["app_icon"] = APP_ICON
    try:
        plyer_notification.notify(**kwargs)
    except Exception as exc:  # plyer raises backend-specific errors
        logger.warning("Desktop notification unavailable: %s", exc)
        return
    logger.info("Sent notification: %s", title)


def notify_reminder(city_name: str, minutes: int, callback=None) -> None:
    """
    Send a desktop notification N minutes before iftar.
    Optionally calls callback(title, message) so the GUI can show a banner.
    """
    title = f"🌙 Iftar in {minutes} minutes"
    message = f"Iftar in {city_name} is {minutes} minutes away. Prepare to break your fast."
    _send_plyer(title, message, timeout=15)
    if callback:
        callback(title, message)


def notify_iftar(city_name: str, callback=None) -> None:
    """
    Send a desktop notification when iftar time arrives.
    Optionally calls callback(title, message) so the GUI can show a banner.
    """
    title = "🌙 Iftar — Time to break your fast!"
    message = f"It is now Maghrib in {city_name}. Taqabbal Allahu minna wa minkum."
    _send_plyer(title, message, timeout=30)
    if callback:
        callback(title, message)
