import logging
import smtplib
from email.message import EmailMessage

from rydercup.settings import Settings

logger = logging.getLogger(__name__)


def check_in_url(settings: Settings, invite_token: str) -> str:
    return f"{settings.frontend_url}/checkin/{invite_token}"


def invite_message(settings: Settings, player: dict, game: dict) -> EmailMessage:
    sender = settings.smtp_sender or settings.smtp_username
    message = EmailMessage()
    message["Subject"] = f"You're invited to {game['name']}"
    message["From"] = sender
    message["To"] = player["email"]
    message.set_content(
        "\n".join(
            [
                f"Hey {player['name']}!",
                "",
                f"You've been invited to play in {game['name']} on {game.get('tournament_date') or 'TBD'}.",
                f"Game code: {game.get('game_code') or ''}",
                "",
                "Confirm you're playing:",
                check_in_url(settings, player["invite_token"]),
            ]
        )
    )
    return message


def send_player_invite(settings: Settings, player: dict, game: dict) -> bool:
    """Deliver an invite e-mail; returns False when it was not sent."""
    if not settings.smtp_host:
        logger.info("SMTP host not configured. Skipping invite for player %s.", player["id"])
        return False

    message = invite_message(settings, player, game)
    try:
        if settings.smtp_use_ssl:
            with smtplib.SMTP_SSL(settings.smtp_host, settings.smtp_port or 465) as server:
                if settings.smtp_username and settings.smtp_password:
                    server.login(settings.smtp_username, settings.smtp_password)
                server.send_message(message)
        else:
            with smtplib.SMTP(settings.smtp_host, settings.smtp_port or 587) as server:
                if settings.smtp_use_tls:
                    server.starttls()
                if settings.smtp_username and settings.smtp_password:
                    server.login(settings.smtp_username, settings.smtp_password)
                server.send_message(message)
    except (OSError, smtplib.SMTPException) as exc:
        logger.warning("Failed to send invite to player %s: %s", player["id"], exc)
        return False
    logger.info("Invite sent to player %s for game %s.", player["id"], game.get("id"))
    return True
