import smtplib
from email.mime.text import MIMEText
from core.config import settings
from core.exceptions import NotificationError
from models.verification_tokens import TokenType
from utils.logger import get_logger

logger = get_logger(__name__)


OTP_PURPOSES = {
    TokenType.REGISTRATION: (
        "Anvi Studio: Your One-Time Password (OTP) for Registration",
        "activate your account",
    ),
    TokenType.PASSWORD_RESET: (
        "Anvi Studio: Password Reset Code (OTP)",
        "reset your password",
    ),
    TokenType.NEW_EMAIL_VERIFICATION: (
        "Anvi Studio: Confirm Your New Email Address",
        "confirm this as your new login email",
    ),
}


def send_email(to_email: str, subject: str, body: str):
    """
    Deliver a plaintext email over SMTP.

    Raises NotificationError when the transport fails or times out.
    """
    if settings.ENV == "testing":
        logger.info(
            "[TEST MODE] Email skipped",
            extra={"recipient": to_email, "subject": subject}
        )
        return

    logger.debug(
        "Attempting to send email",
        extra={"recipient": to_email, "subject": subject}
    )

    message = MIMEText(body, "plain", "utf-8")
    message["Subject"] = subject
    message["From"] = settings.MAIL_FROM
    message["To"] = to_email

    try:
        with smtplib.SMTP(settings.MAIL_SERVER, settings.MAIL_PORT,
                          timeout=settings.MAIL_TIMEOUT_SECONDS) as server:
            server.starttls()
            server.login(settings.MAIL_USERNAME, settings.MAIL_PASSWORD)
            server.sendmail(settings.MAIL_FROM, to_email, message.as_string())
    except (smtplib.SMTPException, OSError) as e:
        raise NotificationError(str(e)) from e

    logger.info(
        "Email sent successfully",
        extra={"recipient": to_email, "subject": subject}
    )


def build_otp_message(recipient: str, code: str, token_type: TokenType, minutes: int) -> tuple[str, str]:
    subject, action = OTP_PURPOSES[token_type]
    body = (
        f"Dear {recipient},\n\n"
        f"Your One-Time Password (OTP) to {action} is:\n\n"
        f"--- {code} ---\n\n"
        f"This OTP expires in {minutes} minutes. Only the most recently sent code is valid.\n\n"
        "If you did not request this, please ignore this email."
    )
    return subject, body


def send_otp_email(to_email: str, code: str, token_type: TokenType, minutes: int) -> bool:
    """
    Send a one-time code. Fire-and-forget: a delivery failure is logged and
    reported through the return value, never raised, so the action that
    issued the code is not rolled back.

    Returns True when the message was handed to the transport.
    """
    subject, body = build_otp_message(to_email, code, token_type, minutes)

    try:
        send_email(to_email=to_email, subject=subject, body=body)
    except NotificationError as e:
        logger.error(
            f"Failed to send OTP email: {str(e)}",
            extra={
                "recipient": to_email,
                "token_type": token_type.value,
                "error": str(e),
            },
            exc_info=True
        )
        return False

    return True
