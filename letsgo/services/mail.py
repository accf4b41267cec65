"""
Outgoing mail over SMTP and the HTML bodies the service sends.
"""

import html
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from letsgo.core.config import Settings
from letsgo.core.logger import LetsGoLogger

SIGNATURE = "<p>Atenciosamente,<br>Equipe Let's Go Party</p>"


class Mailer:
    """Thin SMTP-over-SSL client. One connection per message."""

    def __init__(self, host: str, port: int, username: str, password: str):
        self.host = host
        self.port = port
        self.username = username
        self.password = password

    @classmethod
    def from_settings(cls, settings: Settings) -> "Mailer":
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.email_user,
            password=settings.email_password,
        )

    def send(self, to: str, subject: str, body_html: str, reply_to: Optional[str] = None) -> None:
        """Send an HTML message. SMTP and socket errors propagate to the caller."""
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.username
        msg["To"] = to
        if reply_to:
            msg["Reply-To"] = reply_to
        msg.attach(MIMEText(body_html, "html"))

        with smtplib.SMTP_SSL(self.host, self.port) as server:
            server.login(self.username, self.password)
            server.send_message(msg)

        LetsGoLogger.info(f"Mail sent to {to}: {subject}")


def verification_email(name: Optional[str], url: str, resend: bool = False) -> str:
    if resend:
        intro = "Você solicitou um novo link de verificação. Para ativar sua conta, clique no link abaixo:"
    else:
        intro = "Obrigado por se cadastrar! Para completar seu registro, clique no link abaixo:"
    return f"""
        <h1>Verificação de email</h1>
        <p>Olá {html.escape(name or '')},</p>
        <p>{intro}</p>
        <p><a href="{url}" target="_blank">{url}</a></p>
        <p>Se você não fez esta solicitação, ignore este email.</p>
        {SIGNATURE}
    """


def password_reset_email(name: Optional[str], url: str, ttl_minutes: int) -> str:
    return f"""
        <h1>Recuperação de senha</h1>
        <p>Olá {html.escape(name or '')},</p>
        <p>Recebemos uma solicitação para redefinir sua senha. Use o link abaixo:</p>
        <p><a href="{url}" target="_blank">{url}</a></p>
        <p>Este link é válido por {ttl_minutes} minutos.</p>
        <p>Se você não solicitou a redefinição da senha, ignore este email.</p>
        {SIGNATURE}
    """


def contact_email(email: str, help_type: str, subject: str, message: str) -> str:
    body = html.escape(message).replace("\n", "<br>")
    return f"""
        <h2>Nova mensagem de contato</h2>
        <p><strong>Tipo de ajuda:</strong> {html.escape(help_type)}</p>
        <p><strong>De:</strong> {html.escape(email)}</p>
        <p><strong>Assunto:</strong> {html.escape(subject)}</p>
        <p><strong>Mensagem:</strong></p>
        <div style="background-color: #f5f5f5; padding: 15px; border-radius: 5px;">{body}</div>
    """
