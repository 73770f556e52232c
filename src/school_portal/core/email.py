"""
Email Service using Resend

Notifications for the PPDB admission flow. When no API key is configured
the email is logged instead of sent, so local development needs no account.
"""

import asyncio
import logging
from html import escape

import resend

from school_portal.core.config import settings

logger = logging.getLogger(__name__)

resend.api_key = settings.resend_api_key

STATUS_LABELS = {
    "pending": "Menunggu Verifikasi",
    "accepted": "Diterima",
    "rejected": "Tidak Diterima",
}

_BASE_STYLE = """
    body { font-family: system-ui, -apple-system, sans-serif; line-height: 1.6; color: #1f2937; }
    .container { max-width: 600px; margin: 0 auto; padding: 40px 20px; }
    .header { color: #1a365d; margin-bottom: 24px; }
    .number { font-size: 22px; font-weight: bold; letter-spacing: 1px; color: #1a365d; }
    .footer { margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb;
              color: #6b7280; font-size: 14px; }
"""


def _wrap_html(title: str, body: str) -> str:
    return f"""
    <!DOCTYPE html>
    <html>
    <head><style>{_BASE_STYLE}</style></head>
    <body>
        <div class="container">
            <h1 class="header">{title}</h1>
            {body}
            <div class="footer">
                <p>Email ini dikirim otomatis, mohon tidak membalas.</p>
            </div>
        </div>
    </body>
    </html>
    """


async def send_email(to_email: str, subject: str, html_content: str) -> bool:
    """
    Send an email using Resend.

    Returns:
        True if the email was sent (or logged in place of sending), False on failure
    """
    if not resend.api_key:
        logger.warning("RESEND_API_KEY not set - logging email instead of sending")
        logger.info(f"EMAIL TO: {to_email} | SUBJECT: {subject}")
        return True

    try:
        params: resend.Emails.SendParams = {
            "from": settings.email_from,
            "to": [to_email],
            "subject": subject,
            "html": html_content,
        }

        # Resend is synchronous; keep it off the event loop
        email = await asyncio.to_thread(resend.Emails.send, params)
        logger.info(f"Email sent to {to_email}, id: {email['id']}")
        return True
    except Exception as e:
        logger.error(f"Failed to send email to {to_email}: {e}")
        return False


async def send_registration_received(
    to_email: str,
    student_name: str,
    registration_number: str,
    academic_year: str,
) -> bool:
    """Confirm a submitted PPDB registration and give the applicant their number."""
    safe_name = escape(student_name)
    safe_number = escape(registration_number)
    safe_year = escape(academic_year)
    status_url = f"{settings.frontend_url}/ppdb?nomor={safe_number}"

    body = f"""
        <p>Halo {safe_name},</p>
        <p>Pendaftaran PPDB tahun ajaran <strong>{safe_year}</strong> telah kami terima.</p>
        <p>Nomor pendaftaran Anda:</p>
        <p class="number">{safe_number}</p>
        <p>Simpan nomor ini untuk memeriksa status pendaftaran di
           <a href="{status_url}">{status_url}</a>.</p>
    """
    return await send_email(
        to_email=to_email,
        subject=f"Pendaftaran PPDB {safe_number} diterima",
        html_content=_wrap_html("Pendaftaran Berhasil", body),
    )


async def send_registration_decision(
    to_email: str,
    student_name: str,
    registration_number: str,
    status: str,
    notes: str | None = None,
) -> bool:
    """Notify the applicant that their registration was accepted or rejected."""
    safe_name = escape(student_name)
    safe_number = escape(registration_number)
    label = STATUS_LABELS.get(status, status)

    notes_html = f"<p><strong>Catatan:</strong> {escape(notes)}</p>" if notes else ""
    body = f"""
        <p>Halo {safe_name},</p>
        <p>Status pendaftaran <strong>{safe_number}</strong> telah diperbarui menjadi:</p>
        <p class="number">{escape(label)}</p>
        {notes_html}
    """
    return await send_email(
        to_email=to_email,
        subject=f"Status pendaftaran PPDB {safe_number}: {label}",
        html_content=_wrap_html("Status Pendaftaran", body),
    )
