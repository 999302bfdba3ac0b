"""
Email Service using Resend

Sends student notifications for the application lifecycle:
- Application status changes made by moderators
- Payment receipts once an application fee is confirmed

When no API key is configured the email is logged instead of sent.
"""

import asyncio
import logging
from html import escape

import resend

from scholarstream.core.config import settings

logger = logging.getLogger(__name__)

_STYLE = """
        <style>
            body { font-family: system-ui, -apple-system, sans-serif; line-height: 1.6; color: #1f2937; }
            .container { max-width: 600px; margin: 0 auto; padding: 40px 20px; }
            .header { color: #1e3a8a; margin-bottom: 24px; }
            .button { display: inline-block; background-color: #1e3a8a; color: white; padding: 14px 28px; text-decoration: none; border-radius: 8px; margin: 24px 0; }
            .info-box { background-color: #f3f4f6; padding: 16px; border-radius: 8px; margin: 16px 0; }
            .footer { margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb; color: #6b7280; font-size: 14px; }
        </style>
"""

STATUS_HEADLINES = {
    "pending": "Your application is being processed",
    "completed": "Your application is complete",
    "rejected": "Your application was not accepted",
}


async def send_email(
    to_email: str,
    subject: str,
    html_content: str,
) -> bool:
    """
    Send an email using Resend.

    Args:
        to_email: Recipient email address
        subject: Email subject line
        html_content: HTML content of the email

    Returns:
        True if email was sent (or logged in place of sending)
    """
    if not settings.resend_api_key:
        logger.warning("RESEND_API_KEY not set - logging email instead of sending")
        logger.info(f"EMAIL TO: {to_email} | SUBJECT: {subject}")
        return True

    try:
        resend.api_key = settings.resend_api_key
        params: resend.Emails.SendParams = {
            "from": settings.email_from,
            "to": [to_email],
            "subject": subject,
            "html": html_content,
        }

        # Resend's client is synchronous
        email = await asyncio.to_thread(resend.Emails.send, params)
        logger.info(f"Email sent successfully to {to_email}, id: {email['id']}")
        return True
    except Exception as e:
        logger.error(f"Failed to send email to {to_email}: {e}")
        return False


async def send_application_status_update(
    to_email: str,
    university_name: str,
    scholarship_category: str,
    status: str,
    feedback: str | None = None,
) -> bool:
    """Tell a student that a moderator changed their application's status."""
    safe_university = escape(university_name)
    safe_category = escape(scholarship_category)
    safe_feedback = escape(feedback) if feedback else None
    headline = STATUS_HEADLINES.get(status, "Your application was updated")

    applications_url = f"{settings.frontend_url.rstrip('/')}/dashboard/my-applications"
    feedback_block = (
        f"""
            <div class="info-box">
                <p><strong>Feedback from the review team:</strong></p>
                <p>{safe_feedback}</p>
            </div>"""
        if safe_feedback
        else ""
    )

    html_content = f"""
    <!DOCTYPE html>
    <html>
    <head>{_STYLE}</head>
    <body>
        <div class="container">
            <h1 class="header">{headline}</h1>

            <p>Your {safe_category} scholarship application to <strong>{safe_university}</strong> is now <strong>{escape(status)}</strong>.</p>
{feedback_block}
            <a href="{applications_url}" class="button">View My Applications</a>

            <div class="footer">
                <p>ScholarStream - Scholarship Applications</p>
            </div>
        </div>
    </body>
    </html>
    """

    return await send_email(
        to_email=to_email,
        subject=f"Application update: {safe_university}",
        html_content=html_content,
    )


async def send_payment_receipt(
    to_email: str,
    university_name: str,
    amount: float,
) -> bool:
    """Confirm to a student that their application fee was received."""
    safe_university = escape(university_name)
    currency = settings.stripe_currency.upper()

    html_content = f"""
    <!DOCTYPE html>
    <html>
    <head>{_STYLE}</head>
    <body>
        <div class="container">
            <h1 class="header">Payment Received</h1>

            <p>We received your application fee of <strong>{amount:.2f} {currency}</strong> for <strong>{safe_university}</strong>.</p>

            <p>Your application is now complete and queued for review.</p>

            <div class="footer">
                <p>Keep this email as your receipt.</p>
                <p>ScholarStream - Scholarship Applications</p>
            </div>
        </div>
    </body>
    </html>
    """

    return await send_email(
        to_email=to_email,
        subject=f"Payment received: {safe_university}",
        html_content=html_content,
    )
