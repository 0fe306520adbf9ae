"""
Email Service using Resend

Handles sending emails for the admissions workflow.
"""

import asyncio
import logging
from html import escape

import resend

from app.core.config import settings

logger = logging.getLogger(__name__)

resend.api_key = settings.resend_api_key or None

EMAIL_FROM = settings.email_from
FRONTEND_URL = settings.frontend_url

_STYLE = """
        <style>
            body { font-family: system-ui, -apple-system, sans-serif; line-height: 1.6; color: #1f2937; }
            .container { max-width: 600px; margin: 0 auto; padding: 40px 20px; }
            .header { color: #1a365d; margin-bottom: 24px; }
            .status { display: inline-block; background-color: #eff6ff; color: #1e40af; padding: 6px 14px; border-radius: 6px; font-weight: 600; }
            .note { background-color: #f9fafb; border-left: 4px solid #1a365d; padding: 12px 16px; margin: 16px 0; }
            .button { display: inline-block; background-color: #1a365d; color: white; padding: 14px 28px; text-decoration: none; border-radius: 8px; margin: 24px 0; }
            .footer { margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb; color: #6b7280; font-size: 14px; }
        </style>
"""


def _wrap(body: str) -> str:
    return f"""
    <!DOCTYPE html>
    <html>
    <head>{_STYLE}</head>
    <body>
        <div class="container">
            {body}
            <div class="footer">
                <p>School Admissions Office</p>
            </div>
        </div>
    </body>
    </html>
    """


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
        True if email was sent successfully
    """
    if not resend.api_key:
        logger.warning("RESEND_API_KEY not set - logging email instead of sending")
        logger.info(f"EMAIL TO: {to_email} | SUBJECT: {subject}")
        return True

    try:
        params: resend.Emails.SendParams = {
            "from": EMAIL_FROM,
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


async def send_application_submitted(
    to_email: str,
    applicant_name: str,
    application_number: str,
) -> bool:
    """Confirm to the applicant that their application was submitted."""
    safe_name = escape(applicant_name)
    safe_number = escape(application_number)
    url = f"{FRONTEND_URL}/applications"

    html_content = _wrap(f"""
            <h1 class="header">Application Submitted</h1>
            <p>Hello {safe_name},</p>
            <p>We have received your application <strong>{safe_number}</strong>.</p>
            <p>Please upload your supporting documents so the admission committee can begin the selection process.</p>
            <a href="{url}" class="button">Upload Documents</a>
    """)
    return await send_email(
        to_email=to_email,
        subject=f"Application {safe_number} submitted",
        html_content=html_content,
    )


async def send_status_changed(
    to_email: str,
    applicant_name: str,
    application_number: str,
    status_label: str,
    notes: str | None = None,
) -> bool:
    """Tell the applicant their application moved to a new stage."""
    safe_name = escape(applicant_name)
    safe_number = escape(application_number)
    safe_label = escape(status_label)
    note_block = f'<div class="note">{escape(notes)}</div>' if notes else ""
    url = f"{FRONTEND_URL}/applications"

    html_content = _wrap(f"""
            <h1 class="header">Application Status Updated</h1>
            <p>Hello {safe_name},</p>
            <p>The status of your application <strong>{safe_number}</strong> has changed to:</p>
            <p><span class="status">{safe_label}</span></p>
            {note_block}
            <a href="{url}" class="button">View Application</a>
    """)
    return await send_email(
        to_email=to_email,
        subject=f"Application {safe_number}: {safe_label}",
        html_content=html_content,
    )


async def send_submission_reminder(
    to_email: str,
    applicant_name: str,
    application_number: str,
    days_open: int,
) -> bool:
    """Remind an applicant that their application has not been submitted yet."""
    safe_name = escape(applicant_name)
    safe_number = escape(application_number)
    url = f"{FRONTEND_URL}/applications"

    html_content = _wrap(f"""
            <h1 class="header">Finish Your Application</h1>
            <p>Hello {safe_name},</p>
            <p>Your application <strong>{safe_number}</strong> was started {days_open} days ago but has not been submitted yet.</p>
            <p>Applications are only reviewed once they are submitted.</p>
            <a href="{url}" class="button">Continue Application</a>
    """)
    return await send_email(
        to_email=to_email,
        subject=f"Reminder: application {safe_number} is not submitted",
        html_content=html_content,
    )


async def send_staff_account_created(
    to_email: str,
    full_name: str,
    role_label: str,
    temporary_password: str | None = None,
) -> bool:
    """Welcome a new admin or admission committee member."""
    safe_name = escape(full_name)
    safe_role = escape(role_label)
    password_block = (
        f"<p>Your temporary password is: <strong>{escape(temporary_password)}</strong></p>"
        "<p>Please change it after your first login.</p>"
        if temporary_password
        else ""
    )
    url = f"{FRONTEND_URL}/login"

    html_content = _wrap(f"""
            <h1 class="header">Your Staff Account</h1>
            <p>Hello {safe_name},</p>
            <p>An account has been created for you with the role <strong>{safe_role}</strong>.</p>
            {password_block}
            <a href="{url}" class="button">Log In</a>
    """)
    return await send_email(
        to_email=to_email,
        subject="Your admissions staff account",
        html_content=html_content,
    )
