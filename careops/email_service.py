"""
Email Service using Resend
Transactional email for automation rules and operational notices
"""

import logging
from typing import Optional, Union

import resend

from .config import EMAIL_FROM_ADDRESS, RESEND_API_KEY

logger = logging.getLogger(__name__)

resend.api_key = RESEND_API_KEY


async def send_email(
    to: Union[str, list[str]],
    subject: str,
    html: str,
    from_address: Optional[str] = None,
) -> dict:
    """
    Send an email through Resend

    Args:
        to: Recipient email(s)
        subject: Email subject line
        html: HTML body, sent as-is
        from_address: Optional custom from address

    Returns:
        Send response dict
    """
    recipients = [to] if isinstance(to, str) else to
    sender = from_address or EMAIL_FROM_ADDRESS

    if not RESEND_API_KEY:
        logger.error("No email service configured - RESEND_API_KEY missing")
        raise Exception("Email service not configured")

    try:
        logger.info(f"Sending email via Resend to: {to}")
        response = resend.Emails.send(
            {
                "from": sender,
                "to": recipients,
                "subject": subject,
                "html": html,
            }
        )
        logger.info(f"Email sent successfully via Resend: {response}")
        return response
    except Exception as e:
        logger.error(f"Email send error to {recipients}: {e}")
        raise Exception(f"Failed to send email: {str(e)}") from e


async def send_inventory_alert(item, workspace, sender=None) -> Optional[dict]:
    """Tell the vendor (or the workspace inbox) that an item is running low

    sender defaults to send_email; callers holding an injected sender pass it in.
    """
    recipient = item.vendor_email or workspace.contact_email
    if not recipient:
        logger.debug(f"No recipient for low inventory notice on item {item.id}")
        return None

    vendor_block = ""
    if item.vendor_name:
        vendor_block = f"<p><strong>Vendor:</strong> {item.vendor_name}"
        if item.vendor_phone:
            vendor_block += f"<br><strong>Phone:</strong> {item.vendor_phone}"
        vendor_block += "</p>"

    html = f"""
      <h1>Low Inventory Alert</h1>
      <p><strong>Item:</strong> {item.name}</p>
      <p><strong>Current Stock:</strong> {item.quantity} {item.unit}</p>
      <p><strong>Threshold:</strong> {item.low_stock_threshold} {item.unit}</p>
      <p>The inventory for this item is running low. Please consider restocking soon.</p>
      {vendor_block}
      <p>Best regards,<br>{workspace.business_name} Team</p>
    """

    return await (sender or send_email)(
        to=recipient,
        subject=f"Low Inventory Alert: {item.name}",
        html=html,
    )


def get_email_sender():
    """Dependency returning the function used for outbound email"""
    return send_email
