"""Starter rules seeded at registration and the dashboard template catalogue"""

import logging

from sqlalchemy.orm import Session

from ...models import AutomationAction, AutomationRule, AutomationTrigger
from .repository import AutomationRuleRepository

logger = logging.getLogger(__name__)

WELCOME_EMAIL_CONFIG = {
    "subject": "Welcome to {{businessName}}!",
    "template": """
          <h1>Welcome, {{firstName}}!</h1>
          <p>Thank you for reaching out to {{businessName}}. We've received your inquiry and will get back to you shortly.</p>
          <p>Best regards,<br>{{businessName}} Team</p>
        """,
}

BOOKING_CONFIRMATION_CONFIG = {
    "subject": "Booking Confirmed - {{businessName}}",
    "template": """
          <h1>Booking Confirmed!</h1>
          <p>Hi {{firstName}},</p>
          <p>Your booking for {{serviceName}} has been confirmed.</p>
          <p><strong>Date:</strong> {{bookingDate}}<br>
          <strong>Time:</strong> {{bookingTime}}</p>
          <p>We look forward to seeing you!</p>
          <p>Best regards,<br>{{businessName}} Team</p>
        """,
}

BOOKING_REMINDER_CONFIG = {
    "subject": "Reminder: Upcoming appointment at {{businessName}}",
    "template": """
          <h1>Appointment Reminder</h1>
          <p>Hi {{firstName}},</p>
          <p>This is a friendly reminder about your upcoming appointment:</p>
          <p><strong>Service:</strong> {{serviceName}}<br>
          <strong>Date:</strong> {{bookingDate}}<br>
          <strong>Time:</strong> {{bookingTime}}</p>
          <p>See you soon!</p>
        """,
}

FORM_REMINDER_CONFIG = {
    "subject": "Action Required: Complete your form",
    "template": """
          <h1>Form Pending</h1>
          <p>Hi {{firstName}},</p>
          <p>We're still waiting for you to complete the following form:</p>
          <p><strong>{{formName}}</strong></p>
          <p>Please complete it at your earliest convenience.</p>
        """,
}

LOW_STOCK_ALERT_CONFIG = {
    "alertType": "INVENTORY_LOW",
    "priority": "HIGH",
    "title": "Low Inventory Alert",
    "message": "Inventory item is running low and needs restocking",
}

FORM_OVERDUE_ALERT_CONFIG = {
    "alertType": "FORM_OVERDUE",
    "priority": "MEDIUM",
    "title": "Form Overdue",
    "message": "A form submission is overdue",
}

# Inserted verbatim for every new workspace
DEFAULT_AUTOMATION_RULES = [
    {
        "name": "Welcome Email for New Contacts",
        "description": "Send welcome email when a new contact is created",
        "trigger": AutomationTrigger.NEW_CONTACT,
        "action": AutomationAction.SEND_EMAIL,
        "config": WELCOME_EMAIL_CONFIG,
    },
    {
        "name": "Booking Confirmation",
        "description": "Send confirmation email when a booking is created",
        "trigger": AutomationTrigger.BOOKING_CREATED,
        "action": AutomationAction.SEND_EMAIL,
        "config": BOOKING_CONFIRMATION_CONFIG,
    },
    {
        "name": "Low Inventory Alert",
        "description": "Create alert when inventory is low",
        "trigger": AutomationTrigger.INVENTORY_LOW,
        "action": AutomationAction.CREATE_ALERT,
        "config": LOW_STOCK_ALERT_CONFIG,
    },
]

AUTOMATION_TEMPLATES = [
    {
        "id": "welcome-email",
        "name": "Welcome Email for New Contacts",
        "description": "Send a welcome email when a new contact is created",
        "trigger": AutomationTrigger.NEW_CONTACT,
        "action": AutomationAction.SEND_EMAIL,
        "config": WELCOME_EMAIL_CONFIG,
    },
    {
        "id": "booking-confirmation",
        "name": "Booking Confirmation Email",
        "description": "Send confirmation when a booking is created",
        "trigger": AutomationTrigger.BOOKING_CREATED,
        "action": AutomationAction.SEND_EMAIL,
        "config": BOOKING_CONFIRMATION_CONFIG,
    },
    {
        "id": "booking-reminder",
        "name": "Booking Reminder",
        "description": "Send reminder before booking",
        "trigger": AutomationTrigger.BOOKING_REMINDER,
        "action": AutomationAction.SEND_EMAIL,
        "config": BOOKING_REMINDER_CONFIG,
    },
    {
        "id": "form-reminder",
        "name": "Form Completion Reminder",
        "description": "Remind about pending forms",
        "trigger": AutomationTrigger.FORM_PENDING,
        "action": AutomationAction.SEND_EMAIL,
        "config": FORM_REMINDER_CONFIG,
    },
    {
        "id": "low-stock-alert",
        "name": "Low Inventory Alert",
        "description": "Create alert when inventory is low",
        "trigger": AutomationTrigger.INVENTORY_LOW,
        "action": AutomationAction.CREATE_ALERT,
        "config": LOW_STOCK_ALERT_CONFIG,
    },
    {
        "id": "form-overdue-alert",
        "name": "Overdue Form Alert",
        "description": "Create alert for overdue forms",
        "trigger": AutomationTrigger.FORM_OVERDUE,
        "action": AutomationAction.CREATE_ALERT,
        "config": FORM_OVERDUE_ALERT_CONFIG,
    },
]

# Templates that can be instantiated directly, with their fallback config
TEMPLATE_RULES = {
    "welcome-email": {
        "name": "Welcome Email for New Contacts",
        "trigger": AutomationTrigger.NEW_CONTACT,
        "action": AutomationAction.SEND_EMAIL,
        "config": {
            "subject": "Welcome to {{businessName}}!",
            "template": "<h1>Welcome!</h1><p>Thank you for contacting us.</p>",
        },
    },
    "booking-confirmation": {
        "name": "Booking Confirmation Email",
        "trigger": AutomationTrigger.BOOKING_CREATED,
        "action": AutomationAction.SEND_EMAIL,
        "config": {
            "subject": "Booking Confirmed",
            "template": "<h1>Booking Confirmed!</h1>",
        },
    },
    "low-stock-alert": {
        "name": "Low Inventory Alert",
        "trigger": AutomationTrigger.INVENTORY_LOW,
        "action": AutomationAction.CREATE_ALERT,
        "config": {
            "alertType": "INVENTORY_LOW",
            "priority": "HIGH",
            "title": "Low Inventory",
            "message": "Stock is running low",
        },
    },
}


def build_default_rules(workspace_id: str) -> list[dict]:
    """Rows for the starter rules of one workspace"""
    return [
        {
            "workspace_id": workspace_id,
            "name": rule["name"],
            "description": rule["description"],
            "trigger": rule["trigger"].value,
            "action": rule["action"].value,
            "config": dict(rule["config"]),
            "conditions": {},
            "is_active": True,
        }
        for rule in DEFAULT_AUTOMATION_RULES
    ]


def create_default_automation_rules(db: Session, workspace_id: str) -> list[AutomationRule]:
    """Seed the starter rules for a freshly registered workspace"""
    rules = AutomationRuleRepository.create_many(db, build_default_rules(workspace_id))
    logger.info(f"Created {len(rules)} default automation rules for workspace {workspace_id}")
    return rules
