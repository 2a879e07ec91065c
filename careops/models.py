import enum
import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_id():
    """Generate a UUID primary key"""
    return str(uuid.uuid4())


class AutomationTrigger(str, enum.Enum):
    NEW_CONTACT = "NEW_CONTACT"
    BOOKING_CREATED = "BOOKING_CREATED"
    BOOKING_REMINDER = "BOOKING_REMINDER"
    FORM_PENDING = "FORM_PENDING"
    FORM_OVERDUE = "FORM_OVERDUE"
    INVENTORY_LOW = "INVENTORY_LOW"


class AutomationAction(str, enum.Enum):
    SEND_EMAIL = "SEND_EMAIL"
    SEND_SMS = "SEND_SMS"
    CREATE_ALERT = "CREATE_ALERT"
    UPDATE_STATUS = "UPDATE_STATUS"


class AlertStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    ACKNOWLEDGED = "ACKNOWLEDGED"
    RESOLVED = "RESOLVED"


class AlertPriority(str, enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class AlertType(str, enum.Enum):
    INVENTORY_LOW = "INVENTORY_LOW"
    FORM_OVERDUE = "FORM_OVERDUE"
    BOOKING_UNCONFIRMED = "BOOKING_UNCONFIRMED"
    MESSAGE_UNANSWERED = "MESSAGE_UNANSWERED"
    SYSTEM = "SYSTEM"


class Workspace(Base):
    __tablename__ = "workspaces"

    id = Column(String(36), primary_key=True, default=generate_id)
    business_name = Column(String(255), nullable=False)
    contact_email = Column(String(255), nullable=True)
    status = Column(String(20), default="SETUP", nullable=False)  # SETUP, ACTIVE, INACTIVE
    # Onboarding checklist flags
    contact_form_setup = Column(Boolean, default=False, nullable=False)
    inventory_setup = Column(Boolean, default=False, nullable=False)
    staff_setup = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    users = relationship("User", back_populates="workspace", cascade="all, delete-orphan")
    contacts = relationship("Contact", back_populates="workspace", cascade="all, delete-orphan")
    automation_rules = relationship(
        "AutomationRule", back_populates="workspace", cascade="all, delete-orphan"
    )
    alerts = relationship("Alert", back_populates="workspace", cascade="all, delete-orphan")


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    workspace_id = Column(String(36), ForeignKey("workspaces.id"), nullable=False, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    role = Column(String(20), default="STAFF", nullable=False)  # OWNER, STAFF
    status = Column(String(20), default="ACTIVE", nullable=False)  # ACTIVE, INACTIVE, PENDING
    # Staff permission flags, e.g. {"canManageInventory": true}. Owners bypass these.
    permissions = Column(JSON, default=dict, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    workspace = relationship("Workspace", back_populates="users")


class Contact(Base):
    __tablename__ = "contacts"

    id = Column(String(36), primary_key=True, default=generate_id)
    workspace_id = Column(String(36), ForeignKey("workspaces.id"), nullable=False, index=True)
    email = Column(String(255), nullable=True, index=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    phone = Column(String(50), nullable=True)
    source = Column(String(50), nullable=True)  # CONTACT_FORM, BOOKING_FORM, MANUAL
    status = Column(String(20), default="NEW", nullable=False)  # NEW, CONTACTED, QUALIFIED, CONVERTED, LOST
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    workspace = relationship("Workspace", back_populates="contacts")
    bookings = relationship("Booking", back_populates="contact")
    conversations = relationship("Conversation", back_populates="contact", cascade="all, delete-orphan")


class Conversation(Base):
    __tablename__ = "conversations"

    id = Column(String(36), primary_key=True, default=generate_id)
    workspace_id = Column(String(36), ForeignKey("workspaces.id"), nullable=False, index=True)
    contact_id = Column(String(36), ForeignKey("contacts.id"), nullable=False, index=True)
    subject = Column(String(255), nullable=True)
    status = Column(String(20), default="OPEN", nullable=False)  # OPEN, PENDING, CLOSED
    last_message_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    contact = relationship("Contact", back_populates="conversations")
    messages = relationship(
        "Message",
        back_populates="conversation",
        cascade="all, delete-orphan",
        order_by="Message.created_at",
    )


class Message(Base):
    __tablename__ = "messages"

    id = Column(String(36), primary_key=True, default=generate_id)
    conversation_id = Column(String(36), ForeignKey("conversations.id"), nullable=False, index=True)
    channel = Column(String(20), nullable=False)  # EMAIL, SMS, CHAT
    direction = Column(String(20), nullable=False)  # INBOUND, OUTBOUND
    subject = Column(String(255), nullable=True)
    body = Column(Text, nullable=False)
    sender = Column(String(255), nullable=True)
    recipient = Column(String(255), nullable=True)
    is_automated = Column(Boolean, default=False, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    conversation = relationship("Conversation", back_populates="messages")


class BookingType(Base):
    __tablename__ = "booking_types"

    id = Column(String(36), primary_key=True, default=generate_id)
    workspace_id = Column(String(36), ForeignKey("workspaces.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    duration = Column(Integer, default=30, nullable=False)  # minutes
    location = Column(String(255), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    # Form sent to the customer after each booking of this type
    send_form_id = Column(String(36), ForeignKey("forms.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    bookings = relationship("Booking", back_populates="booking_type")
    send_form = relationship("Form")
    availability = relationship("Availability", back_populates="booking_type", cascade="all, delete-orphan")


class Availability(Base):
    """Weekly opening window for a booking type"""

    __tablename__ = "availability"

    id = Column(String(36), primary_key=True, default=generate_id)
    booking_type_id = Column(String(36), ForeignKey("booking_types.id"), nullable=False, index=True)
    day_of_week = Column(String(10), nullable=False)  # MONDAY ... SUNDAY
    start_time = Column(String(5), nullable=False)  # "HH:MM"
    end_time = Column(String(5), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    booking_type = relationship("BookingType", back_populates="availability")


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=generate_id)
    workspace_id = Column(String(36), ForeignKey("workspaces.id"), nullable=False, index=True)
    booking_type_id = Column(String(36), ForeignKey("booking_types.id"), nullable=False)
    contact_id = Column(String(36), ForeignKey("contacts.id"), nullable=True)
    scheduled_at = Column(DateTime, nullable=False)
    duration = Column(Integer, nullable=False)
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False)
    customer_phone = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(String(20), default="PENDING", nullable=False)  # PENDING, CONFIRMED, CANCELLED, COMPLETED, NO_SHOW
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    booking_type = relationship("BookingType", back_populates="bookings")
    contact = relationship("Contact", back_populates="bookings")


class InventoryItem(Base):
    __tablename__ = "inventory_items"

    id = Column(String(36), primary_key=True, default=generate_id)
    workspace_id = Column(String(36), ForeignKey("workspaces.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    sku = Column(String(100), nullable=True)
    quantity = Column(Integer, default=0, nullable=False)
    unit = Column(String(20), default="PIECE", nullable=False)
    low_stock_threshold = Column(Integer, default=0, nullable=False)
    vendor_name = Column(String(255), nullable=True)
    vendor_email = Column(String(255), nullable=True)
    vendor_phone = Column(String(50), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    usage_log = relationship(
        "InventoryUsage", back_populates="inventory_item", cascade="all, delete-orphan"
    )


class InventoryUsage(Base):
    __tablename__ = "inventory_usage"

    id = Column(String(36), primary_key=True, default=generate_id)
    inventory_item_id = Column(String(36), ForeignKey("inventory_items.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)  # signed delta
    reason = Column(String(255), nullable=True)
    booking_id = Column(String(36), ForeignKey("bookings.id"), nullable=True)
    created_by = Column(String(36), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    inventory_item = relationship("InventoryItem", back_populates="usage_log")


class Form(Base):
    __tablename__ = "forms"

    id = Column(String(36), primary_key=True, default=generate_id)
    workspace_id = Column(String(36), ForeignKey("workspaces.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    fields = Column(JSON, default=list, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    submissions = relationship("FormSubmission", back_populates="form", cascade="all, delete-orphan")


class FormSubmission(Base):
    __tablename__ = "form_submissions"

    id = Column(String(36), primary_key=True, default=generate_id)
    workspace_id = Column(String(36), ForeignKey("workspaces.id"), nullable=False, index=True)
    form_id = Column(String(36), ForeignKey("forms.id"), nullable=False)
    contact_id = Column(String(36), ForeignKey("contacts.id"), nullable=True)
    booking_id = Column(String(36), ForeignKey("bookings.id"), nullable=True)
    data = Column(JSON, nullable=True)
    status = Column(String(20), default="PENDING", nullable=False)  # PENDING, COMPLETED, OVERDUE
    due_date = Column(DateTime, nullable=True)
    submitted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    form = relationship("Form", back_populates="submissions")
    contact = relationship("Contact")


class AutomationRule(Base):
    __tablename__ = "automation_rules"

    id = Column(String(36), primary_key=True, default=generate_id)
    workspace_id = Column(String(36), ForeignKey("workspaces.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    trigger = Column(String(50), nullable=False, index=True)
    action = Column(String(50), nullable=False)
    # Shape depends on action: see domain/automation/schemas.py CONFIG_MODELS
    config = Column(JSON, default=dict, nullable=False)
    # Stored for forward compatibility; not evaluated when rules fire
    conditions = Column(JSON, default=dict, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    execution_count = Column(Integer, default=0, nullable=False)
    last_executed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    workspace = relationship("Workspace", back_populates="automation_rules")


class Alert(Base):
    __tablename__ = "alerts"

    id = Column(String(36), primary_key=True, default=generate_id)
    workspace_id = Column(String(36), ForeignKey("workspaces.id"), nullable=False, index=True)
    type = Column(String(50), nullable=False)
    priority = Column(String(20), default="MEDIUM", nullable=False)
    status = Column(String(20), default="ACTIVE", nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    entity_type = Column(String(50), nullable=True)
    entity_id = Column(String(36), nullable=True)
    action_url = Column(String(500), nullable=True)
    acknowledged_at = Column(DateTime, nullable=True)
    acknowledged_by = Column(String(36), nullable=True)
    resolved_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    workspace = relationship("Workspace", back_populates="alerts")
