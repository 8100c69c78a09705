from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class User(Base):
    """A portal account (the business using the portal)"""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    firebase_uid = Column(String(255), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=True)
    company_name = Column(String(255), nullable=True)
    status = Column(String(50), default="active", nullable=False)  # active, inactive, suspended
    plan = Column(String(50), nullable=True)
    # Key used by n8n workflows to act on behalf of this account
    api_key = Column(String(128), unique=True, index=True, nullable=True)
    # Dodo Payments linkage (non-PCI metadata only)
    dodo_customer_id = Column(String(255), nullable=True)
    subscription_id = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    staff_members = relationship("StaffMember", back_populates="user")
    products = relationship("Product", back_populates="user")
    reservations = relationship("Reservation", back_populates="user")
    contacts = relationship("Contact", back_populates="user")
    notifications = relationship("Notification", back_populates="user")


class StaffMember(Base):
    __tablename__ = "staff_members"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="staff_members")
    reservations = relationship("Reservation", back_populates="staff_member")


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    price = Column(Float, nullable=False, default=0)  # Price per person
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="products")


class Reservation(Base):
    __tablename__ = "reservations"
    __table_args__ = (Index("ix_reservations_user_date", "user_id", "reservation_date"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    staff_member_id = Column(Integer, ForeignKey("staff_members.id"), nullable=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=True)
    customer_name = Column(String(255), nullable=False)
    customer_phone = Column(String(50), nullable=True)
    customer_email = Column(String(255), nullable=True)
    reservation_date = Column(Date, nullable=False)
    reservation_time = Column(String(5), nullable=False)  # HH:MM format
    end_time = Column(String(5), nullable=True)  # HH:MM, start + default duration when missing
    party_size = Column(Integer, default=2, nullable=False)
    price_paid = Column(Float, nullable=True)  # Price per person, overrides product price
    notes = Column(Text, nullable=True)
    source = Column(String(50), default="n8n", nullable=False)
    status = Column(String(50), default="pending", nullable=False)  # pending, confirmed, completed, cancelled
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="reservations")
    staff_member = relationship("StaffMember", back_populates="reservations")
    product = relationship("Product")


class Contact(Base):
    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    info = Column(Text, nullable=True)
    consent_status = Column(String(50), nullable=True)
    gender = Column(String(20), nullable=True)
    booking_count = Column(Integer, default=0, nullable=False)
    original_created_at = Column(DateTime, nullable=True)  # "Erstellt" column of the imported file
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="contacts")


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    location = Column(String(500), nullable=True)
    status = Column(String(50), default="pending", nullable=False)
    # "metadata" is reserved on declarative classes
    extra = Column("metadata", JSON, default=dict, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Document(Base):
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    file_path = Column(String(1000), nullable=False)  # Object key in the documents bucket
    file_type = Column(String(100), nullable=True)
    file_size = Column(Integer, nullable=True)
    folder = Column(String(500), default="/", nullable=False)
    tags = Column(JSON, default=list, nullable=True)
    created_at = Column(DateTime, server_default=func.now())


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(50), default="info", nullable=False)
    link = Column(String(500), nullable=True)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="notifications")
