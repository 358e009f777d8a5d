import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import relationship

from .database import Base


def generate_id():
    """Generate a unique string primary key"""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column stores"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class UserRole(str, enum.Enum):
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    STAFF = "STAFF"
    MEMBER = "MEMBER"


class PaymentType(str, enum.Enum):
    ONE_TIME = "ONE_TIME"
    EMI = "EMI"
    PARTIAL = "PARTIAL"


class PaymentStatus(str, enum.Enum):
    """Booking-level payment status, derived from the booking's PAID payments"""

    PENDING = "PENDING"
    PARTIAL = "PARTIAL"
    PAID = "PAID"
    FAILED = "FAILED"


class PaymentRecordStatus(str, enum.Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"


class EnquiryStatus(str, enum.Enum):
    PENDING = "PENDING"
    BOOKED = "BOOKED"
    NOT_INTERESTED = "NOT_INTERESTED"


BOOKING_STATUS_BOOKED = "BOOKED"


tour_member_members = Table(
    "tour_member_members",
    Base.metadata,
    Column(
        "tour_member_id",
        String(36),
        ForeignKey("tour_members.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("member_id", String(36), ForeignKey("members.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(100), nullable=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), default=UserRole.MEMBER.value, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    members = relationship("Member", back_populates="user")


class Member(Base):
    """A customer. The id doubles as the id of the linked MEMBER login"""

    __tablename__ = "members"

    id = Column(String(36), primary_key=True)
    name = Column(String(100), nullable=False)
    mobile_no = Column(String(20), nullable=False, index=True)
    address = Column(String(500), nullable=False)
    # [{filename, originalName, path, mimetype, size, uploadedAt}]
    document = Column(JSON, default=list, nullable=False)
    extra = Column(JSON, default=dict, nullable=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="members")
    bookings = relationship("TourMember", secondary=tour_member_members, back_populates="members")


class TourPackage(Base):
    __tablename__ = "tour_packages"

    id = Column(String(36), primary_key=True, default=generate_id)
    package_name = Column(String(200), nullable=False, index=True)
    tour_price = Column(Float, nullable=False)
    total_seat = Column(Integer, nullable=False)
    desc = Column(Text, nullable=False)
    cover_photo = Column(String(500), nullable=True)  # path relative to UPLOAD_DIR
    extra = Column(JSON, default=dict, nullable=True)
    created_by_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    bookings = relationship("TourMember", back_populates="tour_package")


class TourMember(Base):
    """A booking of one tour package by one or more members"""

    __tablename__ = "tour_members"

    id = Column(String(36), primary_key=True, default=generate_id)
    tour_package_id = Column(String(36), ForeignKey("tour_packages.id"), nullable=False, index=True)
    member_count = Column(Integer, nullable=False, default=1)
    package_price = Column(Float, nullable=False)
    net_cost = Column(Float, nullable=False)
    discount = Column(Float, nullable=False, default=0)
    total_cost = Column(Float, nullable=False)
    payment_type = Column(String(20), nullable=False)
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value)

    # Reminder tracking
    reminder_count = Column(Integer, nullable=False, default=0)
    last_reminder = Column(DateTime, nullable=True)
    next_reminder = Column(DateTime, nullable=True)

    status = Column(String(30), nullable=False, default=BOOKING_STATUS_BOOKED)
    extra = Column(JSON, nullable=True)
    created_by_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    tour_package = relationship("TourPackage", back_populates="bookings")
    members = relationship(
        "Member", secondary=tour_member_members, back_populates="bookings", order_by="Member.id"
    )
    payments = relationship(
        "Payment",
        back_populates="tour_member",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Payment.created_at.desc()",
    )
    created_by = relationship("User")

    @property
    def total_paid(self) -> float:
        return round(
            sum(p.amount for p in self.payments if p.status == PaymentRecordStatus.PAID.value), 2
        )

    @property
    def due_amount(self) -> float:
        return round(max(self.total_cost - self.total_paid, 0), 2)


class Payment(Base):
    __tablename__ = "payments"

    id = Column(String(36), primary_key=True, default=generate_id)
    tour_member_id = Column(
        String(36), ForeignKey("tour_members.id", ondelete="CASCADE"), nullable=False, index=True
    )
    amount = Column(Float, nullable=False)
    payment_method = Column(String(50), nullable=False)
    status = Column(String(20), nullable=False, default=PaymentRecordStatus.PAID.value)
    note = Column(Text, nullable=True)
    payment_date = Column(DateTime, default=utcnow, nullable=False)
    created_by_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    tour_member = relationship("TourMember", back_populates="payments")
    created_by = relationship("User")


class EnquiryForm(Base):
    """Pre-sale lead, independent of bookings"""

    __tablename__ = "enquiry_forms"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(100), nullable=False)
    phone = Column(String(30), nullable=False)
    purpose = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default=EnquiryStatus.PENDING.value)
    created_by_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    created_by = relationship("User")
