from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow

INQUIRY_TYPES = ("GENERAL", "SALES", "TEST_DRIVE", "FINANCING", "SERVICE")
INQUIRY_STATUSES = ("NEW", "CONTACTED", "CLOSED")
FINANCING_STATUSES = ("PENDING", "APPROVED", "DECLINED")


class Inquiry(db.Model):
    """
    Customer contact form submission.

    truck_id is a weak reference: deleting the truck clears it and keeps the
    inquiry. Status moves freely between NEW, CONTACTED and CLOSED.
    """
    __tablename__ = "inquiries"
    __table_args__ = (
        db.Index("ix_inquiries_status_created", "status", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    truck_id = db.Column(db.Integer, db.ForeignKey("trucks.id", ondelete="SET NULL"), nullable=True, index=True)

    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(32), nullable=True)
    message = db.Column(db.Text, nullable=False)

    inquiry_type = db.Column(db.String(16), nullable=False, default="GENERAL")
    status = db.Column(db.String(16), nullable=False, default="NEW")

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    truck = db.relationship("Truck", backref=db.backref("inquiries", lazy=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "truck_id": self.truck_id,
            "truck": self.truck.to_summary_dict() if self.truck else None,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "message": self.message,
            "inquiry_type": self.inquiry_type,
            "status": self.status,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class FinancingApplication(db.Model):
    __tablename__ = "financing_applications"
    __table_args__ = (
        db.Index("ix_financing_status_created", "status", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    truck_id = db.Column(db.Integer, db.ForeignKey("trucks.id", ondelete="SET NULL"), nullable=True, index=True)

    first_name = db.Column(db.String(80), nullable=False)
    last_name = db.Column(db.String(80), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(32), nullable=False)

    annual_income_cents = db.Column(db.Integer, nullable=True)
    down_payment_cents = db.Column(db.Integer, nullable=True)
    financing_type = db.Column(db.String(32), nullable=True)
    truck_interest = db.Column(db.String(64), nullable=True)
    additional_info = db.Column(db.Text, nullable=True)

    status = db.Column(db.String(16), nullable=False, default="PENDING")

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    truck = db.relationship("Truck", backref=db.backref("financing_applications", lazy=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "truck_id": self.truck_id,
            "truck": self.truck.to_summary_dict() if self.truck else None,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "annual_income_cents": self.annual_income_cents,
            "down_payment_cents": self.down_payment_cents,
            "financing_type": self.financing_type,
            "truck_interest": self.truck_interest,
            "additional_info": self.additional_info,
            "status": self.status,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
