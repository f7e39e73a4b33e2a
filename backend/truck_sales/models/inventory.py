from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow

LISTING_TYPES = ("SALE", "LEASE")
TRUCK_STATUSES = ("AVAILABLE", "PENDING_SALE", "SOLD")
LEASE_ONLY_FIELDS = ("monthly_price_cents", "lease_term_months", "down_payment_cents")


class Truck(db.Model):
    """
    A truck listed for sale or lease.

    PRICING: All money is stored in cents. SALE listings are priced by
    price_cents; LEASE listings by monthly_price_cents (price_cents may be 0),
    with lease_term_months and down_payment_cents meaningful only for LEASE.

    INVARIANT: status == "SOLD" implies featured is False. Every write path in
    inventory_service applies both columns in the same flush.
    """
    __tablename__ = "trucks"
    __table_args__ = (
        db.Index("ix_trucks_status_featured", "status", "featured"),
        db.Index("ix_trucks_created_at", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    title = db.Column(db.String(255), nullable=False)
    year = db.Column(db.Integer, nullable=False)
    make = db.Column(db.String(64), nullable=False)
    model = db.Column(db.String(64), nullable=False, index=True)
    trim = db.Column(db.String(64), nullable=False)
    mileage = db.Column(db.Integer, nullable=False)
    fuel_type = db.Column(db.String(32), nullable=False)
    transmission = db.Column(db.String(32), nullable=False)
    drivetrain = db.Column(db.String(32), nullable=False)
    color = db.Column(db.String(64), nullable=False)
    vin = db.Column(db.String(32), nullable=False, unique=True)
    # Dealer-internal identifier, distinct from VIN
    stock_number = db.Column(db.String(32), nullable=False, unique=True)
    description = db.Column(db.Text, nullable=False)

    listing_type = db.Column(db.String(16), nullable=False, default="SALE")
    price_cents = db.Column(db.Integer, nullable=False, default=0)
    monthly_price_cents = db.Column(db.Integer, nullable=True)
    lease_term_months = db.Column(db.Integer, nullable=True)
    down_payment_cents = db.Column(db.Integer, nullable=True)

    status = db.Column(db.String(16), nullable=False, default="AVAILABLE", index=True)
    featured = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    images = db.relationship(
        "TruckImage",
        back_populates="truck",
        order_by="TruckImage.sort_order",
        cascade="all, delete-orphan",
    )
    features = db.relationship(
        "TruckFeature",
        back_populates="truck",
        order_by="TruckFeature.id",
        cascade="all, delete-orphan",
    )
    views = db.relationship(
        "TruckView",
        back_populates="truck",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Truck id={self.id} stock_number={self.stock_number!r} status={self.status}>"

    @property
    def effective_price_cents(self) -> int:
        """Headline price: monthly payment for leases, sticker price otherwise."""
        if self.listing_type == "LEASE":
            return self.monthly_price_cents or self.price_cents
        return self.price_cents

    def to_summary_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "year": self.year,
            "make": self.make,
            "model": self.model,
        }

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "year": self.year,
            "make": self.make,
            "model": self.model,
            "trim": self.trim,
            "mileage": self.mileage,
            "fuel_type": self.fuel_type,
            "transmission": self.transmission,
            "drivetrain": self.drivetrain,
            "color": self.color,
            "vin": self.vin,
            "stock_number": self.stock_number,
            "description": self.description,
            "listing_type": self.listing_type,
            "price_cents": self.price_cents,
            "monthly_price_cents": self.monthly_price_cents,
            "lease_term_months": self.lease_term_months,
            "down_payment_cents": self.down_payment_cents,
            "status": self.status,
            "featured": self.featured,
            "images": [i.to_dict() for i in self.images],
            "features": [f.feature_name for f in self.features],
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class TruckImage(db.Model):
    """Ordered image URL for a truck. sort_order 0 is the primary image."""
    __tablename__ = "truck_images"
    __table_args__ = (
        db.Index("ix_truck_images_truck_sort", "truck_id", "sort_order"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    truck_id = db.Column(db.Integer, db.ForeignKey("trucks.id", ondelete="CASCADE"), nullable=False, index=True)
    image_url = db.Column(db.String(1024), nullable=False)
    alt_text = db.Column(db.String(255), nullable=True)
    is_primary = db.Column(db.Boolean, nullable=False, default=False)
    sort_order = db.Column(db.Integer, nullable=False, default=0)

    truck = db.relationship("Truck", back_populates="images")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "image_url": self.image_url,
            "alt_text": self.alt_text,
            "is_primary": self.is_primary,
            "sort_order": self.sort_order,
        }


class TruckFeature(db.Model):
    __tablename__ = "truck_features"
    __table_args__ = ({"sqlite_autoincrement": True},)

    id = db.Column(db.Integer, primary_key=True)
    truck_id = db.Column(db.Integer, db.ForeignKey("trucks.id", ondelete="CASCADE"), nullable=False, index=True)
    feature_name = db.Column(db.String(255), nullable=False)

    truck = db.relationship("Truck", back_populates="features")
