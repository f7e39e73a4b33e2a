from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow


class TruckView(db.Model):
    """
    Append-only public view event for a truck detail page.

    PRIVACY: ip_hash is SHA-256(client_ip + server salt); the raw IP is never
    persisted. session_id is the visitor's opaque cookie value, if any.

    Rows are written only by view_service.record_view_if_eligible and removed
    only through the Truck cascade.
    """
    __tablename__ = "truck_views"
    __table_args__ = (
        db.Index("ix_truck_views_truck_timestamp", "truck_id", "timestamp"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    truck_id = db.Column(db.Integer, db.ForeignKey("trucks.id", ondelete="CASCADE"), nullable=False, index=True)
    timestamp = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    ip_hash = db.Column(db.String(64), nullable=True, index=True)
    session_id = db.Column(db.String(128), nullable=True, index=True)

    truck = db.relationship("Truck", back_populates="views")

    def __repr__(self) -> str:
        return f"<TruckView id={self.id} truck_id={self.truck_id} timestamp={self.timestamp}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "truck_id": self.truck_id,
            "timestamp": to_utc_z(self.timestamp),
            "session_id": self.session_id,
        }
