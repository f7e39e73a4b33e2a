# Overview: Service-layer operations for customer inquiries.

from __future__ import annotations

from ..extensions import db
from ..models import Inquiry, Truck
from ..validation import ValidationError
from .pagination import paginate

INQUIRY_MUTABLE_FIELDS = {"truck_id", "name", "email", "phone", "message", "inquiry_type", "status"}


def apply_inquiry_patch(inquiry: Inquiry, patch: dict) -> None:
    for k, v in patch.items():
        if k not in INQUIRY_MUTABLE_FIELDS:
            continue
        setattr(inquiry, k, v)


def require_existing_truck(truck_id: int | None) -> None:
    if truck_id is not None and db.session.get(Truck, truck_id) is None:
        raise ValidationError("truck_id does not reference an existing truck", "truck_id")


def list_inquiries(*, status: str | None = None, page: int | None = None, per_page: int | None = None) -> dict:
    query = db.session.query(Inquiry)
    if status and status != "all":
        query = query.filter(Inquiry.status == status)
    query = query.order_by(Inquiry.created_at.desc(), Inquiry.id.desc())
    return paginate(query, page=page, per_page=per_page, serialize=Inquiry.to_dict)


def get_inquiry(inquiry_id: int) -> Inquiry | None:
    return db.session.get(Inquiry, inquiry_id)


def create_inquiry(*, patch: dict) -> dict:
    """New inquiries always start as NEW regardless of input."""
    require_existing_truck(patch.get("truck_id"))

    inquiry = Inquiry()
    apply_inquiry_patch(inquiry, patch)
    inquiry.status = "NEW"
    if not inquiry.inquiry_type:
        inquiry.inquiry_type = "GENERAL"

    db.session.add(inquiry)
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return inquiry.to_dict()


def update_inquiry_status(*, inquiry_id: int, status: str) -> dict | None:
    """Any status may follow any other; there is no enforced order."""
    inquiry = get_inquiry(inquiry_id)
    if inquiry is None:
        return None

    inquiry.status = status
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return inquiry.to_dict()


def delete_inquiry(*, inquiry_id: int) -> bool:
    inquiry = get_inquiry(inquiry_id)
    if inquiry is None:
        return False

    db.session.delete(inquiry)
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return True
