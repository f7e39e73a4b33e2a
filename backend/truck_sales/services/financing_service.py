# Overview: Service-layer operations for financing applications.

from __future__ import annotations

from ..extensions import db
from ..models import FinancingApplication
from .inquiry_service import require_existing_truck
from .pagination import paginate

FINANCING_MUTABLE_FIELDS = {
    "truck_id", "first_name", "last_name", "email", "phone",
    "annual_income_cents", "down_payment_cents", "financing_type",
    "truck_interest", "additional_info", "status",
}


def list_applications(*, status: str | None = None, page: int | None = None, per_page: int | None = None) -> dict:
    query = db.session.query(FinancingApplication)
    if status and status != "all":
        query = query.filter(FinancingApplication.status == status)
    query = query.order_by(FinancingApplication.created_at.desc(), FinancingApplication.id.desc())
    return paginate(query, page=page, per_page=per_page, serialize=FinancingApplication.to_dict)


def get_application(application_id: int) -> FinancingApplication | None:
    return db.session.get(FinancingApplication, application_id)


def create_application(*, patch: dict) -> dict:
    require_existing_truck(patch.get("truck_id"))

    application = FinancingApplication()
    for k, v in patch.items():
        if k in FINANCING_MUTABLE_FIELDS:
            setattr(application, k, v)
    application.status = "PENDING"

    db.session.add(application)
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return application.to_dict()


def update_application_status(*, application_id: int, status: str) -> dict | None:
    application = get_application(application_id)
    if application is None:
        return None

    application.status = status
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return application.to_dict()


def delete_application(*, application_id: int) -> bool:
    application = get_application(application_id)
    if application is None:
        return False

    db.session.delete(application)
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return True
