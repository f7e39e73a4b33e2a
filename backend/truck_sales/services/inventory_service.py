# Overview: Service-layer operations for truck inventory; encapsulates business logic and database work.

"""
Truck inventory service.

STATUS LIFECYCLE: AVAILABLE <-> PENDING_SALE -> SOLD (terminal).
Any write that leaves a truck SOLD also clears `featured` in the same flush,
so no reader ever observes a featured SOLD truck.

CHILD ROWS: when `images` or `features` are supplied on update, the existing
rows are deleted and recreated inside the same transaction as the parent
update. A failure anywhere rolls the whole update back.
"""
from __future__ import annotations

from ..extensions import db
from ..models import Truck, TruckImage, TruckFeature, TruckView
from ..validation import ConflictError, enforce_rules_truck
from .pagination import paginate

TRUCK_MUTABLE_FIELDS = {
    "title", "year", "make", "model", "trim", "mileage", "fuel_type",
    "transmission", "drivetrain", "color", "vin", "stock_number", "description",
    "listing_type", "price_cents", "monthly_price_cents", "lease_term_months",
    "down_payment_cents", "status", "featured",
}


def apply_truck_patch(truck: Truck, patch: dict) -> None:
    for k, v in patch.items():
        if k not in TRUCK_MUTABLE_FIELDS:
            continue
        setattr(truck, k, v)
    if truck.status == "SOLD":
        truck.featured = False


def _current_values(truck: Truck) -> dict:
    return {k: getattr(truck, k) for k in TRUCK_MUTABLE_FIELDS}


def _build_images(urls: list[str]) -> list[TruckImage]:
    return [
        TruckImage(image_url=url, is_primary=(index == 0), sort_order=index)
        for index, url in enumerate(urls)
    ]


def _build_features(names: list[str]) -> list[TruckFeature]:
    return [TruckFeature(feature_name=name) for name in names]


def _ensure_unique(patch: dict, exclude_id: int | None = None) -> None:
    for field, label in (("vin", "VIN"), ("stock_number", "Stock number")):
        value = patch.get(field)
        if value is None:
            continue
        query = db.session.query(Truck.id).filter(getattr(Truck, field) == value)
        if exclude_id is not None:
            query = query.filter(Truck.id != exclude_id)
        if query.first():
            raise ConflictError(f"{label} already exists.")


def list_trucks(
    *,
    page: int | None = None,
    per_page: int | None = None,
    status: str | None = None,
    model: str | None = None,
    listing_type: str | None = None,
    search: str | None = None,
    featured: bool = False,
) -> dict:
    """
    Public truck listing, newest first.

    status accepts a single value or a comma-separated list; "all" (or
    empty) disables a filter. featured=True returns featured trucks that are
    not SOLD.
    """
    query = db.session.query(Truck)

    if status and status != "all":
        statuses = [s.strip() for s in status.split(",") if s.strip()]
        query = query.filter(Truck.status.in_(statuses))

    if model and model != "all":
        query = query.filter(Truck.model == model)

    if listing_type and listing_type != "all":
        query = query.filter(Truck.listing_type == listing_type)

    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(
            db.or_(
                Truck.title.ilike(pattern),
                Truck.description.ilike(pattern),
                Truck.make.ilike(pattern),
                Truck.model.ilike(pattern),
            )
        )

    if featured:
        query = query.filter(Truck.featured.is_(True), Truck.status != "SOLD")

    query = query.order_by(Truck.created_at.desc(), Truck.id.desc())
    return paginate(query, page=page, per_page=per_page, serialize=Truck.to_dict)


def get_truck(truck_id: int) -> Truck | None:
    return db.session.get(Truck, truck_id)


def create_truck(*, patch: dict) -> dict:
    """
    Create a truck from a validated patch dict.

    Raises:
        ValidationError: listing-type price rule violated
        ConflictError: VIN or stock number already in use
    """
    patch = dict(patch)
    images = patch.pop("images", None) or []
    features = patch.pop("features", None) or []

    enforce_rules_truck(patch)
    _ensure_unique(patch)

    truck = Truck()
    apply_truck_patch(truck, patch)
    truck.images = _build_images(images)
    truck.features = _build_features(features)

    db.session.add(truck)
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return truck.to_dict()


def update_truck(*, truck_id: int, patch: dict) -> dict | None:
    """
    Update a truck; returns None if it does not exist.

    Raises:
        ValidationError: merged result violates the listing-type price rule
        ConflictError: VIN/stock number clash, or a status change out of SOLD
    """
    truck = get_truck(truck_id)
    if truck is None:
        return None

    patch = dict(patch)
    images = patch.pop("images", None)
    features = patch.pop("features", None)

    enforce_rules_truck(patch, _current_values(truck))

    new_status = patch.get("status")
    if truck.status == "SOLD" and new_status is not None and new_status != "SOLD":
        raise ConflictError("Sold trucks cannot change status.")

    _ensure_unique(patch, exclude_id=truck.id)

    try:
        apply_truck_patch(truck, patch)

        if images is not None:
            truck.images.clear()
            db.session.flush()
            truck.images.extend(_build_images(images))

        if features is not None:
            truck.features.clear()
            db.session.flush()
            truck.features.extend(_build_features(features))

        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    return truck.to_dict()


def delete_truck(*, truck_id: int) -> bool:
    """
    Delete a truck with its images, features and view events.

    Inquiries and financing applications keep their rows; their truck
    reference is cleared.

    View events are removed with one bulk DELETE; the collection is never loaded.
    """
    truck = get_truck(truck_id)
    if truck is None:
        return False

    try:
        db.session.query(TruckView).filter(TruckView.truck_id == truck.id).delete(synchronize_session=False)
        db.session.delete(truck)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return True
