# Overview: Flask API routes for truck inventory; parses input and returns JSON responses.

"""
Truck inventory routes.

Reads are public; writes require an admin session (@require_admin).
GET /api/trucks/<id> also feeds the View Recorder, which can never fail the
response.
"""
from flask import Blueprint, request, current_app

from ..models import Truck, TruckImage, TruckFeature
from ..services import inventory_service, view_service
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    ValidationError,
    ConflictError,
)
from ..decorators import require_admin

TRUCK_POLICY = ModelValidationPolicy(
    writable_fields=inventory_service.TRUCK_MUTABLE_FIELDS | {"images", "features"},
    required_on_create={
        "title", "year", "make", "model", "trim", "mileage", "fuel_type",
        "transmission", "drivetrain", "color", "vin", "stock_number",
        "description", "price_cents",
    },
    list_fields={"images", "features"},
    list_item_lengths={
        "images": TruckImage.image_url.type.length,
        "features": TruckFeature.feature_name.type.length,
    },
)

trucks_bp = Blueprint("trucks", __name__, url_prefix="/api/trucks")


@trucks_bp.get("")
def list_trucks_route():
    """
    List trucks, newest first.

    Query params:
    - page: int (default 1)
    - per_page: int (default 10, max 100)
    - status: AVAILABLE | PENDING_SALE | SOLD, comma list, or "all"
    - model, listing_type: exact match ("all" disables)
    - search: case-insensitive match on title, description, make, model
    - featured: "true" for featured trucks that are not sold
    """
    try:
        return inventory_service.list_trucks(
            page=request.args.get("page", type=int),
            per_page=request.args.get("per_page", type=int),
            status=request.args.get("status"),
            model=request.args.get("model"),
            listing_type=request.args.get("listing_type"),
            search=request.args.get("search"),
            featured=request.args.get("featured", "").lower() == "true",
        )
    except Exception:
        current_app.logger.exception("Failed to list trucks")
        return {"error": "Internal server error"}, 500


@trucks_bp.post("")
@require_admin
def create_truck_route():
    payload = request.get_json(silent=True)

    try:
        patch = validate_payload(model=Truck, payload=payload, policy=TRUCK_POLICY, partial=False)
        created = inventory_service.create_truck(patch=patch)
    except ValidationError as e:
        return e.to_dict(), 400
    except ConflictError as e:
        return {"error": str(e)}, 409
    except Exception:
        current_app.logger.exception("Failed to create truck")
        return {"error": "Internal server error"}, 500

    return created, 201


@trucks_bp.get("/<int:truck_id>")
def get_truck_route(truck_id: int):
    try:
        truck = inventory_service.get_truck(truck_id)
        if truck is None:
            return {"error": "Truck not found"}, 404
        body = truck.to_dict()
    except Exception:
        current_app.logger.exception("Failed to fetch truck")
        return {"error": "Internal server error"}, 500

    view_service.record_view_for_request(truck_id, request)
    return body, 200


def _update(truck_id: int, *, partial: bool):
    payload = request.get_json(silent=True)

    try:
        patch = validate_payload(model=Truck, payload=payload, policy=TRUCK_POLICY, partial=partial)
        updated = inventory_service.update_truck(truck_id=truck_id, patch=patch)
    except ValidationError as e:
        return e.to_dict(), 400
    except ConflictError as e:
        return {"error": str(e)}, 409
    except Exception:
        current_app.logger.exception("Failed to update truck")
        return {"error": "Internal server error"}, 500

    if updated is None:
        return {"error": "Truck not found"}, 404

    return updated, 200


@trucks_bp.put("/<int:truck_id>")
@require_admin
def replace_truck_route(truck_id: int):
    """Full update: every field required on create must be present."""
    return _update(truck_id, partial=False)


@trucks_bp.patch("/<int:truck_id>")
@require_admin
def patch_truck_route(truck_id: int):
    """Partial update: only the provided fields change."""
    return _update(truck_id, partial=True)


@trucks_bp.delete("/<int:truck_id>")
@require_admin
def delete_truck_route(truck_id: int):
    try:
        deleted = inventory_service.delete_truck(truck_id=truck_id)
    except Exception:
        current_app.logger.exception("Failed to delete truck")
        return {"error": "Internal server error"}, 500

    if not deleted:
        return {"error": "Truck not found"}, 404

    return {"message": "Truck deleted successfully"}, 200
