# Overview: Flask API routes for customer inquiries; parses input and returns JSON responses.

"""
Inquiry routes.

POST is the public contact form; everything else requires an admin.
"""
from flask import Blueprint, request, current_app

from ..models import Inquiry
from ..services import inquiry_service
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_inquiry,
    ValidationError,
)
from ..decorators import require_admin

INQUIRY_CREATE_POLICY = ModelValidationPolicy(
    writable_fields={"truck_id", "name", "email", "phone", "message", "inquiry_type"},
    required_on_create={"name", "email", "message"},
)

INQUIRY_STATUS_POLICY = ModelValidationPolicy(
    writable_fields={"status"},
    required_on_create={"status"},
)

inquiries_bp = Blueprint("inquiries", __name__, url_prefix="/api/inquiries")


@inquiries_bp.get("")
@require_admin
def list_inquiries_route():
    """
    Query params:
    - status: NEW | CONTACTED | CLOSED | all
    - page, per_page
    """
    try:
        return inquiry_service.list_inquiries(
            status=request.args.get("status"),
            page=request.args.get("page", type=int),
            per_page=request.args.get("per_page", type=int),
        )
    except Exception:
        current_app.logger.exception("Failed to list inquiries")
        return {"error": "Internal server error"}, 500


@inquiries_bp.post("")
def create_inquiry_route():
    payload = request.get_json(silent=True)

    try:
        patch = validate_payload(model=Inquiry, payload=payload, policy=INQUIRY_CREATE_POLICY, partial=False)
        enforce_rules_inquiry(patch)
        created = inquiry_service.create_inquiry(patch=patch)
    except ValidationError as e:
        return e.to_dict(), 400
    except Exception:
        current_app.logger.exception("Failed to create inquiry")
        return {"error": "Internal server error"}, 500

    return created, 201


@inquiries_bp.get("/<int:inquiry_id>")
@require_admin
def get_inquiry_route(inquiry_id: int):
    inquiry = inquiry_service.get_inquiry(inquiry_id)
    if inquiry is None:
        return {"error": "Inquiry not found"}, 404
    return inquiry.to_dict(), 200


@inquiries_bp.patch("/<int:inquiry_id>")
@require_admin
def update_inquiry_route(inquiry_id: int):
    """Set status to NEW, CONTACTED or CLOSED, in any order."""
    payload = request.get_json(silent=True)

    try:
        patch = validate_payload(model=Inquiry, payload=payload, policy=INQUIRY_STATUS_POLICY, partial=False)
        enforce_rules_inquiry(patch)
        updated = inquiry_service.update_inquiry_status(inquiry_id=inquiry_id, status=patch["status"])
    except ValidationError as e:
        return e.to_dict(), 400
    except Exception:
        current_app.logger.exception("Failed to update inquiry")
        return {"error": "Internal server error"}, 500

    if updated is None:
        return {"error": "Inquiry not found"}, 404

    return updated, 200


@inquiries_bp.delete("/<int:inquiry_id>")
@require_admin
def delete_inquiry_route(inquiry_id: int):
    try:
        deleted = inquiry_service.delete_inquiry(inquiry_id=inquiry_id)
    except Exception:
        current_app.logger.exception("Failed to delete inquiry")
        return {"error": "Internal server error"}, 500

    if not deleted:
        return {"error": "Inquiry not found"}, 404

    return {"message": "Inquiry deleted successfully"}, 200
