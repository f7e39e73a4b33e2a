# Overview: Flask API routes for financing applications; parses input and returns JSON responses.

from flask import Blueprint, request, current_app

from ..models import FinancingApplication
from ..services import financing_service
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_financing,
    ValidationError,
)
from ..decorators import require_admin

FINANCING_CREATE_POLICY = ModelValidationPolicy(
    writable_fields=financing_service.FINANCING_MUTABLE_FIELDS - {"status"},
    required_on_create={"first_name", "last_name", "email", "phone"},
)

FINANCING_STATUS_POLICY = ModelValidationPolicy(
    writable_fields={"status"},
    required_on_create={"status"},
)

financing_bp = Blueprint("financing", __name__, url_prefix="/api/financing")


@financing_bp.get("")
@require_admin
def list_applications_route():
    try:
        return financing_service.list_applications(
            status=request.args.get("status"),
            page=request.args.get("page", type=int),
            per_page=request.args.get("per_page", type=int),
        )
    except Exception:
        current_app.logger.exception("Failed to list financing applications")
        return {"error": "Internal server error"}, 500


@financing_bp.post("")
def create_application_route():
    """Public financing application form."""
    payload = request.get_json(silent=True)

    try:
        patch = validate_payload(
            model=FinancingApplication, payload=payload, policy=FINANCING_CREATE_POLICY, partial=False
        )
        enforce_rules_financing(patch)
        created = financing_service.create_application(patch=patch)
    except ValidationError as e:
        return e.to_dict(), 400
    except Exception:
        current_app.logger.exception("Failed to create financing application")
        return {"error": "Internal server error"}, 500

    return created, 201


@financing_bp.get("/<int:application_id>")
@require_admin
def get_application_route(application_id: int):
    application = financing_service.get_application(application_id)
    if application is None:
        return {"error": "Financing application not found"}, 404
    return application.to_dict(), 200


@financing_bp.patch("/<int:application_id>")
@require_admin
def update_application_route(application_id: int):
    payload = request.get_json(silent=True)

    try:
        patch = validate_payload(
            model=FinancingApplication, payload=payload, policy=FINANCING_STATUS_POLICY, partial=False
        )
        enforce_rules_financing(patch)
        updated = financing_service.update_application_status(
            application_id=application_id, status=patch["status"]
        )
    except ValidationError as e:
        return e.to_dict(), 400
    except Exception:
        current_app.logger.exception("Failed to update financing application")
        return {"error": "Internal server error"}, 500

    if updated is None:
        return {"error": "Financing application not found"}, 404

    return updated, 200


@financing_bp.delete("/<int:application_id>")
@require_admin
def delete_application_route(application_id: int):
    try:
        deleted = financing_service.delete_application(application_id=application_id)
    except Exception:
        current_app.logger.exception("Failed to delete financing application")
        return {"error": "Internal server error"}, 500

    if not deleted:
        return {"error": "Financing application not found"}, 404

    return {"message": "Financing application deleted successfully"}, 200
