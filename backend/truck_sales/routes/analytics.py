# Overview: Flask API routes for analytics; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, current_app

from ..decorators import require_admin
from ..services import analytics_service
from ..services.analytics_service import ReportError


analytics_bp = Blueprint("analytics", __name__, url_prefix="/api/analytics")


@analytics_bp.get("")
@require_admin
def analytics_route():
    """
    Dashboard report.

    Query params:
    - period: day | week | month | all (default week)
    """
    try:
        result = analytics_service.get_analytics(request.args.get("period", "week"))
        return jsonify(result)
    except ReportError as e:
        return jsonify({
            "error": "Invalid data",
            "details": [{"field": "period", "message": str(e)}],
        }), 400
    except Exception:
        current_app.logger.exception("Failed to build analytics report")
        return jsonify({"error": "Internal server error"}), 500
