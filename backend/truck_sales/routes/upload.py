# Overview: Flask API route for truck image uploads; proxies multipart files to object storage.

from flask import Blueprint, request, jsonify, current_app

from ..decorators import require_admin
from ..services import upload_service


upload_bp = Blueprint("upload", __name__, url_prefix="/api/upload")


@upload_bp.post("")
@require_admin
def upload_route():
    """
    Upload one or more images (multipart field "images").

    Each file must be JPEG, PNG or WebP and at most 5MB. Invalid files are
    listed under "errors"; if every file is invalid the response is 400.
    """
    files = [f for f in request.files.getlist("images") if f and f.filename]
    if not files:
        return jsonify({"error": "No files provided"}), 400

    try:
        result = upload_service.upload_images(files)
    except Exception:
        current_app.logger.exception("Failed to upload images")
        return jsonify({"error": "Internal server error"}), 500

    if not result.uploaded:
        return jsonify({"error": "Invalid data", "details": result.errors}), 400

    return jsonify(result.to_dict()), 200
