# pet_ledger/api/exports/routes.py
import logging
from urllib.parse import quote

from flask import Blueprint, request, jsonify, current_app, make_response
from flask_jwt_extended import jwt_required, get_jwt_identity

exports_bp = Blueprint('exports_bp', __name__)


@exports_bp.route('', methods=['GET'])
@jwt_required()
def export_data():
    """Download the current user's data. Query parameter: format (json | csv)."""
    user_id = get_jwt_identity()
    export_service = current_app.services['exports']
    export_format = request.args.get('format', 'json').lower()
    try:
        content, mimetype, filename = export_service.export(user_id, export_format)

        response = make_response(content)
        response.headers["Content-Type"] = mimetype
        response.headers["Content-Disposition"] = f"attachment; filename*=UTF-8''{quote(filename)}"
        response.headers["Access-Control-Expose-Headers"] = "Content-Disposition"
        return response
    except ValueError as e:
        return jsonify({"error_code": "UNSUPPORTED_FORMAT", "message": str(e)}), 400
    except Exception as e:
        logging.error(f"Export API error (format: {export_format}): {e}", exc_info=True)
        return jsonify({"error_code": "EXPORT_FAILED", "message": "Failed to export data"}), 500
