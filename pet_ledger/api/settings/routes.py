# pet_ledger/api/settings/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from pet_ledger.api.settings.schemas import SettingsUpdateSchema, SettingsResponseSchema, CurrencyOptionSchema
from pet_ledger.api.settings.services import SETTINGS_SECTIONS
from pet_ledger.models.settings import AppSettings, AVAILABLE_CURRENCIES

settings_bp = Blueprint('settings_bp', __name__)


@settings_bp.route('', methods=['GET'])
@jwt_required()
def get_settings():
    """Current user's settings. Falls back to the defaults when the store cannot be read."""
    user_id = get_jwt_identity()
    service = current_app.services['settings']
    try:
        settings = service.get_settings(user_id)
    except Exception as e:
        logging.error(f"Settings fetch failed, serving defaults (user: {user_id}): {e}", exc_info=True)
        settings = AppSettings.default()
    return jsonify(SettingsResponseSchema().dump(settings.to_dict())), 200


@settings_bp.route('', methods=['PUT'])
@jwt_required()
def update_settings():
    user_id = get_jwt_identity()
    service = current_app.services['settings']
    try:
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or not all(isinstance(data.get(section), dict) for section in SETTINGS_SECTIONS):
            return jsonify({"error_code": "INVALID_SETTINGS", "message": "Invalid settings data"}), 400

        validated_data = SettingsUpdateSchema().load(data)
        settings = service.update_settings(user_id, validated_data)
        return jsonify(SettingsResponseSchema().dump(settings.to_dict())), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"Settings update API error (user: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "UPDATE_FAILED", "message": "Failed to update settings"}), 500


@settings_bp.route('', methods=['DELETE'])
@jwt_required()
def reset_settings():
    """Reset the current user's settings to the defaults."""
    user_id = get_jwt_identity()
    service = current_app.services['settings']
    try:
        settings = service.reset_settings(user_id)
        return jsonify(SettingsResponseSchema().dump(settings.to_dict())), 200
    except Exception as e:
        logging.error(f"Settings reset API error (user: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "RESET_FAILED", "message": "Failed to reset settings"}), 500


@settings_bp.route('/currencies', methods=['GET'])
@jwt_required()
def list_currencies():
    return jsonify(CurrencyOptionSchema(many=True).dump(AVAILABLE_CURRENCIES)), 200
