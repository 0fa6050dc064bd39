# pet_ledger/api/auth/routes.py

import logging
import jwt
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import (
    create_access_token,
    create_refresh_token,
    jwt_required,
    get_jwt_identity
)
from marshmallow import ValidationError

from pet_ledger.api.auth.schemas import SessionRequestSchema, LogoutRequestSchema
from pet_ledger.core.security import verify_id_token

auth_bp = Blueprint('auth_bp', __name__)


@auth_bp.route('/session', methods=['POST'])
def create_session():
    """Exchange an identity-provider ID token for app access/refresh tokens."""
    try:
        validated_data = SessionRequestSchema().load(request.get_json(silent=True) or {})
        user_id = verify_id_token(validated_data['id_token'])

        return jsonify({
            "access_token": create_access_token(identity=user_id),
            "refresh_token": create_refresh_token(identity=user_id),
            "user_id": user_id
        }), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except PermissionError as e:
        return jsonify({"error_code": "INVALID_ID_TOKEN", "message": str(e)}), 401
    except Exception as e:
        logging.error(f"Session creation failed: {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "Failed to create session"}), 500


@auth_bp.route('/token/refresh', methods=['POST'])
@jwt_required(refresh=True)
def refresh_token():
    """Issue a new access token from a valid, non-revoked refresh token."""
    current_user_id = get_jwt_identity()
    return jsonify(access_token=create_access_token(identity=current_user_id)), 200


@auth_bp.route('/logout', methods=['POST'])
def logout():
    """Add the given access and refresh tokens to the blocklist."""
    auth_service = current_app.services['auth']
    try:
        data = LogoutRequestSchema().load(request.get_json(silent=True) or {})

        secret_key = current_app.config['JWT_SECRET_KEY']
        algorithm = current_app.config.get('JWT_ALGORITHM', 'HS256')

        # expired tokens are still accepted so they can be revoked
        decoded_access = jwt.decode(data['access_token'], secret_key, algorithms=[algorithm], options={"verify_exp": False})
        decoded_refresh = jwt.decode(data['refresh_token'], secret_key, algorithms=[algorithm], options={"verify_exp": False})

        auth_service.logout_user(
            decoded_access['jti'], decoded_access['exp'],
            decoded_refresh['jti'], decoded_refresh['exp']
        )
        return jsonify({"message": "Logged out"}), 200

    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except jwt.PyJWTError as e:
        logging.warning(f"Logout with undecodable token: {e}")
        return jsonify({"error_code": "INVALID_TOKEN", "message": "Invalid token"}), 422
    except Exception as e:
        logging.error(f"Logout failed: {e}", exc_info=True)
        return jsonify({"error_code": "LOGOUT_FAILED", "message": "Failed to log out"}), 500
