# pet_ledger/api/animals/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from .schemas import (
    AnimalFormSchema,
    AnimalResponseSchema,
    AnimalListResponseSchema,
    AnimalsQuerySchema,
    WeightRecordCreateSchema,
    HeightRecordCreateSchema
)

animals_bp = Blueprint('animals_bp', __name__)


@animals_bp.route('', methods=['GET'])
@jwt_required()
def list_animals():
    """
    Current user's animals.

    Query parameters:
    - search: substring of name, breed or species
    - species: exact species value
    - status: alive | deceased | all (default from display settings)
    """
    user_id = get_jwt_identity()
    animal_service = current_app.services['animals']
    try:
        params = AnimalsQuerySchema().load(request.args)
        result = animal_service.list_animals(user_id, params)
        return jsonify(AnimalListResponseSchema().dump(result)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"List animals API error: {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "Failed to fetch animals"}), 500


@animals_bp.route('', methods=['POST'])
@jwt_required()
def create_animal():
    user_id = get_jwt_identity()
    animal_service = current_app.services['animals']
    try:
        validated_data = AnimalFormSchema().load(request.get_json(silent=True) or {})
        animal = animal_service.add_animal(user_id, validated_data)
        return jsonify(AnimalResponseSchema().dump(animal.to_dict())), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"Create animal API error: {e}", exc_info=True)
        return jsonify({"error_code": "ANIMAL_CREATION_FAILED", "message": "Failed to create animal"}), 500


@animals_bp.route('/stats', methods=['GET'])
@jwt_required()
def get_stats():
    """Dashboard statistics for the current user."""
    user_id = get_jwt_identity()
    animal_service = current_app.services['animals']
    try:
        return jsonify(animal_service.get_stats(user_id)), 200
    except Exception as e:
        logging.error(f"Animal stats API error: {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "Failed to compute statistics"}), 500


@animals_bp.route('/<string:animal_id>', methods=['GET'])
@jwt_required()
def get_animal(animal_id: str):
    """[Owner only] Full profile of an animal."""
    user_id = get_jwt_identity()
    animal_service = current_app.services['animals']
    try:
        animal = animal_service.get_animal(animal_id, user_id)
        return jsonify(AnimalResponseSchema().dump(animal.to_dict())), 200
    except FileNotFoundError as e:
        return jsonify({"error_code": "ANIMAL_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"Get animal API error (animal_id: {animal_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "Failed to fetch animal"}), 500


@animals_bp.route('/<string:animal_id>', methods=['PUT'])
@jwt_required()
def update_animal(animal_id: str):
    """[Owner only] Replace the profile of an animal."""
    user_id = get_jwt_identity()
    animal_service = current_app.services['animals']
    try:
        validated_data = AnimalFormSchema().load(request.get_json(silent=True) or {})
        animal = animal_service.update_animal(animal_id, user_id, validated_data)
        return jsonify(AnimalResponseSchema().dump(animal.to_dict())), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except FileNotFoundError as e:
        return jsonify({"error_code": "ANIMAL_NOT_FOUND", "message": str(e)}), 404
    except ValueError as e:
        return jsonify({"error_code": "UPDATE_FAILED", "message": str(e)}), 400
    except Exception as e:
        logging.error(f"Update animal API error (animal_id: {animal_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "Failed to update animal"}), 500


@animals_bp.route('/<string:animal_id>', methods=['DELETE'])
@jwt_required()
def delete_animal(animal_id: str):
    user_id = get_jwt_identity()
    animal_service = current_app.services['animals']
    try:
        animal_service.delete_animal(animal_id, user_id)
        return jsonify({"success": True}), 200
    except FileNotFoundError as e:
        return jsonify({"error_code": "ANIMAL_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"Delete animal API error (animal_id: {animal_id}): {e}", exc_info=True)
        return jsonify({"error_code": "DELETE_FAILED", "message": "Failed to delete animal"}), 500


@animals_bp.route('/<string:animal_id>/summary', methods=['GET'])
@jwt_required()
def get_animal_summary(animal_id: str):
    """Derived values of an animal (age, next birthday, converted measurements), display-formatted."""
    user_id = get_jwt_identity()
    animal_service = current_app.services['animals']
    try:
        return jsonify(animal_service.get_summary(animal_id, user_id)), 200
    except FileNotFoundError as e:
        return jsonify({"error_code": "ANIMAL_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"Animal summary API error (animal_id: {animal_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "Failed to build summary"}), 500


@animals_bp.route('/<string:animal_id>/weights', methods=['POST'])
@jwt_required()
def add_weight_record(animal_id: str):
    user_id = get_jwt_identity()
    animal_service = current_app.services['animals']
    try:
        validated_data = WeightRecordCreateSchema().load(request.get_json(silent=True) or {})
        animal = animal_service.add_weight_record(animal_id, user_id, validated_data)
        return jsonify(AnimalResponseSchema().dump(animal.to_dict())), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except FileNotFoundError as e:
        return jsonify({"error_code": "ANIMAL_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"Add weight record API error (animal_id: {animal_id}): {e}", exc_info=True)
        return jsonify({"error_code": "RECORD_CREATION_FAILED", "message": "Failed to add weight record"}), 500


@animals_bp.route('/<string:animal_id>/heights', methods=['POST'])
@jwt_required()
def add_height_record(animal_id: str):
    user_id = get_jwt_identity()
    animal_service = current_app.services['animals']
    try:
        validated_data = HeightRecordCreateSchema().load(request.get_json(silent=True) or {})
        animal = animal_service.add_height_record(animal_id, user_id, validated_data)
        return jsonify(AnimalResponseSchema().dump(animal.to_dict())), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except FileNotFoundError as e:
        return jsonify({"error_code": "ANIMAL_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"Add height record API error (animal_id: {animal_id}): {e}", exc_info=True)
        return jsonify({"error_code": "RECORD_CREATION_FAILED", "message": "Failed to add height record"}), 500
