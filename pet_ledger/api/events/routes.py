# pet_ledger/api/events/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from pet_ledger.api.events.schemas import (
    EventCreateSchema,
    EventUpdateSchema,
    EventsQuerySchema,
    EventsResponseSchema
)
from pet_ledger.api.animals.schemas import AnimalResponseSchema

# registered under /api/animals together with animals_bp
events_bp = Blueprint('events_bp', __name__)


@events_bp.route('/<string:animal_id>/events', methods=['GET'])
@jwt_required()
def list_events(animal_id: str):
    """Timeline of an animal. Optional query parameter: type."""
    user_id = get_jwt_identity()
    service = current_app.services['events']
    try:
        params = EventsQuerySchema().load(request.args)
        result = service.list_events(animal_id, user_id, params['type'])
        return jsonify(EventsResponseSchema().dump(result)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except FileNotFoundError as e:
        return jsonify({"error_code": "ANIMAL_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"List events API error (animal_id: {animal_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "Failed to fetch events"}), 500


@events_bp.route('/<string:animal_id>/events', methods=['POST'])
@jwt_required()
def add_event(animal_id: str):
    user_id = get_jwt_identity()
    service = current_app.services['events']
    try:
        validated_data = EventCreateSchema().load(request.get_json(silent=True) or {})
        animal = service.add_event(animal_id, user_id, validated_data)
        return jsonify(AnimalResponseSchema().dump(animal.to_dict())), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except FileNotFoundError as e:
        return jsonify({"error_code": "ANIMAL_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"Add event API error (animal_id: {animal_id}): {e}", exc_info=True)
        return jsonify({"error_code": "EVENT_CREATION_FAILED", "message": "Failed to add event"}), 500


@events_bp.route('/<string:animal_id>/events/<string:event_id>', methods=['PUT'])
@jwt_required()
def update_event(animal_id: str, event_id: str):
    user_id = get_jwt_identity()
    service = current_app.services['events']
    try:
        validated_data = EventUpdateSchema().load(request.get_json(silent=True) or {})
        animal = service.update_event(animal_id, user_id, event_id, validated_data)
        return jsonify(AnimalResponseSchema().dump(animal.to_dict())), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except FileNotFoundError as e:
        return jsonify({"error_code": "EVENT_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"Update event API error (animal_id: {animal_id}, event_id: {event_id}): {e}", exc_info=True)
        return jsonify({"error_code": "UPDATE_FAILED", "message": "Failed to update event"}), 500


@events_bp.route('/<string:animal_id>/events/<string:event_id>', methods=['DELETE'])
@jwt_required()
def delete_event(animal_id: str, event_id: str):
    user_id = get_jwt_identity()
    service = current_app.services['events']
    try:
        service.delete_event(animal_id, user_id, event_id)
        return jsonify({"success": True}), 200
    except FileNotFoundError as e:
        return jsonify({"error_code": "EVENT_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"Delete event API error (animal_id: {animal_id}, event_id: {event_id}): {e}", exc_info=True)
        return jsonify({"error_code": "DELETE_FAILED", "message": "Failed to delete event"}), 500
