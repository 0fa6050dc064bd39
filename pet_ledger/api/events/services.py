# pet_ledger/api/events/services.py
import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, Any, List, Optional

from pet_ledger.api.animals.services import AnimalService
from pet_ledger.models.animal import Animal, EventEntry, EventType
from pet_ledger.utils.datetime_utils import DateTimeUtils

TEXT_FIELDS = ('title', 'description', 'notes', 'veterinarian')

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _event_sort_key(event: EventEntry) -> datetime:
    try:
        return DateTimeUtils.parse_iso_datetime(event.date)
    except ValueError:
        return _OLDEST


def sort_events(events: List[EventEntry]) -> List[EventEntry]:
    """Newest first. Events sharing a date keep their relative order."""
    return sorted(events, key=_event_sort_key, reverse=True)


def _trimmed(data: Dict[str, Any]) -> Dict[str, Any]:
    cleaned = dict(data)
    for key in TEXT_FIELDS:
        if isinstance(cleaned.get(key), str):
            cleaned[key] = cleaned[key].strip()
    return cleaned


class EventService:
    """Timeline entries stored inside the owning animal's document."""

    def __init__(self, animal_service: AnimalService):
        self.animal_service = animal_service
        logging.info("EventService initialized.")

    def _get_animal(self, animal_id: str, user_id: str) -> Animal:
        animal = self.animal_service.get_animal_by_id_and_owner(animal_id, user_id)
        if not animal:
            raise FileNotFoundError("Animal not found")
        return animal

    def add_event(self, animal_id: str, user_id: str, event_data: Dict[str, Any]) -> Animal:
        animal = self._get_animal(animal_id, user_id)
        data = _trimmed(event_data)
        now = DateTimeUtils.now()

        event = EventEntry(
            event_id=str(uuid.uuid4()),
            date=data['date'],
            type=EventType(data['type']),
            title=data['title'],
            created_at=now,
            updated_at=now,
            description=data.get('description'),
            notes=data.get('notes'),
            veterinarian=data.get('veterinarian'),
            cost=data.get('cost'),
            attachments=data.get('attachments') or [],
        )
        animal.events = sort_events(animal.events + [event])

        self.animal_service.save_animal(animal)
        logging.info(f"Event {event.event_id} ({event.type.value}) added to animal {animal_id}")
        return animal

    def update_event(self, animal_id: str, user_id: str, event_id: str, event_data: Dict[str, Any]) -> Animal:
        """Merge the given fields into an existing event. event_id and created_at never change."""
        animal = self.animal_service.get_animal_by_id_and_owner(animal_id, user_id)
        event = self._find_event(animal, event_id)
        if not animal or not event:
            raise FileNotFoundError("Animal or event not found")

        data = _trimmed(event_data)
        for key, value in data.items():
            if key == 'type':
                value = EventType(value)
            setattr(event, key, value)
        event.updated_at = DateTimeUtils.now()
        animal.events = sort_events(animal.events)

        self.animal_service.save_animal(animal)
        logging.info(f"Event {event_id} updated on animal {animal_id}")
        return animal

    def delete_event(self, animal_id: str, user_id: str, event_id: str) -> None:
        animal = self.animal_service.get_animal_by_id_and_owner(animal_id, user_id)
        if not animal or not self._find_event(animal, event_id):
            raise FileNotFoundError("Animal or event not found")

        animal.events = [e for e in animal.events if e.event_id != event_id]
        self.animal_service.save_animal(animal)
        logging.info(f"Event {event_id} deleted from animal {animal_id}")

    def list_events(self, animal_id: str, user_id: str, event_type: Optional[str] = None) -> Dict[str, Any]:
        """Events of an animal, newest first, optionally restricted to one type."""
        animal = self._get_animal(animal_id, user_id)
        events = sort_events(animal.events)
        if event_type and event_type != 'all':
            events = [e for e in events if e.type.value == event_type]

        return {
            "events": [e.to_dict() for e in events],
            "meta": {
                "total": len(animal.events),
                "count": len(events),
                "type": event_type or 'all',
                "total_cost": sum(e.cost or 0 for e in events),
            }
        }

    @staticmethod
    def _find_event(animal: Optional[Animal], event_id: str) -> Optional[EventEntry]:
        if not animal:
            return None
        return next((e for e in animal.events if e.event_id == event_id), None)
