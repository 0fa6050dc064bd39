# pet_ledger/models/animal.py
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Optional, List, Dict, Any
from enum import Enum
import logging

from pet_ledger.utils.datetime_utils import DateTimeUtils


class AnimalSpecies(Enum):
    HORSE = "horse"
    DOG = "dog"
    CAT = "cat"
    PIG = "pig"
    GOAT = "goat"
    LLAMA = "llama"
    ALPACA = "alpaca"
    FERRET = "ferret"
    PARROT = "parrot"
    BIRD_OF_PREY = "bird-of-prey"
    RABBIT = "rabbit"
    SHEEP = "sheep"
    COW = "cow"
    CHICKEN = "chicken"
    DUCK = "duck"
    OTHER = "other"


class EventType(Enum):
    MEDICAL = "medical"          # vaccinations, treatments, checkups, illnesses
    SURGICAL = "surgical"        # neutering, spaying, surgeries
    BEHAVIORAL = "behavioral"    # training, behavioral changes, milestones
    LIFECYCLE = "lifecycle"      # birth, adoption, death, breeding, pregnancy
    GROOMING = "grooming"        # grooming sessions, nail trims, dental care
    NUTRITION = "nutrition"      # diet changes, feeding schedules
    EXERCISE = "exercise"        # exercise routines, activities
    GENERAL = "general"          # notes, observations, everything else


WEIGHT_UNITS = ['lbs', 'kg']
HEIGHT_UNITS = ['inches', 'cm', 'hands']  # hands for horses
MEASUREMENT_TYPES = ['shoulder', 'withers', 'total']


@dataclass
class WeightRecord:
    date: str
    weight: float
    unit: str
    notes: Optional[str] = None


@dataclass
class HeightRecord:
    date: str
    height: float
    unit: str
    measurement_type: str
    notes: Optional[str] = None


@dataclass
class OwnerInfo:
    name: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


@dataclass
class EventEntry:
    """A single categorized log item attached to an animal."""
    event_id: str
    date: str
    type: EventType
    title: str
    created_at: datetime
    updated_at: datetime
    description: Optional[str] = None
    notes: Optional[str] = None
    veterinarian: Optional[str] = None
    cost: Optional[float] = None
    attachments: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EventEntry":
        processed = data.copy()
        type_str = processed.get('type')
        if isinstance(type_str, str):
            try:
                processed['type'] = EventType(type_str)
            except ValueError:
                logging.warning(f"Invalid EventType value '{type_str}' for event {processed.get('event_id')}. Defaulting to GENERAL.")
                processed['type'] = EventType.GENERAL
        for key in ('created_at', 'updated_at'):
            processed[key] = _coerce_timestamp(processed.get(key))
        if processed.get('attachments') is None:
            processed['attachments'] = []
        return cls(**processed)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['type'] = self.type.value
        return data


@dataclass
class Animal:
    """
    Document structure of the 'animals' collection.
    Holds the profile of a pet and its nested measurement and event records,
    and knows how to convert itself to and from a stored document.
    """
    animal_id: str
    user_id: str
    name: str
    species: AnimalSpecies
    sex: str
    owner_info: OwnerInfo
    created_at: datetime
    updated_at: datetime
    date_of_birth: Optional[str] = None
    death_date: Optional[str] = None
    breed: Optional[str] = None
    color: Optional[str] = None
    markings: Optional[str] = None
    profile_picture: Optional[str] = None
    weight: List[WeightRecord] = field(default_factory=list)
    height: List[HeightRecord] = field(default_factory=list)
    events: List[EventEntry] = field(default_factory=list)
    medical_notes: Optional[str] = None
    special_needs: Optional[str] = None
    microchip_id: Optional[str] = None
    registration_number: Optional[str] = None
    parent_ids: List[str] = field(default_factory=list)

    @property
    def is_deceased(self) -> bool:
        return bool(self.death_date)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Animal":
        """
        Build an Animal from a stored document.
        Converts enum strings, nested records and stored timestamps, and
        fills list fields that older documents may lack.
        """
        processed = data.copy()

        species_str = processed.get('species')
        if isinstance(species_str, str):
            try:
                processed['species'] = AnimalSpecies(species_str)
            except ValueError:
                logging.warning(f"Invalid AnimalSpecies value '{species_str}' for animal {processed.get('animal_id')}. Defaulting to OTHER.")
                processed['species'] = AnimalSpecies.OTHER

        processed['owner_info'] = OwnerInfo(**(processed.get('owner_info') or {}))
        processed['weight'] = [WeightRecord(**w) for w in processed.get('weight') or []]
        processed['height'] = [HeightRecord(**h) for h in processed.get('height') or []]
        # documents written before the timeline existed have no events array
        processed['events'] = [EventEntry.from_dict(e) for e in processed.get('events') or []]
        if processed.get('parent_ids') is None:
            processed['parent_ids'] = []
        processed.setdefault('sex', '')

        for key in ('created_at', 'updated_at'):
            processed[key] = _coerce_timestamp(processed.get(key))

        return cls(**processed)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['species'] = self.species.value
        data['events'] = [e.to_dict() for e in self.events]
        return data


def _coerce_timestamp(value: Any) -> datetime:
    if value is None:
        return DateTimeUtils.now()
    try:
        return DateTimeUtils.to_datetime(value)
    except ValueError:
        logging.warning(f"Invalid timestamp '{value}'. Falling back to current time.")
        return DateTimeUtils.now()
