# pet_ledger/api/animals/services.py
import logging
import math
import uuid
from collections import Counter
from typing import Dict, Any, List, Optional

from pet_ledger.models.animal import Animal, AnimalSpecies, OwnerInfo, WeightRecord, HeightRecord
from pet_ledger.api.settings.services import SettingsService
from pet_ledger.utils.datetime_utils import DateTimeUtils
from pet_ledger.utils import display_utils
from pet_ledger.utils.contact_utils import format_phone_number

# profile fields replaced wholesale by PUT /api/animals/<animal_id>
PROFILE_FIELDS = (
    'name', 'breed', 'sex', 'color', 'markings', 'medical_notes', 'special_needs',
    'microchip_id', 'registration_number', 'parent_ids',
)


class AnimalService:
    """Animal profiles and their measurement history, scoped by owning user."""

    def __init__(self, db, settings_service: SettingsService):
        self.db = db
        self.animals_ref = self.db.collection('animals')
        self.settings_service = settings_service
        logging.info("AnimalService initialized.")

    # =====================================================================================
    # Reads
    # =====================================================================================

    def get_animal_by_id_and_owner(self, animal_id: str, user_id: str) -> Optional[Animal]:
        doc = self.animals_ref.document(animal_id).get()
        if doc.exists:
            data = doc.to_dict()
            if data.get('user_id') == user_id:
                return Animal.from_dict(data)
        return None

    def get_animal(self, animal_id: str, user_id: str) -> Animal:
        """[Owner only] Animals owned by someone else are reported as missing."""
        animal = self.get_animal_by_id_and_owner(animal_id, user_id)
        if not animal:
            raise FileNotFoundError("Animal not found")
        return animal

    def get_animals(self, user_id: str) -> List[Animal]:
        """All animals of a user, most recently created first."""
        docs = self.animals_ref.where('user_id', '==', user_id).stream()
        animals = [Animal.from_dict(doc.to_dict()) for doc in docs]
        animals.sort(key=lambda a: a.created_at, reverse=True)
        return animals

    def list_animals(self, user_id: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Search and filter a user's animals.

        params: search (name/breed/species substring), species, status
        ('alive' | 'deceased' | 'all'). Without status, deceased animals are
        hidden unless the user's display settings say otherwise.
        """
        all_animals = self.get_animals(user_id)

        status = params.get('status')
        if not status:
            settings = self.settings_service.get_settings(user_id)
            status = 'all' if settings.display.show_deceased else 'alive'

        filtered = self.filter_animals(all_animals, params.get('search'), params.get('species'), status)

        return {
            "animals": [a.to_dict() for a in filtered],
            "meta": {
                "total": len(all_animals),
                "count": len(filtered),
                "status": status,
                "available_species": sorted({a.species.value for a in all_animals}),
            }
        }

    @staticmethod
    def filter_animals(animals: List[Animal], search: Optional[str] = None,
                       species: Optional[str] = None, status: str = 'all') -> List[Animal]:
        if status == 'alive':
            animals = [a for a in animals if not a.is_deceased]
        elif status == 'deceased':
            animals = [a for a in animals if a.is_deceased]

        if search:
            term = search.lower()
            animals = [
                a for a in animals
                if term in a.name.lower()
                or term in (a.breed or '').lower()
                or term in a.species.value
            ]

        if species:
            animals = [a for a in animals if a.species.value == species]

        return animals

    # =====================================================================================
    # Writes (whole-document replace)
    # =====================================================================================

    def save_animal(self, animal: Animal) -> Animal:
        """Stamp updated_at and replace the stored document."""
        animal.updated_at = DateTimeUtils.now()
        self.animals_ref.document(animal.animal_id).set(DateTimeUtils.for_firestore(animal.to_dict()))
        return animal

    def add_animal(self, user_id: str, form: Dict[str, Any]) -> Animal:
        now = DateTimeUtils.now()
        now_iso = DateTimeUtils.to_iso_string(now)

        animal = Animal(
            animal_id=str(uuid.uuid4()),
            user_id=user_id,
            name=form['name'],
            species=AnimalSpecies(form.get('species', AnimalSpecies.OTHER.value)),
            sex=form.get('sex', ''),
            owner_info=OwnerInfo(**form.get('owner_info', {})),
            created_at=now,
            updated_at=now,
            date_of_birth=_date_str(form.get('date_of_birth')),
            death_date=_date_str(form.get('death_date')),
            profile_picture=form.get('profile_picture'),
            **{key: form.get(key) for key in PROFILE_FIELDS if key not in ('name', 'sex', 'parent_ids')},
            parent_ids=form.get('parent_ids', []),
        )
        if form.get('initial_weight'):
            animal.weight.append(WeightRecord(
                date=now_iso, weight=form['initial_weight'],
                unit=form['weight_unit'], notes='Initial weight record'
            ))
        if form.get('initial_height'):
            animal.height.append(HeightRecord(
                date=now_iso, height=form['initial_height'], unit=form['height_unit'],
                measurement_type=form['height_measurement_type'], notes='Initial height record'
            ))

        self.animals_ref.document(animal.animal_id).set(DateTimeUtils.for_firestore(animal.to_dict()))
        logging.info(f"Animal {animal.animal_id} created for user {user_id}")
        return animal

    def update_animal(self, animal_id: str, user_id: str, form: Dict[str, Any]) -> Animal:
        """
        Replace the profile fields of an animal.
        The existing species and profile picture are kept when none is sent; a supplied
        weight/height is appended to the history rather than overwriting it.
        """
        animal = self.get_animal(animal_id, user_id)
        now_iso = DateTimeUtils.to_iso_string(DateTimeUtils.now())

        for key in PROFILE_FIELDS:
            setattr(animal, key, form.get(key))
        animal.sex = form.get('sex', '')
        animal.parent_ids = form.get('parent_ids', [])
        if form.get('species'):
            animal.species = AnimalSpecies(form['species'])
        animal.date_of_birth = _date_str(form.get('date_of_birth'))
        animal.death_date = _date_str(form.get('death_date'))
        animal.owner_info = OwnerInfo(**form.get('owner_info', {}))
        if form.get('profile_picture'):
            animal.profile_picture = form['profile_picture']

        if form.get('initial_weight'):
            animal.weight.append(WeightRecord(
                date=now_iso, weight=form['initial_weight'],
                unit=form['weight_unit'], notes='Updated weight record'
            ))
        if form.get('initial_height'):
            animal.height.append(HeightRecord(
                date=now_iso, height=form['initial_height'], unit=form['height_unit'],
                measurement_type=form['height_measurement_type'], notes='Updated height record'
            ))

        self.save_animal(animal)
        logging.info(f"Animal {animal_id} updated")
        return animal

    def delete_animal(self, animal_id: str, user_id: str) -> None:
        self.get_animal(animal_id, user_id)
        self.animals_ref.document(animal_id).delete()
        logging.info(f"Animal {animal_id} deleted by user {user_id}")

    def add_weight_record(self, animal_id: str, user_id: str, data: Dict[str, Any]) -> Animal:
        animal = self.get_animal(animal_id, user_id)
        animal.weight.append(WeightRecord(
            date=data.get('date') or DateTimeUtils.to_iso_string(DateTimeUtils.now()),
            weight=data['weight'], unit=data['unit'], notes=data.get('notes')
        ))
        return self.save_animal(animal)

    def add_height_record(self, animal_id: str, user_id: str, data: Dict[str, Any]) -> Animal:
        animal = self.get_animal(animal_id, user_id)
        animal.height.append(HeightRecord(
            date=data.get('date') or DateTimeUtils.to_iso_string(DateTimeUtils.now()),
            height=data['height'], unit=data['unit'],
            measurement_type=data['measurement_type'], notes=data.get('notes')
        ))
        return self.save_animal(animal)

    # =====================================================================================
    # Derived views
    # =====================================================================================

    def get_summary(self, animal_id: str, user_id: str) -> Dict[str, Any]:
        """Display-ready derived values for one animal, formatted with the user's settings."""
        animal = self.get_animal(animal_id, user_id)
        settings = self.settings_service.get_settings(user_id)
        currency = settings.to_dict()['currency']
        date_format = settings.display.date_format

        total_cost = sum(e.cost or 0 for e in animal.events)
        birthday = None if animal.is_deceased else display_utils.next_birthday(animal.date_of_birth)

        latest_weight = None
        if animal.weight:
            w = animal.weight[-1]
            latest_weight = {
                "weight": w.weight, "unit": w.unit, "date": w.date,
                "converted": {u: round(display_utils.convert_weight(w.weight, w.unit, u), 2) for u in ('kg', 'lbs')},
            }

        latest_height = None
        if animal.height:
            h = animal.height[-1]
            latest_height = {
                "height": h.height, "unit": h.unit, "measurement_type": h.measurement_type, "date": h.date,
                "converted": {u: round(display_utils.convert_height(h.height, h.unit, u), 2) for u in ('inches', 'cm', 'hands')},
            }

        return {
            "animal_id": animal.animal_id,
            "name": animal.name,
            "species": animal.species.value,
            "species_label": display_utils.species_display_name(animal.species),
            "species_color": display_utils.species_color(animal.species),
            "is_deceased": animal.is_deceased,
            "age": display_utils.calculate_age(animal.date_of_birth, animal.death_date),
            "detailed_age": display_utils.calculate_detailed_age(animal.date_of_birth, animal.death_date),
            "date_of_birth_display": _display_date(animal.date_of_birth, date_format),
            "death_date_display": _display_date(animal.death_date, date_format),
            "next_birthday": birthday.isoformat() if birthday else None,
            "latest_weight": latest_weight,
            "latest_height": latest_height,
            "default_units": {
                "weight": display_utils.default_weight_unit(animal.species),
                "height": display_utils.default_height_unit(animal.species),
            },
            "last_event_date_display": display_utils.format_date(animal.events[0].date) if animal.events else None,
            "event_count": len(animal.events),
            "total_event_cost": total_cost,
            "total_event_cost_display": display_utils.format_currency(total_cost, currency),
            "owner_phone_display": format_phone_number(animal.owner_info.phone) if animal.owner_info.phone else None,
            "created_at_display": display_utils.format_datetime(animal.created_at),
        }

    def get_stats(self, user_id: str) -> Dict[str, Any]:
        """Dashboard statistics over every animal of the user."""
        animals = self.get_animals(user_id)
        settings = self.settings_service.get_settings(user_id)
        alive = [a for a in animals if not a.is_deceased]
        today = DateTimeUtils.today()

        average_age = 0
        if alive:
            mean = sum(display_utils.calculate_age(a.date_of_birth) for a in alive) / len(alive)
            average_age = int(math.floor(mean + 0.5))

        total_expenses = sum(e.cost or 0 for a in animals for e in a.events)

        upcoming = []
        for a in alive:
            birthday = display_utils.next_birthday(a.date_of_birth, today)
            if birthday:
                upcoming.append({
                    "animal_id": a.animal_id,
                    "name": a.name,
                    "next_birthday": birthday.isoformat(),
                    "days_until": (birthday - today).days,
                })
        upcoming.sort(key=lambda b: b['next_birthday'])

        species_counts = Counter(a.species.value for a in animals)
        top_species = sorted(species_counts.items(), key=lambda item: item[1], reverse=True)[:3]

        return {
            "total": len(animals),
            "alive": len(alive),
            "deceased": len(animals) - len(alive),
            "average_age": average_age,
            "total_expenses": total_expenses,
            "total_expenses_display": display_utils.format_currency(total_expenses, settings.to_dict()['currency']),
            "recently_added": [
                {"animal_id": a.animal_id, "name": a.name, "species": a.species.value,
                 "created_at": DateTimeUtils.to_iso_string(a.created_at)}
                for a in animals[:3]
            ],
            "upcoming_birthdays": upcoming[:3],
            "species_counts": dict(species_counts),
            "top_species": [{"species": s, "count": c} for s, c in top_species],
        }


def _date_str(value) -> Optional[str]:
    return DateTimeUtils.to_date_string(value) if value else None


def _display_date(value: Optional[str], date_format: str) -> Optional[str]:
    if not value:
        return None
    return display_utils.format_date_for_settings(value, date_format)
