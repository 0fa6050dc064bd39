# pet_ledger/api/exports/services.py
import csv
import io
import json
import logging
from typing import Any, Dict, Tuple

from pet_ledger.api.animals.services import AnimalService
from pet_ledger.api.settings.services import SettingsService
from pet_ledger.utils.datetime_utils import DateTimeUtils
from pet_ledger.utils import display_utils

EXPORT_FORMATS = ('json', 'csv')

# (animal attribute, column header)
CSV_COLUMNS = [
    ('name', 'Name'),
    ('species', 'Species'),
    ('breed', 'Breed'),
    ('sex', 'Sex'),
    ('color', 'Color'),
    ('date_of_birth', 'Date of Birth'),
    ('death_date', 'Death Date'),
    ('age', 'Age'),
    ('latest_weight', 'Latest Weight'),
    ('latest_height', 'Latest Height'),
    ('event_count', 'Events'),
    ('total_cost', 'Total Cost'),
    ('microchip_id', 'Microchip ID'),
    ('owner_name', 'Owner'),
]


class ExportService:
    """Builds downloadable copies of a user's animals and settings."""

    def __init__(self, animal_service: AnimalService, settings_service: SettingsService):
        self.animal_service = animal_service
        self.settings_service = settings_service

    def export(self, user_id: str, export_format: str) -> Tuple[bytes, str, str]:
        """
        Returns (content, mimetype, filename).

        Raises:
            ValueError: unsupported export format
        """
        if export_format not in EXPORT_FORMATS:
            raise ValueError(f"Unsupported export format: {export_format}")

        filename_base = f"pet_ledger_export_{DateTimeUtils.now().strftime('%Y%m%d_%H%M')}"
        if export_format == 'csv':
            content = self._to_csv(user_id).encode('utf-8-sig')  # BOM for Excel
            mimetype = 'text/csv'
        else:
            document = DateTimeUtils.for_firestore(self._to_document(user_id))
            content = json.dumps(document, ensure_ascii=False, indent=2, default=DateTimeUtils.to_iso_string).encode('utf-8')
            mimetype = 'application/json'

        logging.info(f"Data exported: format={export_format}, user={user_id}")
        return content, mimetype, f"{filename_base}.{export_format}"

    def _to_document(self, user_id: str) -> Dict[str, Any]:
        """Complete data with all fields."""
        animals = self.animal_service.get_animals(user_id)
        settings = self.settings_service.get_settings(user_id)
        return {
            "exported_at": DateTimeUtils.to_iso_string(DateTimeUtils.now()),
            "animals": [a.to_dict() for a in animals],
            "settings": settings.to_dict(),
        }

    def _to_csv(self, user_id: str) -> str:
        """One row of basic information per animal."""
        animals = self.animal_service.get_animals(user_id)
        currency = self.settings_service.get_settings(user_id).to_dict()['currency']

        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow([header for _, header in CSV_COLUMNS])
        for animal in animals:
            latest_weight = animal.weight[-1] if animal.weight else None
            latest_height = animal.height[-1] if animal.height else None
            row = {
                'name': animal.name,
                'species': display_utils.species_display_name(animal.species),
                'breed': animal.breed,
                'sex': animal.sex,
                'color': animal.color,
                'date_of_birth': animal.date_of_birth,
                'death_date': animal.death_date,
                'age': display_utils.calculate_age(animal.date_of_birth, animal.death_date),
                'latest_weight': f"{latest_weight.weight} {latest_weight.unit}" if latest_weight else None,
                'latest_height': f"{latest_height.height} {latest_height.unit}" if latest_height else None,
                'event_count': len(animal.events),
                'total_cost': display_utils.format_currency(sum(e.cost or 0 for e in animal.events), currency),
                'microchip_id': animal.microchip_id,
                'owner_name': animal.owner_info.name,
            }
            writer.writerow(["" if row[key] is None else str(row[key]) for key, _ in CSV_COLUMNS])
        return output.getvalue()
