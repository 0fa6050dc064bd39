# pet_ledger/models/settings.py
import uuid
from copy import deepcopy
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Optional, List, Dict, Any

from pet_ledger.utils.datetime_utils import DateTimeUtils


@dataclass
class CurrencySettings:
    code: str = 'USD'
    symbol: str = '$'
    position: str = 'before'  # '$100' or '100$'
    decimals: int = 2


@dataclass
class MeasurementUnits:
    weight: List[str] = field(default_factory=lambda: ['lbs', 'kg', 'oz', 'g'])
    height: List[str] = field(default_factory=lambda: ['inches', 'cm', 'feet', 'hands'])


@dataclass
class CustomField:
    id: str
    name: str
    type: str  # text, number, select, date, textarea
    required: bool = False
    category: str = 'other'  # basic, medical, physical, other
    enabled: bool = True
    options: List[str] = field(default_factory=list)  # select type only


DEFAULT_SPECIES = [
    'Dog', 'Cat', 'Horse', 'Rabbit', 'Bird', 'Fish', 'Reptile',
    'Rodent', 'Pig', 'Goat', 'Sheep', 'Cow', 'Chicken', 'Duck',
    'Ferret', 'Hedgehog', 'Other'
]

DEFAULT_BREEDS = {
    'Dog': ['Labrador Retriever', 'Golden Retriever', 'German Shepherd', 'Bulldog', 'Poodle',
            'Beagle', 'Rottweiler', 'Yorkshire Terrier', 'Boxer', 'Dachshund'],
    'Cat': ['Domestic Shorthair', 'Domestic Longhair', 'Persian', 'Maine Coon', 'Siamese',
            'Ragdoll', 'British Shorthair', 'Abyssinian', 'Russian Blue', 'Bengal'],
    'Horse': ['Arabian', 'Thoroughbred', 'Quarter Horse', 'Paint Horse', 'Appaloosa',
              'Mustang', 'Friesian', 'Clydesdale', 'Shire', 'Andalusian'],
    'Bird': ['Parakeet', 'Cockatiel', 'Canary', 'Finch', 'Lovebird',
             'Conure', 'Macaw', 'Cockatoo', 'African Grey', 'Budgie'],
}

DEFAULT_COLORS = [
    'Black', 'White', 'Brown', 'Gray', 'Tan', 'Golden', 'Red', 'Blue',
    'Silver', 'Cream', 'Chocolate', 'Brindle', 'Tricolor', 'Spotted',
    'Striped', 'Piebald', 'Roan', 'Dappled', 'Merle', 'Sable'
]

AVAILABLE_CURRENCIES = [
    {'code': 'USD', 'symbol': '$', 'name': 'US Dollar'},
    {'code': 'EUR', 'symbol': '€', 'name': 'Euro'},
    {'code': 'GBP', 'symbol': '£', 'name': 'British Pound'},
    {'code': 'CAD', 'symbol': 'C$', 'name': 'Canadian Dollar'},
    {'code': 'AUD', 'symbol': 'A$', 'name': 'Australian Dollar'},
    {'code': 'JPY', 'symbol': '¥', 'name': 'Japanese Yen'},
    {'code': 'CHF', 'symbol': 'Fr', 'name': 'Swiss Franc'},
    {'code': 'CNY', 'symbol': '¥', 'name': 'Chinese Yuan'},
    {'code': 'INR', 'symbol': '₹', 'name': 'Indian Rupee'},
    {'code': 'BRL', 'symbol': 'R$', 'name': 'Brazilian Real'},
]


@dataclass
class FieldOptions:
    species: List[str] = field(default_factory=lambda: list(DEFAULT_SPECIES))
    breeds: Dict[str, List[str]] = field(default_factory=lambda: deepcopy(DEFAULT_BREEDS))
    colors: List[str] = field(default_factory=lambda: list(DEFAULT_COLORS))
    measurement_units: MeasurementUnits = field(default_factory=MeasurementUnits)
    custom_fields: List[CustomField] = field(default_factory=list)


@dataclass
class DisplaySettings:
    date_format: str = 'MM/DD/YYYY'
    language: str = 'en'
    show_deceased: bool = False
    default_view: str = 'grid'
    items_per_page: int = 12


@dataclass
class NotificationSettings:
    """Stored preferences only. Nothing in the application dispatches notifications."""
    email_reminders: bool = False
    upcoming_appointments: bool = False
    vaccination_reminders: bool = False
    birthday_reminders: bool = False
    email_address: Optional[str] = None


@dataclass
class AppSettings:
    """
    Document structure of the 'settings' collection.
    One document per user, keyed by settings_doc_id(user_id).
    """
    settings_id: str
    created_at: datetime
    updated_at: datetime
    currency: CurrencySettings = field(default_factory=CurrencySettings)
    field_options: FieldOptions = field(default_factory=FieldOptions)
    display: DisplaySettings = field(default_factory=DisplaySettings)
    notifications: NotificationSettings = field(default_factory=NotificationSettings)

    @classmethod
    def default(cls) -> "AppSettings":
        now = DateTimeUtils.now()
        return cls(settings_id=str(uuid.uuid4()), created_at=now, updated_at=now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppSettings":
        field_options = dict(data.get('field_options') or {})
        if 'measurement_units' in field_options:
            field_options['measurement_units'] = MeasurementUnits(**field_options['measurement_units'])
        if 'custom_fields' in field_options:
            field_options['custom_fields'] = [CustomField(**f) for f in field_options['custom_fields'] or []]

        return cls(
            settings_id=data.get('settings_id') or 'default',
            created_at=DateTimeUtils.to_datetime(data['created_at']) if data.get('created_at') else DateTimeUtils.now(),
            updated_at=DateTimeUtils.to_datetime(data['updated_at']) if data.get('updated_at') else DateTimeUtils.now(),
            currency=CurrencySettings(**(data.get('currency') or {})),
            field_options=FieldOptions(**field_options),
            display=DisplaySettings(**(data.get('display') or {})),
            notifications=NotificationSettings(**(data.get('notifications') or {})),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def settings_doc_id(user_id: str) -> str:
    return f"user-settings-{user_id}"
