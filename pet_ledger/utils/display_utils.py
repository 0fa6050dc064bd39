# pet_ledger/utils/display_utils.py
"""
Derived values shown to the user: ages, formatted dates and amounts,
species and event labels, unit conversion.

Everything here is a pure function with no I/O.
"""

import math
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union, Dict, Any

from pet_ledger.models.animal import AnimalSpecies, EventType
from pet_ledger.utils.datetime_utils import DateTimeUtils

DateLike = Union[date, datetime, str, None]

SPECIES_DISPLAY_NAMES = {
    AnimalSpecies.HORSE: 'Horse',
    AnimalSpecies.DOG: 'Dog',
    AnimalSpecies.CAT: 'Cat',
    AnimalSpecies.PIG: 'Pig',
    AnimalSpecies.GOAT: 'Goat',
    AnimalSpecies.LLAMA: 'Llama',
    AnimalSpecies.ALPACA: 'Alpaca',
    AnimalSpecies.FERRET: 'Ferret',
    AnimalSpecies.PARROT: 'Parrot',
    AnimalSpecies.BIRD_OF_PREY: 'Bird of Prey',
    AnimalSpecies.RABBIT: 'Rabbit',
    AnimalSpecies.SHEEP: 'Sheep',
    AnimalSpecies.COW: 'Cow',
    AnimalSpecies.CHICKEN: 'Chicken',
    AnimalSpecies.DUCK: 'Duck',
    AnimalSpecies.OTHER: 'Other',
}

SPECIES_COLORS = {
    AnimalSpecies.HORSE: 'bg-amber-100 text-amber-800',
    AnimalSpecies.DOG: 'bg-blue-100 text-blue-800',
    AnimalSpecies.CAT: 'bg-purple-100 text-purple-800',
    AnimalSpecies.PIG: 'bg-pink-100 text-pink-800',
    AnimalSpecies.GOAT: 'bg-green-100 text-green-800',
    AnimalSpecies.LLAMA: 'bg-yellow-100 text-yellow-800',
    AnimalSpecies.ALPACA: 'bg-indigo-100 text-indigo-800',
    AnimalSpecies.FERRET: 'bg-gray-100 text-gray-800',
    AnimalSpecies.PARROT: 'bg-red-100 text-red-800',
    AnimalSpecies.BIRD_OF_PREY: 'bg-orange-100 text-orange-800',
    AnimalSpecies.RABBIT: 'bg-emerald-100 text-emerald-800',
    AnimalSpecies.SHEEP: 'bg-slate-100 text-slate-800',
    AnimalSpecies.COW: 'bg-stone-100 text-stone-800',
    AnimalSpecies.CHICKEN: 'bg-lime-100 text-lime-800',
    AnimalSpecies.DUCK: 'bg-cyan-100 text-cyan-800',
    AnimalSpecies.OTHER: 'bg-neutral-100 text-neutral-800',
}

EVENT_TYPE_COLORS = {
    EventType.MEDICAL: 'bg-red-100 text-red-800 border-red-200',
    EventType.SURGICAL: 'bg-orange-100 text-orange-800 border-orange-200',
    EventType.BEHAVIORAL: 'bg-purple-100 text-purple-800 border-purple-200',
    EventType.LIFECYCLE: 'bg-pink-100 text-pink-800 border-pink-200',
    EventType.GROOMING: 'bg-blue-100 text-blue-800 border-blue-200',
    EventType.NUTRITION: 'bg-green-100 text-green-800 border-green-200',
    EventType.EXERCISE: 'bg-yellow-100 text-yellow-800 border-yellow-200',
    EventType.GENERAL: 'bg-gray-100 text-gray-800 border-gray-200',
}


def _parse(value: DateLike) -> Optional[date]:
    """Lenient date parsing: None for missing or unparseable input."""
    if value is None or value == '':
        return None
    try:
        return DateTimeUtils.to_date(value)
    except ValueError:
        return None


# =====================================================================================
# Age
# =====================================================================================

def calculate_age(date_of_birth: DateLike, death_date: DateLike = None, today: Optional[date] = None) -> int:
    """Age in whole years, measured up to the death date when there is one."""
    birth = _parse(date_of_birth)
    if birth is None:
        return 0

    end = _parse(death_date) if death_date else (today or DateTimeUtils.today())
    if end is None:
        return 0

    return DateTimeUtils.difference(birth, end).years


def calculate_detailed_age(date_of_birth: DateLike, death_date: DateLike = None,
                           today: Optional[date] = None) -> Dict[str, int]:
    """
    Age split into years, months and days.

    months is the total month count modulo 12; days is the total day count
    modulo 30, which is an approximation.
    """
    zero = {'years': 0, 'months': 0, 'days': 0}
    birth = _parse(date_of_birth)
    if birth is None:
        return zero

    end = _parse(death_date) if death_date else (today or DateTimeUtils.today())
    if end is None or end < birth:
        return zero

    delta = DateTimeUtils.difference(birth, end)
    total_months = delta.years * 12 + delta.months
    return {
        'years': delta.years,
        'months': total_months % 12,
        'days': (end - birth).days % 30,
    }


def next_birthday(date_of_birth: DateLike, today: Optional[date] = None) -> Optional[date]:
    """The next anniversary of the birth date, today included."""
    birth = _parse(date_of_birth)
    if birth is None:
        return None
    today = today or DateTimeUtils.today()

    def _anniversary(year: int) -> date:
        try:
            return birth.replace(year=year)
        except ValueError:
            # Feb 29 in a non-leap year
            return date(year, 3, 1)

    birthday = _anniversary(today.year)
    if birthday < today:
        birthday = _anniversary(today.year + 1)
    return birthday


# =====================================================================================
# Dates and currency
# =====================================================================================

def format_date(value: DateLike) -> str:
    if not value:
        return 'Unknown'
    parsed = _parse(value)
    if parsed is None:
        return 'Invalid Date'
    return parsed.strftime('%b %d, %Y')


def format_datetime(value: Union[datetime, str, None]) -> str:
    if not value:
        return 'Unknown'
    try:
        dt = DateTimeUtils.to_datetime(value)
    except ValueError:
        return 'Invalid Date'
    return dt.strftime('%b %d, %Y %H:%M')


def format_date_for_settings(value: DateLike, date_format: str = 'MM/DD/YYYY') -> str:
    """Format a date with the user's chosen date format."""
    parsed = _parse(value)
    if parsed is None:
        return 'Invalid Date'

    day = f"{parsed.day:02d}"
    month = f"{parsed.month:02d}"
    year = parsed.year

    if date_format == 'DD/MM/YYYY':
        return f"{day}/{month}/{year}"
    if date_format == 'YYYY-MM-DD':
        return f"{year}-{month}-{day}"
    return f"{month}/{day}/{year}"


def format_currency(amount: Any, currency: Dict[str, Any]) -> str:
    """
    Format an amount with the user's currency settings.

    currency is a mapping with 'symbol', 'position' ('before' | 'after')
    and 'decimals'.
    """
    symbol = currency.get('symbol', '$')
    decimals = int(currency.get('decimals', 2))
    position = currency.get('position', 'before')

    if isinstance(amount, bool) or not isinstance(amount, (int, float, Decimal)) or \
            (isinstance(amount, float) and math.isnan(amount)):
        return f"{symbol}0{'.00' if decimals > 0 else ''}"

    quantum = Decimal(1).scaleb(-decimals)
    absolute = abs(Decimal(str(amount))).quantize(quantum, rounding=ROUND_HALF_UP)
    formatted = f"{absolute:.{decimals}f}"
    prefix = '-' if amount < 0 else ''

    if position == 'before':
        return f"{prefix}{symbol}{formatted}"
    return f"{prefix}{formatted}{symbol}"


# =====================================================================================
# Labels
# =====================================================================================

def species_display_name(species: Union[AnimalSpecies, str]) -> str:
    return SPECIES_DISPLAY_NAMES[AnimalSpecies(species)]


def species_color(species: Union[AnimalSpecies, str]) -> str:
    return SPECIES_COLORS[AnimalSpecies(species)]


def event_type_label(event_type: Union[EventType, str]) -> str:
    return EventType(event_type).value.capitalize()


def event_type_color(event_type: Union[EventType, str]) -> str:
    return EVENT_TYPE_COLORS[EventType(event_type)]


# =====================================================================================
# Units
# =====================================================================================

def convert_weight(weight: float, from_unit: str, to_unit: str) -> float:
    if from_unit == to_unit:
        return weight
    if from_unit == 'lbs' and to_unit == 'kg':
        return weight * 0.453592
    if from_unit == 'kg' and to_unit == 'lbs':
        return weight * 2.20462
    return weight


def convert_height(height: float, from_unit: str, to_unit: str) -> float:
    if from_unit == to_unit:
        return height

    # normalize to inches first
    inches = height
    if from_unit == 'cm':
        inches = height / 2.54
    elif from_unit == 'hands':
        inches = height * 4

    if to_unit == 'cm':
        return inches * 2.54
    if to_unit == 'hands':
        return inches / 4
    return inches


def default_height_unit(species: Union[AnimalSpecies, str]) -> str:
    if AnimalSpecies(species) == AnimalSpecies.HORSE:
        return 'hands'
    return 'inches'


def default_weight_unit(species: Union[AnimalSpecies, str]) -> str:
    return 'lbs'
