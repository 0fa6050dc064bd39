# pet_ledger/api/animals/schemas.py
from marshmallow import (
    Schema, fields, validate, validates_schema, ValidationError, pre_load, EXCLUDE
)

from pet_ledger.models.animal import AnimalSpecies, WEIGHT_UNITS, HEIGHT_UNITS, MEASUREMENT_TYPES
from pet_ledger.api.events.schemas import EventResponseSchema, validate_event_date
from pet_ledger.utils.contact_utils import validate_email, validate_phone_number

SPECIES = [s.value for s in AnimalSpecies]


def _drop_blank_strings(data, keep=()):
    """Form submissions send '' for untouched optional inputs; treat them as absent."""
    if not isinstance(data, dict):
        return data
    cleaned = {}
    for key, value in data.items():
        if isinstance(value, str):
            value = value.strip()
            if value == '' and key not in keep:
                continue
        cleaned[key] = value
    return cleaned


def validate_owner_email(value):
    if value and not validate_email(value):
        raise ValidationError("Invalid email address.")


def validate_phone(value):
    if value and not validate_phone_number(value):
        raise ValidationError("Invalid phone number.")


class OwnerInfoSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.Str(load_default='')
    email = fields.Str(allow_none=True, validate=validate_owner_email)
    phone = fields.Str(allow_none=True, validate=validate_phone)
    address = fields.Str(allow_none=True)

    @pre_load
    def strip_blanks(self, data, **kwargs):
        return _drop_blank_strings(data, keep=('name',))


class AnimalFormSchema(Schema):
    """
    Request body for POST /api/animals and PUT /api/animals/<animal_id>.
    initial_weight / initial_height, when given, become new measurement records.
    """
    class Meta:
        unknown = EXCLUDE

    name = fields.Str(required=True, validate=validate.Length(min=1, max=100),
                      error_messages={"required": "Missing required field: name"})
    # absent: 'other' on create, the stored species on update
    species = fields.Str(validate=validate.OneOf(SPECIES))
    breed = fields.Str(allow_none=True)
    sex = fields.Str(load_default='')
    date_of_birth = fields.Date(allow_none=True)
    death_date = fields.Date(allow_none=True)
    color = fields.Str(allow_none=True)
    markings = fields.Str(allow_none=True)
    profile_picture = fields.Str(allow_none=True)

    initial_weight = fields.Float(allow_none=True, validate=validate.Range(min=0, min_inclusive=False))
    weight_unit = fields.Str(load_default='lbs', validate=validate.OneOf(WEIGHT_UNITS))
    initial_height = fields.Float(allow_none=True, validate=validate.Range(min=0, min_inclusive=False))
    height_unit = fields.Str(load_default='inches', validate=validate.OneOf(HEIGHT_UNITS))
    height_measurement_type = fields.Str(load_default='shoulder', validate=validate.OneOf(MEASUREMENT_TYPES))

    medical_notes = fields.Str(allow_none=True)
    special_needs = fields.Str(allow_none=True)
    microchip_id = fields.Str(allow_none=True)
    registration_number = fields.Str(allow_none=True)
    parent_ids = fields.List(fields.Str(), load_default=list)
    owner_info = fields.Nested(OwnerInfoSchema, load_default=dict)

    @pre_load
    def strip_blanks(self, data, **kwargs):
        return _drop_blank_strings(data, keep=('name',))

    @validates_schema
    def validate_dates(self, data, **kwargs):
        birth = data.get('date_of_birth')
        death = data.get('death_date')
        if birth and death and death <= birth:
            raise ValidationError("Death date must be after the date of birth.", 'death_date')


class WeightRecordCreateSchema(Schema):
    """POST /api/animals/<animal_id>/weights."""
    weight = fields.Float(required=True, validate=validate.Range(min=0, min_inclusive=False))
    unit = fields.Str(load_default='lbs', validate=validate.OneOf(WEIGHT_UNITS))
    date = fields.Str(validate=validate_event_date)
    notes = fields.Str(allow_none=True)


class HeightRecordCreateSchema(Schema):
    """POST /api/animals/<animal_id>/heights."""
    height = fields.Float(required=True, validate=validate.Range(min=0, min_inclusive=False))
    unit = fields.Str(load_default='inches', validate=validate.OneOf(HEIGHT_UNITS))
    measurement_type = fields.Str(load_default='shoulder', validate=validate.OneOf(MEASUREMENT_TYPES))
    date = fields.Str(validate=validate_event_date)
    notes = fields.Str(allow_none=True)


class AnimalsQuerySchema(Schema):
    """GET /api/animals query parameters."""
    class Meta:
        unknown = EXCLUDE

    search = fields.Str()
    species = fields.Str(validate=validate.OneOf(SPECIES))
    status = fields.Str(validate=validate.OneOf(['alive', 'deceased', 'all']))

    @pre_load
    def strip_blanks(self, data, **kwargs):
        # request.args is an ImmutableMultiDict
        return _drop_blank_strings(dict(data))


class WeightRecordSchema(Schema):
    date = fields.Str()
    weight = fields.Float()
    unit = fields.Str()
    notes = fields.Str(allow_none=True)


class HeightRecordSchema(Schema):
    date = fields.Str()
    height = fields.Float()
    unit = fields.Str()
    measurement_type = fields.Str()
    notes = fields.Str(allow_none=True)


class AnimalResponseSchema(Schema):
    """Full animal profile, owner only."""
    animal_id = fields.Str(dump_only=True)
    user_id = fields.Str(dump_only=True)
    name = fields.Str()
    species = fields.Str()
    breed = fields.Str(allow_none=True)
    sex = fields.Str()
    date_of_birth = fields.Str(allow_none=True)
    death_date = fields.Str(allow_none=True)
    color = fields.Str(allow_none=True)
    markings = fields.Str(allow_none=True)
    profile_picture = fields.Str(allow_none=True)
    weight = fields.List(fields.Nested(WeightRecordSchema))
    height = fields.List(fields.Nested(HeightRecordSchema))
    events = fields.List(fields.Nested(EventResponseSchema))
    medical_notes = fields.Str(allow_none=True)
    special_needs = fields.Str(allow_none=True)
    microchip_id = fields.Str(allow_none=True)
    registration_number = fields.Str(allow_none=True)
    parent_ids = fields.List(fields.Str())
    owner_info = fields.Nested(OwnerInfoSchema)
    created_at = fields.DateTime(dump_only=True)
    updated_at = fields.DateTime(dump_only=True)


class AnimalListResponseSchema(Schema):
    animals = fields.List(fields.Nested(AnimalResponseSchema), dump_default=[])
    meta = fields.Dict(dump_default={})
