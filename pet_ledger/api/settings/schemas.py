# pet_ledger/api/settings/schemas.py
from marshmallow import Schema, fields, validate, pre_load, EXCLUDE

from pet_ledger.models.settings import DEFAULT_SPECIES, DEFAULT_BREEDS, DEFAULT_COLORS


class _SectionSchema(Schema):
    class Meta:
        unknown = EXCLUDE


class CurrencySchema(_SectionSchema):
    code = fields.Str(load_default='USD', validate=validate.Length(min=1, max=10))
    symbol = fields.Str(load_default='$', validate=validate.Length(min=1, max=5))
    position = fields.Str(load_default='before', validate=validate.OneOf(['before', 'after']))
    decimals = fields.Int(load_default=2, validate=validate.Range(min=0, max=4))


class MeasurementUnitsSchema(_SectionSchema):
    weight = fields.List(fields.Str(), load_default=lambda: ['lbs', 'kg', 'oz', 'g'])
    height = fields.List(fields.Str(), load_default=lambda: ['inches', 'cm', 'feet', 'hands'])


class CustomFieldSchema(_SectionSchema):
    id = fields.Str(required=True)
    name = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    type = fields.Str(required=True, validate=validate.OneOf(['text', 'number', 'select', 'date', 'textarea']))
    required = fields.Bool(load_default=False)
    category = fields.Str(load_default='other', validate=validate.OneOf(['basic', 'medical', 'physical', 'other']))
    enabled = fields.Bool(load_default=True)
    options = fields.List(fields.Str(), load_default=list)


class FieldOptionsSchema(_SectionSchema):
    species = fields.List(fields.Str(), load_default=lambda: list(DEFAULT_SPECIES))
    breeds = fields.Dict(keys=fields.Str(), values=fields.List(fields.Str()),
                         load_default=lambda: {k: list(v) for k, v in DEFAULT_BREEDS.items()})
    colors = fields.List(fields.Str(), load_default=lambda: list(DEFAULT_COLORS))
    measurement_units = fields.Nested(MeasurementUnitsSchema, load_default=lambda: MeasurementUnitsSchema().load({}))
    custom_fields = fields.List(fields.Nested(CustomFieldSchema), load_default=list)


class DisplaySchema(_SectionSchema):
    date_format = fields.Str(load_default='MM/DD/YYYY', validate=validate.OneOf(['MM/DD/YYYY', 'DD/MM/YYYY', 'YYYY-MM-DD']))
    language = fields.Str(load_default='en')
    show_deceased = fields.Bool(load_default=False)
    default_view = fields.Str(load_default='grid', validate=validate.OneOf(['grid', 'list']))
    items_per_page = fields.Int(load_default=12, validate=validate.Range(min=1, max=100))


class NotificationsSchema(_SectionSchema):
    email_reminders = fields.Bool(load_default=False)
    upcoming_appointments = fields.Bool(load_default=False)
    vaccination_reminders = fields.Bool(load_default=False)
    birthday_reminders = fields.Bool(load_default=False)
    email_address = fields.Email(allow_none=True)

    @pre_load
    def blank_email_as_none(self, data, **kwargs):
        # a cleared email input is submitted as ''
        if isinstance(data, dict) and isinstance(data.get('email_address'), str) and not data['email_address'].strip():
            data = dict(data, email_address=None)
        return data


class SettingsUpdateSchema(_SectionSchema):
    """PUT /api/settings request body. Every section is replaced as a whole."""
    currency = fields.Nested(CurrencySchema, required=True)
    field_options = fields.Nested(FieldOptionsSchema, required=True)
    display = fields.Nested(DisplaySchema, required=True)
    notifications = fields.Nested(NotificationsSchema, required=True)


class SettingsResponseSchema(Schema):
    settings_id = fields.Str(dump_only=True)
    currency = fields.Nested(CurrencySchema)
    field_options = fields.Nested(FieldOptionsSchema)
    display = fields.Nested(DisplaySchema)
    notifications = fields.Nested(NotificationsSchema)
    created_at = fields.DateTime(dump_only=True)
    updated_at = fields.DateTime(dump_only=True)


class CurrencyOptionSchema(Schema):
    code = fields.Str()
    symbol = fields.Str()
    name = fields.Str()
