# pet_ledger/api/events/schemas.py
from marshmallow import Schema, fields, validate, ValidationError, EXCLUDE

from pet_ledger.models.animal import EventType
from pet_ledger.utils.datetime_utils import DateTimeUtils
from pet_ledger.utils.display_utils import event_type_label, event_type_color

EVENT_TYPES = [e.value for e in EventType]


def validate_not_blank(value):
    if not value or not value.strip():
        raise ValidationError("Field may not be blank.")


def validate_event_date(value):
    try:
        DateTimeUtils.parse_iso_datetime(value)
    except ValueError:
        raise ValidationError("Invalid date format")


class EventCreateSchema(Schema):
    """POST /api/animals/<animal_id>/events request body."""
    class Meta:
        unknown = EXCLUDE

    type = fields.Str(required=True, validate=validate.OneOf(EVENT_TYPES, error="Invalid event type"))
    title = fields.Str(required=True, validate=[validate_not_blank, validate.Length(max=200)])
    date = fields.Str(required=True, validate=validate_event_date)
    description = fields.Str(allow_none=True)
    notes = fields.Str(allow_none=True)
    veterinarian = fields.Str(allow_none=True)
    cost = fields.Float(allow_none=True, validate=validate.Range(min=0, error="Cost must be a valid positive number"))
    attachments = fields.List(fields.Str(), load_default=list)


class EventUpdateSchema(EventCreateSchema):
    """PUT /api/animals/<animal_id>/events/<event_id>. Attachments are kept unless sent."""
    attachments = fields.List(fields.Str())


class EventsQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    type = fields.Str(validate=validate.OneOf(EVENT_TYPES + ['all']), load_default='all')


class EventResponseSchema(Schema):
    event_id = fields.Str(dump_only=True)
    date = fields.Str()
    type = fields.Str()
    type_label = fields.Method("get_type_label", dump_only=True)
    type_color = fields.Method("get_type_color", dump_only=True)
    title = fields.Str()
    description = fields.Str(allow_none=True)
    notes = fields.Str(allow_none=True)
    veterinarian = fields.Str(allow_none=True)
    cost = fields.Float(allow_none=True)
    attachments = fields.List(fields.Str())
    created_at = fields.DateTime(dump_only=True)
    updated_at = fields.DateTime(dump_only=True)

    def get_type_label(self, obj):
        return event_type_label(obj['type'])

    def get_type_color(self, obj):
        return event_type_color(obj['type'])


class EventsResponseSchema(Schema):
    events = fields.List(fields.Nested(EventResponseSchema), dump_default=[])
    meta = fields.Dict(dump_default={})
