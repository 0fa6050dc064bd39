# pet_ledger/models/test_animal_model.py
from datetime import datetime, timezone

from pet_ledger.models.animal import Animal, AnimalSpecies, EventType
from pet_ledger.models.settings import AppSettings, settings_doc_id


def _stored_animal(**overrides):
    data = {
        'animal_id': 'a1',
        'user_id': 'u1',
        'name': 'Comet',
        'species': 'horse',
        'sex': 'mare',
        'owner_info': {'name': 'Jo', 'email': 'jo@example.com'},
        'created_at': '2024-01-15T10:30:00Z',
        'updated_at': '2024-01-16T10:30:00Z',
        'weight': [{'date': '2024-01-15T10:30:00Z', 'weight': 1100, 'unit': 'lbs', 'notes': None}],
        'height': [{'date': '2024-01-15T10:30:00Z', 'height': 15.2, 'unit': 'hands', 'measurement_type': 'withers'}],
        'events': [{
            'event_id': 'e1', 'date': '2024-02-01', 'type': 'grooming', 'title': 'Hoof trim',
            'created_at': '2024-02-01T09:00:00Z', 'updated_at': '2024-02-01T09:00:00Z',
        }],
    }
    data.update(overrides)
    return data


def test_from_dict_converts_nested_records():
    animal = Animal.from_dict(_stored_animal())

    assert animal.species is AnimalSpecies.HORSE
    assert animal.owner_info.name == 'Jo'
    assert animal.weight[0].weight == 1100
    assert animal.height[0].measurement_type == 'withers'
    assert animal.events[0].type is EventType.GROOMING
    assert animal.events[0].attachments == []
    assert animal.created_at == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    assert animal.parent_ids == []
    assert not animal.is_deceased


def test_from_dict_tolerates_older_documents():
    data = _stored_animal(species='dragon', events=None, created_at='not a timestamp')
    del data['sex']

    animal = Animal.from_dict(data)

    assert animal.species is AnimalSpecies.OTHER
    assert animal.events == []
    assert animal.sex == ''
    assert animal.created_at.tzinfo == timezone.utc


def test_unknown_event_type_becomes_general():
    animal = Animal.from_dict(_stored_animal(events=[{
        'event_id': 'e1', 'date': '2024-02-01', 'type': 'party', 'title': 'Birthday',
    }]))
    assert animal.events[0].type is EventType.GENERAL


def test_to_dict_stores_enum_values():
    animal = Animal.from_dict(_stored_animal(death_date='2024-03-01'))
    data = animal.to_dict()

    assert data['species'] == 'horse'
    assert data['events'][0]['type'] == 'grooming'
    assert data['owner_info']['email'] == 'jo@example.com'
    assert animal.is_deceased


def test_settings_defaults_and_round_trip():
    settings = AppSettings.default()
    assert settings.currency.code == 'USD'
    assert settings.display.date_format == 'MM/DD/YYYY'
    assert 'Dog' in settings.field_options.species

    data = settings.to_dict()
    data['field_options']['custom_fields'] = [{'id': 'cf1', 'name': 'Stall', 'type': 'text'}]
    restored = AppSettings.from_dict(data)

    assert restored.settings_id == settings.settings_id
    assert restored.field_options.custom_fields[0].category == 'other'
    assert restored.field_options.measurement_units.height[-1] == 'hands'
    assert settings_doc_id('u1') == 'user-settings-u1'
