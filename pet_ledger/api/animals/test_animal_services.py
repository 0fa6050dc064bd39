# pet_ledger/api/animals/test_animal_services.py
from datetime import date, timedelta

import pytest

from pet_ledger.utils.datetime_utils import DateTimeUtils


def _form(name, species='dog', **extra):
    form = {
        'name': name, 'species': species, 'sex': '', 'parent_ids': [], 'owner_info': {},
        'weight_unit': 'lbs', 'height_unit': 'inches', 'height_measurement_type': 'shoulder',
    }
    form.update(extra)
    return form


@pytest.fixture
def animal_service(services):
    return services['animals']


@pytest.fixture
def event_service(services):
    return services['events']


def test_get_animal_raises_for_other_owner(animal_service):
    animal = animal_service.add_animal('u1', _form('Biscuit'))

    assert animal_service.get_animal(animal.animal_id, 'u1').name == 'Biscuit'
    assert animal_service.get_animal_by_id_and_owner(animal.animal_id, 'u2') is None
    with pytest.raises(FileNotFoundError):
        animal_service.get_animal(animal.animal_id, 'u2')
    with pytest.raises(FileNotFoundError):
        animal_service.delete_animal(animal.animal_id, 'u2')


def test_get_animals_newest_first(animal_service):
    first = animal_service.add_animal('u1', _form('First'))
    second = animal_service.add_animal('u1', _form('Second'))
    animal_service.add_animal('u2', _form('Elsewhere'))

    # make the ordering independent of clock resolution
    first.created_at = second.created_at - timedelta(seconds=5)
    animal_service.save_animal(first)

    assert [a.name for a in animal_service.get_animals('u1')] == ['Second', 'First']


def test_filter_animals():
    from pet_ledger.api.animals.services import AnimalService
    from pet_ledger.models.animal import Animal

    animals = [
        Animal.from_dict({'animal_id': '1', 'user_id': 'u', 'name': 'Comet', 'species': 'horse', 'breed': 'Arabian'}),
        Animal.from_dict({'animal_id': '2', 'user_id': 'u', 'name': 'Rex', 'species': 'dog', 'death_date': '2020-01-01'}),
    ]

    assert [a.name for a in AnimalService.filter_animals(animals, search='arab')] == ['Comet']
    assert [a.name for a in AnimalService.filter_animals(animals, search='DOG')] == ['Rex']
    assert [a.name for a in AnimalService.filter_animals(animals, status='alive')] == ['Comet']
    assert AnimalService.filter_animals(animals, species='cat') == []


def test_stats(animal_service, event_service):
    today = DateTimeUtils.today()
    soon = today + timedelta(days=3)
    born = date(today.year - 4, soon.month, min(soon.day, 28))

    dog = animal_service.add_animal('u1', _form('Biscuit', date_of_birth=born))
    animal_service.add_animal('u1', _form('Whiskers', species='cat', date_of_birth=date(today.year - 2, 1, 1)))
    animal_service.add_animal('u1', _form('Old Timer', date_of_birth=date(2000, 1, 1), death_date=date(2015, 1, 1)))

    event_service.add_event(dog.animal_id, 'u1', {'type': 'medical', 'title': 'Vaccine', 'date': '2024-01-01', 'cost': 40.5})
    event_service.add_event(dog.animal_id, 'u1', {'type': 'grooming', 'title': 'Bath', 'date': '2024-02-01', 'cost': 9.5})

    stats = animal_service.get_stats('u1')

    assert stats['total'] == 3
    assert stats['alive'] == 2
    assert stats['deceased'] == 1
    assert stats['total_expenses'] == 50
    assert stats['total_expenses_display'] == '$50.00'
    assert stats['species_counts'] == {'dog': 2, 'cat': 1}
    assert stats['top_species'][0] == {'species': 'dog', 'count': 2}
    assert len(stats['recently_added']) == 3
    assert stats['upcoming_birthdays'][0]['name'] in ('Biscuit', 'Whiskers')
    assert all(b['name'] != 'Old Timer' for b in stats['upcoming_birthdays'])
    assert isinstance(stats['average_age'], int)


def test_stats_for_user_without_animals(animal_service):
    stats = animal_service.get_stats('nobody')
    assert stats['total'] == 0
    assert stats['average_age'] == 0
    assert stats['upcoming_birthdays'] == []


def test_summary_uses_user_settings(animal_service, event_service, services):
    animal = animal_service.add_animal('u1', _form(
        'Comet', species='horse', date_of_birth=date(2015, 5, 20),
        initial_height=15, height_unit='hands', initial_weight=1000,
        owner_info={'name': 'Jo', 'phone': '5551234567'},
    ))
    event_service.add_event(animal.animal_id, 'u1', {'type': 'medical', 'title': 'Checkup', 'date': '2024-01-01', 'cost': 1234.5})

    settings = services['settings'].get_settings('u1').to_dict()
    services['settings'].update_settings('u1', {
        'currency': {'code': 'EUR', 'symbol': '€', 'position': 'after', 'decimals': 2},
        'display': dict(settings['display'], date_format='DD/MM/YYYY'),
    })

    summary = animal_service.get_summary(animal.animal_id, 'u1')

    assert summary['species_label'] == 'Horse'
    assert summary['last_event_date_display'] == 'Jan 01, 2024'
    assert summary['date_of_birth_display'] == '20/05/2015'
    assert summary['death_date_display'] is None
    assert summary['total_event_cost_display'] == '1234.50€'
    assert summary['latest_height']['converted']['inches'] == 60
    assert summary['latest_weight']['converted']['kg'] == pytest.approx(453.59, abs=0.01)
    assert summary['default_units'] == {'weight': 'lbs', 'height': 'hands'}
    assert summary['owner_phone_display'] == '(555) 123-4567'
    assert summary['next_birthday'] is not None
    assert summary['age'] >= 8
