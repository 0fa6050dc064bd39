# pet_ledger/api/events/test_event_routes.py
import pytest


@pytest.fixture
def animal(create_animal):
    return create_animal()


@pytest.fixture
def events_url(animal):
    return f"/api/animals/{animal['animal_id']}/events"


def _event(**overrides):
    event = {"type": "medical", "title": "Rabies vaccine", "date": "2024-03-01", "cost": 45}
    event.update(overrides)
    return event


def test_add_event_trims_and_sorts(client, auth_headers, events_url):
    client.post(events_url, headers=auth_headers, json=_event(title="Older", date="2024-01-01"))
    response = client.post(events_url, headers=auth_headers, json=_event(
        title="  Newer  ", date="2024-05-01", veterinarian=" Dr. Ames ", type="grooming"
    ))

    assert response.status_code == 201
    events = response.get_json()['events']
    assert [e['title'] for e in events] == ['Newer', 'Older']
    assert events[0]['veterinarian'] == 'Dr. Ames'
    assert events[0]['type_label'] == 'Grooming'
    assert events[0]['attachments'] == []
    assert events[0]['event_id']
    assert events[0]['created_at'] == events[0]['updated_at']


def test_events_with_same_date_keep_insertion_order(client, auth_headers, events_url):
    for title in ("First", "Second", "Third"):
        client.post(events_url, headers=auth_headers, json=_event(title=title, date="2024-02-02"))

    events = client.get(events_url, headers=auth_headers).get_json()['events']
    assert [e['title'] for e in events] == ['First', 'Second', 'Third']


@pytest.mark.parametrize('payload', [
    {"title": "No type", "date": "2024-01-01"},
    {"type": "medical", "date": "2024-01-01"},
    {"type": "medical", "title": "No date"},
    {"type": "medical", "title": "   ", "date": "2024-01-01"},
    {"type": "party", "title": "Bad type", "date": "2024-01-01"},
    {"type": "medical", "title": "Bad date", "date": "01/02/2024 nonsense"},
    {"type": "medical", "title": "Negative", "date": "2024-01-01", "cost": -1},
])
def test_add_event_validation(client, auth_headers, events_url, payload):
    response = client.post(events_url, headers=auth_headers, json=payload)
    assert response.status_code == 400
    assert response.get_json()['error_code'] == 'VALIDATION_ERROR'


def test_add_event_unknown_animal(client, auth_headers, other_auth_headers, events_url):
    assert client.post('/api/animals/nope/events', headers=auth_headers, json=_event()).status_code == 404
    assert client.post(events_url, headers=other_auth_headers, json=_event()).status_code == 404


def test_list_events_filter(client, auth_headers, events_url):
    client.post(events_url, headers=auth_headers, json=_event(type="medical", cost=10))
    client.post(events_url, headers=auth_headers, json=_event(type="nutrition", title="New food", cost=None))

    body = client.get(f"{events_url}?type=medical", headers=auth_headers).get_json()
    assert [e['type'] for e in body['events']] == ['medical']
    assert body['meta'] == {"total": 2, "count": 1, "type": "medical", "total_cost": 10}

    body = client.get(events_url, headers=auth_headers).get_json()
    assert body['meta']['count'] == 2

    assert client.get(f"{events_url}?type=party", headers=auth_headers).status_code == 400


def test_update_event(client, auth_headers, events_url):
    added = client.post(events_url, headers=auth_headers, json=_event(attachments=["https://files.example.com/a.pdf"]))
    event = added.get_json()['events'][0]

    response = client.put(f"{events_url}/{event['event_id']}", headers=auth_headers, json=_event(
        title=" Booster ", date="2024-06-01", cost=60
    ))

    assert response.status_code == 200
    updated = response.get_json()['events'][0]
    assert updated['event_id'] == event['event_id']
    assert updated['title'] == 'Booster'
    assert updated['cost'] == 60
    assert updated['attachments'] == ["https://files.example.com/a.pdf"]
    assert updated['created_at'] == event['created_at']


def test_update_event_resorts(client, auth_headers, events_url):
    client.post(events_url, headers=auth_headers, json=_event(title="A", date="2024-01-01"))
    events = client.post(events_url, headers=auth_headers, json=_event(title="B", date="2024-02-01")).get_json()['events']
    older = next(e for e in events if e['title'] == 'A')

    response = client.put(f"{events_url}/{older['event_id']}", headers=auth_headers,
                          json=_event(title="A", date="2024-12-01"))
    assert [e['title'] for e in response.get_json()['events']] == ['A', 'B']


def test_update_and_delete_missing_event(client, auth_headers, events_url):
    response = client.put(f"{events_url}/nope", headers=auth_headers, json=_event())
    assert response.status_code == 404
    assert response.get_json()['message'] == 'Animal or event not found'

    assert client.delete(f"{events_url}/nope", headers=auth_headers).status_code == 404
    assert client.delete("/api/animals/nope/events/nope", headers=auth_headers).status_code == 404


def test_delete_event(client, auth_headers, events_url):
    event = client.post(events_url, headers=auth_headers, json=_event()).get_json()['events'][0]

    response = client.delete(f"{events_url}/{event['event_id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.get_json() == {"success": True}
    assert client.get(events_url, headers=auth_headers).get_json()['events'] == []
