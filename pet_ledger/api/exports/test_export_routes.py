# pet_ledger/api/exports/test_export_routes.py
import csv
import io
import json


def test_json_export(client, auth_headers, create_animal):
    animal = create_animal(name="Biscuit")
    client.post(f"/api/animals/{animal['animal_id']}/events", headers=auth_headers,
                json={"type": "medical", "title": "Checkup", "date": "2024-01-01", "cost": 30})

    response = client.get('/api/export?format=json', headers=auth_headers)

    assert response.status_code == 200
    assert response.mimetype == 'application/json'
    assert response.headers['Content-Disposition'].startswith("attachment; filename*=UTF-8''pet_ledger_export_")
    document = json.loads(response.data)
    assert document['animals'][0]['name'] == 'Biscuit'
    assert document['animals'][0]['events'][0]['title'] == 'Checkup'
    assert document['animals'][0]['created_at'].endswith('Z')
    assert document['settings']['currency']['code'] == 'USD'


def test_csv_export(client, auth_headers, create_animal):
    create_animal(name="Biscuit", initial_weight=20, owner_info={"name": "Jo"})

    response = client.get('/api/export?format=csv', headers=auth_headers)

    assert response.status_code == 200
    assert response.mimetype == 'text/csv'
    rows = list(csv.reader(io.StringIO(response.data.decode('utf-8-sig'))))
    assert rows[0][0] == 'Name'
    assert rows[1][0] == 'Biscuit'
    assert rows[1][1] == 'Dog'
    assert '20.0 lbs' in rows[1]
    assert 'Jo' in rows[1]


def test_export_only_includes_own_animals(client, other_auth_headers, create_animal):
    create_animal()
    document = json.loads(client.get('/api/export', headers=other_auth_headers).data)
    assert document['animals'] == []


def test_unsupported_format(client, auth_headers):
    response = client.get('/api/export?format=pdf', headers=auth_headers)
    assert response.status_code == 400
    assert response.get_json()['error_code'] == 'UNSUPPORTED_FORMAT'
