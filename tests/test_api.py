import json

import pytest

from shop_analytics.collection_names import COLLECTIONS

SUPPORTED = ['products', 'customers', 'sales', 'employees', 'inventory']


def load(path):
    return json.loads(path.read_text(encoding='utf-8'))


def test_snapshot_returns_all_collections(client):
    response = client.get('/api/data')

    assert response.status_code == 200
    data = response.get_json()
    assert set(COLLECTIONS) <= set(data)
    assert len(data['sales']) == 4


def test_snapshot_reports_unreadable_database(client, db_path):
    db_path.write_text('{broken', encoding='utf-8')

    response = client.get('/api/data')

    assert response.status_code == 500
    assert response.get_json() == {'error': 'Failed to load database'}


def test_list_collection(client):
    response = client.get('/api/products')

    assert response.status_code == 200
    body = response.get_json()
    assert body['collection'] == 'products'
    assert body['count'] == 3
    assert [p['id'] for p in body['data']] == [1, 2, 3]


@pytest.mark.parametrize('method, path', [
    ('get', '/api/suppliers'),
    ('post', '/api/suppliers'),
    ('get', '/api/suppliers/1'),
    ('patch', '/api/suppliers/1'),
    ('delete', '/api/suppliers/1'),
])
def test_unknown_collection_returns_supported_list(client, method, path):
    response = getattr(client, method)(path, json={'name': 'x'})

    assert response.status_code == 404
    body = response.get_json()
    assert body['error'] == 'Unknown collection: suppliers'
    assert body['supported'] == SUPPORTED


def test_create_record(client, db_path):
    response = client.post('/api/customers', json={'name': 'Hal', 'age': 30, 'id': 1})

    assert response.status_code == 201
    assert response.get_json() == {'name': 'Hal', 'age': 30, 'id': 5}
    assert load(db_path)['customers'][-1]['name'] == 'Hal'


def test_create_accepts_json_sent_as_plain_text(client, db_path):
    response = client.post(
        '/api/customers',
        data=json.dumps({'name': 'Ivy', 'age': 27}),
        content_type='text/plain',
    )

    assert response.status_code == 201
    assert response.get_json() == {'name': 'Ivy', 'age': 27, 'id': 5}
    assert load(db_path)['customers'][-1]['name'] == 'Ivy'


@pytest.mark.parametrize('body', ['[1, 2]', '"text"', 'not json', 'null'])
def test_create_rejects_non_object_payload(client, body):
    response = client.post('/api/products', data=body, content_type='application/json')

    assert response.status_code == 400
    assert response.get_json() == {'error': 'Invalid JSON payload. Expected an object.'}


def test_create_beyond_capacity(client, db_path):
    snapshot = load(db_path)
    snapshot['employees'] = [{'id': i, 'name': f'E{i}'} for i in range(1, 21)]
    db_path.write_text(json.dumps(snapshot), encoding='utf-8')

    response = client.post('/api/employees', json={'name': 'Extra'})

    assert response.status_code == 400
    assert 'Cannot add more than 20 records to employees' in response.get_json()['error']
    assert len(load(db_path)['employees']) == 20


def test_get_record(client):
    response = client.get('/api/products/2')

    assert response.status_code == 200
    assert response.get_json()['name'] == 'Beta Kit'


def test_get_missing_record(client):
    response = client.get('/api/products/42')

    assert response.status_code == 404
    assert response.get_json() == {'error': 'No record found in products with id 42'}


@pytest.mark.parametrize('method', ['get', 'patch', 'delete'])
def test_non_numeric_id(client, method):
    response = getattr(client, method)('/api/products/abc', json={'stock': 1})

    assert response.status_code == 400
    assert response.get_json() == {'error': 'Record id must be a number.'}


def test_patch_record_keeps_id(client, db_path):
    response = client.patch('/api/products/1', json={'stock': 5, 'id': 77})

    assert response.status_code == 200
    body = response.get_json()
    assert body['id'] == 1
    assert body['stock'] == 5
    assert body['name'] == 'Alpha Pod'
    assert [p['id'] for p in load(db_path)['products']] == [1, 2, 3]


def test_patch_accepts_json_sent_form_encoded(client, db_path):
    response = client.patch(
        '/api/products/2',
        data=json.dumps({'stock': 7}),
        content_type='application/x-www-form-urlencoded',
    )

    assert response.status_code == 200
    assert response.get_json()['stock'] == 7
    assert load(db_path)['products'][1]['stock'] == 7


def test_patch_rejects_non_object_payload(client):
    response = client.patch('/api/products/1', json=[1, 2])

    assert response.status_code == 400


def test_patch_missing_record(client):
    response = client.patch('/api/products/9', json={'stock': 5})

    assert response.status_code == 404


def test_delete_record_twice(client, db_path):
    first = client.delete('/api/sales/1')
    second = client.delete('/api/sales/1')

    assert first.status_code == 200
    assert first.get_json() == {'success': True}
    assert second.status_code == 404
    assert [s['id'] for s in load(db_path)['sales']] == [2, 3, 4]


def test_analytics_endpoints(client):
    descriptive = client.get('/api/analytics/descriptive').get_json()
    predictive = client.get('/api/analytics/predictive').get_json()
    prescriptive = client.get('/api/analytics/prescriptive').get_json()

    assert descriptive['summary']['total_sales'] == pytest.approx(3080)
    assert predictive['regression']['slope'] == pytest.approx(740)
    assert predictive['trend']['confidence'] == 'Medium'
    assert prescriptive['summary']['products_to_reorder'] == 2


def test_health(client):
    response = client.get('/health')

    assert response.status_code == 200
    assert response.get_json()['collections'] == SUPPORTED
