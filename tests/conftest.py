import copy
import json

import pytest

from shop_analytics.json_database import JsonDatabase
from shop_analytics.server import app as flask_app

# Small snapshot with hand-computed expectations used across the suite.
FIXTURE_SNAPSHOT = {
    'products': [
        {'id': 1, 'name': 'Alpha Pod', 'category': 'Pods', 'price': 100, 'cost': 90, 'stock': 12},
        {'id': 2, 'name': 'Beta Kit', 'category': 'Devices', 'price': 1000, 'cost': 300, 'stock': 1},
        {'id': 3, 'name': 'Gamma Coil', 'category': 'Accessories', 'price': 50, 'cost': 20, 'stock': 10},
    ],
    'customers': [
        {'id': 1, 'name': 'Ann', 'age': 22, 'totalSpent': 600, 'totalPurchases': 4, 'joinDate': '2025-09-01'},
        {'id': 2, 'name': 'Ben', 'age': 31, 'totalSpent': 1000, 'totalPurchases': 2, 'joinDate': '2025-09-11'},
        {'id': 3, 'name': 'Cid', 'age': 40, 'totalSpent': 150, 'totalPurchases': 0, 'joinDate': '2025-10-01'},
        {'id': 4, 'name': 'Dee', 'age': 26, 'totalSpent': 800, 'totalPurchases': 2, 'joinDate': '2025-06-01'},
    ],
    'sales': [
        {'id': 1, 'productId': 1, 'customerId': 1, 'employeeId': 1, 'quantity': 6, 'total': 600, 'date': '2025-10-01'},
        {'id': 2, 'productId': 1, 'customerId': 1, 'employeeId': 1, 'quantity': 4, 'total': 400, 'date': '2025-10-02'},
        {'id': 3, 'productId': 2, 'customerId': 2, 'employeeId': 2, 'quantity': 2, 'total': 2000, 'date': '2025-10-03'},
        {'id': 4, 'productId': 9, 'customerId': 3, 'employeeId': 2, 'quantity': 1, 'total': 80, 'date': '2025-10-03'},
    ],
    'employees': [
        {'id': 1, 'name': 'Eve', 'salary': 10000},
        {'id': 2, 'name': 'Fay', 'salary': 20000},
        {'id': 3, 'name': 'Gus', 'salary': 15000},
    ],
    'inventory': [
        {'id': 1, 'productId': 1, 'stock': 12},
    ],
}


@pytest.fixture
def snapshot():
    return copy.deepcopy(FIXTURE_SNAPSHOT)


@pytest.fixture
def db_path(tmp_path, snapshot):
    path = tmp_path / 'database.json'
    path.write_text(json.dumps(snapshot, indent=2), encoding='utf-8')
    return path


@pytest.fixture
def database(db_path):
    return JsonDatabase(str(db_path))


@pytest.fixture
def app(db_path):
    original = flask_app.config['DATABASE_PATH']
    flask_app.config.update(TESTING=True, DATABASE_PATH=str(db_path))
    yield flask_app
    flask_app.config['DATABASE_PATH'] = original


@pytest.fixture
def client(app):
    return app.test_client()
