# Fixed set of record collections held in the JSON database.

COLLECTIONS = ('products', 'customers', 'sales', 'employees', 'inventory')

COLLECTION_LABELS = {
    'products': 'Products',
    'customers': 'Customers',
    'sales': 'Sales',
    'employees': 'Employees',
    'inventory': 'Inventory',
}


def is_collection_name(value):
    """Check that value names one of the supported collections"""
    return value in COLLECTIONS
