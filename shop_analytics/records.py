# Helpers for reading loosely-typed snapshot records.
import math
from datetime import datetime

from .json_database import numeric_id

OBSERVATION_WINDOW_DAYS = 10


def to_number(value, default=0.0):
    """Coerce a record field to a float; missing or non-numeric values give default"""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def parse_date(date_str):
    if not date_str:
        return None
    # Try common formats
    for fmt in ('%Y-%m-%d', '%Y/%m/%d', '%d-%m-%Y', '%m/%d/%Y', '%Y-%m-%d %H:%M:%S', '%Y-%m-%dT%H:%M:%S'):
        try:
            return datetime.strptime(str(date_str)[:19], fmt)
        except ValueError:
            pass
    return None


def sales_for(sales, field, record_id):
    """Sales whose foreign key `field` references record_id"""
    target = numeric_id(record_id)
    if target is None:
        return []
    return [s for s in sales if numeric_id(s.get(field)) == target]


def find_by_id(records, record_id):
    target = numeric_id(record_id)
    if target is None:
        return None
    for record in records:
        if numeric_id(record.get('id')) == target:
            return record
    return None


def average_daily_sales(product_sales):
    """Units sold per day, assuming the sales cover a fixed 10-day window"""
    if not product_sales:
        return 0.0
    return sum(to_number(s.get('quantity')) for s in product_sales) / OBSERVATION_WINDOW_DAYS
