"""
Descriptive analytics: what happened.

Summary statistics and group-by aggregations over a database snapshot.
"""
from collections import Counter, defaultdict

import numpy as np

from .json_database import numeric_id
from .records import find_by_id, parse_date, sales_for, to_number

TOP_PRODUCTS_LIMIT = 5

AGE_GROUPS = ('18-24', '25-29', '30-34', '35+')


def summary_statistics(snapshot):
    sales = snapshot['sales']
    products = snapshot['products']
    customers = snapshot['customers']

    totals = [to_number(s.get('total')) for s in sales]
    spending = [to_number(c.get('totalSpent')) for c in customers]
    total_sales = float(np.sum(totals)) if totals else 0.0

    return {
        'total_sales': total_sales,
        'average_sale': float(np.mean(totals)) if totals else 0.0,
        'total_products': len(products),
        'total_customers': len(customers),
        'average_customer_spending': float(np.mean(spending)) if spending else 0.0,
        'inventory_value': sum(
            to_number(p.get('stock')) * to_number(p.get('cost')) for p in products
        ),
    }


def sales_by_category(snapshot):
    """Revenue per product category; sales with no matching product are skipped"""
    totals = defaultdict(float)
    for sale in snapshot['sales']:
        product = find_by_id(snapshot['products'], sale.get('productId'))
        if product is None:
            continue
        totals[product.get('category')] += to_number(sale.get('total'))
    return [{'name': name, 'value': value} for name, value in totals.items()]


def product_rank(item):
    """Quantity descending; ties go to the lower integer product id first"""
    product_id, quantity = item
    if isinstance(product_id, int) and product_id >= 0:
        return (-quantity, 0, product_id)
    return (-quantity, 1, 0)


def top_products(snapshot, limit=TOP_PRODUCTS_LIMIT):
    quantities = Counter()
    for sale in snapshot['sales']:
        quantities[numeric_id(sale.get('productId'))] += to_number(sale.get('quantity'))

    top = []
    for product_id, quantity in sorted(quantities.items(), key=product_rank)[:limit]:
        product = find_by_id(snapshot['products'], product_id)
        revenue = sum(
            to_number(s.get('total'))
            for s in sales_for(snapshot['sales'], 'productId', product_id)
        )
        top.append({
            'name': product.get('name', 'Unknown') if product else 'Unknown',
            'quantity': quantity,
            'revenue': revenue,
        })
    return top


def daily_sales(snapshot):
    """Revenue per calendar date in chronological order, labelled MM/DD"""
    totals = defaultdict(float)
    for sale in snapshot['sales']:
        date = sale.get('date')
        if not date:
            continue
        totals[str(date)] += to_number(sale.get('total'))

    def sort_key(date):
        parsed = parse_date(date)
        return (parsed is None, parsed or date)

    rows = []
    for date in sorted(totals, key=sort_key):
        rows.append({
            'date': date,
            'label': '/'.join(date[:10].split('-')[1:]) or date,
            'sales': totals[date],
        })
    return rows


def age_group(age):
    if age < 25:
        return '18-24'
    elif age < 30:
        return '25-29'
    elif age < 35:
        return '30-34'
    return '35+'


def age_distribution(snapshot):
    """Customer counts per age bracket; customers without a numeric age are skipped"""
    counts = Counter()
    for customer in snapshot['customers']:
        age = to_number(customer.get('age'), default=None)
        if age is None:
            continue
        counts[age_group(age)] += 1
    return [{'name': group, 'value': counts[group]} for group in AGE_GROUPS if counts[group]]


def describe(snapshot):
    """All descriptive metrics for a snapshot"""
    return {
        'summary': summary_statistics(snapshot),
        'sales_by_category': sales_by_category(snapshot),
        'top_products': top_products(snapshot),
        'daily_sales': daily_sales(snapshot),
        'age_distribution': age_distribution(snapshot),
    }
