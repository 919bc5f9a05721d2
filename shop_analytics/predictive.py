"""
Predictive analytics: what is likely to happen.

Sales trend is an ordinary least-squares fit of daily revenue against
day-of-month. Product demand assumes the sales history spans a fixed
10-day observation window.
"""
import math
from collections import defaultdict
from datetime import date, datetime

import numpy as np
from sklearn.metrics import r2_score

from .records import average_daily_sales, parse_date, sales_for, to_number

FORECAST_DAYS = 10
PROJECTION_DAYS = 30
REORDER_SOON_DAYS = 15
REORDER_SOON_LIMIT = 5

# Placeholder: not derived from the fit
CONFIDENCE_LABEL = 'Medium'


def daily_totals(sales):
    """Revenue per day-of-month as sorted (day, total) pairs"""
    totals = defaultdict(float)
    for sale in sales:
        parsed = parse_date(sale.get('date'))
        if parsed is None:
            continue
        totals[parsed.day] += to_number(sale.get('total'))
    return sorted(totals.items())


def linear_regression(points):
    """
    Closed-form least squares fit of y = slope * x + intercept.

    slope is 0 when n*sum(x^2) - sum(x)^2 is 0, intercept is 0 for no points.
    """
    n = len(points)
    if n == 0:
        return 0.0, 0.0

    x = np.array([p[0] for p in points], dtype=float)
    y = np.array([p[1] for p in points], dtype=float)
    sum_x = x.sum()
    sum_y = y.sum()
    sum_xy = (x * y).sum()
    sum_x2 = (x * x).sum()

    denominator = n * sum_x2 - sum_x * sum_x
    slope = 0.0 if denominator == 0 else (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n
    return float(slope), float(intercept)


def predict(slope, intercept, day):
    return slope * day + intercept


def regression_r_squared(points, slope, intercept):
    if len(points) < 2:
        return None
    y_true = [p[1] for p in points]
    y_pred = [predict(slope, intercept, p[0]) for p in points]
    return float(r2_score(y_true, y_pred))


def sales_forecast(points, slope, intercept, days=FORECAST_DAYS):
    """Predicted revenue for the day-indices following the last observed day"""
    if not points:
        return []
    max_day = max(p[0] for p in points)
    return [
        {'day': day, 'sales': max(0.0, predict(slope, intercept, day))}
        for day in range(max_day + 1, max_day + days + 1)
    ]


def product_demand(snapshot):
    """Sales velocity and reorder horizon for every product that has sold"""
    rows = []
    for product in snapshot['products']:
        product_sales = sales_for(snapshot['sales'], 'productId', product.get('id'))
        avg_daily = average_daily_sales(product_sales)
        if avg_daily <= 0:
            continue
        stock = to_number(product.get('stock'))
        days_until_reorder = math.floor(stock / avg_daily) if stock > 0 else 0
        rows.append({
            'name': product.get('name'),
            'current_stock': stock,
            'avg_daily_sales': avg_daily,
            'days_until_reorder': days_until_reorder,
            'predicted_need': avg_daily * PROJECTION_DAYS,
        })
    rows.sort(key=lambda r: r['days_until_reorder'])
    return rows


def at_risk(demand):
    return [r for r in demand if 0 < r['days_until_reorder'] < REORDER_SOON_DAYS]


def revenue_forecast(points, days=PROJECTION_DAYS):
    if not points:
        return 0.0
    return float(np.mean([p[1] for p in points])) * days


def customer_projections(customers, today=None):
    """Projected purchases and spending over the next 30 days per customer"""
    today = today or date.today()
    rows = []
    for customer in customers:
        joined = parse_date(customer.get('joinDate'))
        days_since_join = (today - joined.date()).days if joined else 0
        total_purchases = to_number(customer.get('totalPurchases'))
        total_spent = to_number(customer.get('totalSpent'))

        purchase_rate = total_purchases / days_since_join if days_since_join > 0 else 0.0
        predicted_purchases = purchase_rate * PROJECTION_DAYS
        avg_order_value = total_spent / total_purchases if total_purchases > 0 else 0.0

        rows.append({
            'name': customer.get('name'),
            'current_purchases': total_purchases,
            'predicted_purchases': predicted_purchases,
            'predicted_spending': predicted_purchases * avg_order_value,
        })
    rows.sort(key=lambda r: r['predicted_spending'], reverse=True)
    return rows


def trend_analysis(points, slope):
    if slope > 0:
        trend = 'Increasing'
    elif slope < 0:
        trend = 'Decreasing'
    else:
        trend = 'Stable'

    average = float(np.mean([p[1] for p in points])) if points else 0.0
    growth_rate = 0.0 if average == 0 else slope / average * 100
    return {
        'current_trend': trend,
        'growth_rate': growth_rate,
        'confidence': CONFIDENCE_LABEL,
    }


def forecast(snapshot, today=None):
    """All predictive metrics for a snapshot"""
    if isinstance(today, datetime):
        today = today.date()

    points = daily_totals(snapshot['sales'])
    slope, intercept = linear_regression(points)
    demand = product_demand(snapshot)
    risky = at_risk(demand)

    return {
        'historical_sales': [{'day': day, 'sales': total} for day, total in points],
        'predictions': sales_forecast(points, slope, intercept),
        'regression': {
            'slope': slope,
            'intercept': intercept,
            'data_points': len(points),
            'r_squared': regression_r_squared(points, slope, intercept),
        },
        'product_demand': demand,
        'reorder_soon': risky[:REORDER_SOON_LIMIT],
        'products_at_risk': len(risky),
        'monthly_revenue_forecast': revenue_forecast(points),
        'customer_projections': customer_projections(snapshot['customers'], today),
        'trend': trend_analysis(points, slope),
    }
