"""
Prescriptive analytics: what to do about it.

Fixed rule tables map computed metrics to recommendations for reordering,
pricing, customer targeting and staff training. Rows that need no action are
left out of the results.
"""
import math

import numpy as np

from .records import average_daily_sales, sales_for, to_number

NO_REORDER_HORIZON = 999
SUPPLY_DAYS = 30
HIGH_PRIORITY_DAYS = 7
MEDIUM_PRIORITY_DAYS = 15
PRIORITY_ORDER = {'High': 1, 'Medium': 2, 'Low': 3}

LOW_MARGIN_PCT = 20
HIGH_MARGIN_PCT = 50
GOOD_VOLUME_UNITS = 5
LOW_VOLUME_UNITS = 3
PRICE_INCREASE = 1.1
PRICE_DECREASE = 0.9
PROMO_DISCOUNT = 0.85
ESTIMATED_UNITS_PER_PRICE_CHANGE = 5

RECENT_PURCHASE_DAYS = 10
LAPSED_PURCHASE_DAYS = 30

EFFICIENCY_FLOOR = 0.8
MIN_AVG_SALE_VALUE = 30
MIN_SALES_COUNT = 20


def reorder_priority(days_until_reorder):
    if days_until_reorder < HIGH_PRIORITY_DAYS:
        return 'High'
    elif days_until_reorder < MEDIUM_PRIORITY_DAYS:
        return 'Medium'
    return 'Low'


def inventory_recommendations(snapshot):
    rows = []
    for product in snapshot['products']:
        product_sales = sales_for(snapshot['sales'], 'productId', product.get('id'))
        avg_daily = average_daily_sales(product_sales)
        stock = to_number(product.get('stock'))
        if stock > 0 and avg_daily > 0:
            days_until_reorder = math.floor(stock / avg_daily)
        else:
            days_until_reorder = NO_REORDER_HORIZON

        priority = reorder_priority(days_until_reorder)
        if priority == 'Low':
            continue

        recommended_order = math.ceil(avg_daily * SUPPLY_DAYS)
        rows.append({
            'name': product.get('name'),
            'current_stock': stock,
            'recommended_order': recommended_order,
            'priority': priority,
            'days_until_reorder': 'N/A' if days_until_reorder == NO_REORDER_HORIZON else days_until_reorder,
            'estimated_cost': recommended_order * to_number(product.get('cost')),
        })
    rows.sort(key=lambda r: PRIORITY_ORDER[r['priority']])
    return rows


def pricing_action(profit_margin, total_sold, price):
    """Return (recommendation, suggested_price, reason)"""
    if profit_margin < LOW_MARGIN_PCT and total_sold > GOOD_VOLUME_UNITS:
        return 'Increase', price * PRICE_INCREASE, 'Low profit margin with good sales volume'
    elif profit_margin > HIGH_MARGIN_PCT and total_sold < LOW_VOLUME_UNITS:
        return 'Decrease', price * PRICE_DECREASE, 'High margin but low sales - price may be too high'
    elif total_sold == 0:
        return 'Promote', price * PROMO_DISCOUNT, 'No sales - consider promotional pricing'
    return 'Maintain', price, 'Current pricing is optimal'


def pricing_recommendations(snapshot):
    rows = []
    for product in snapshot['products']:
        product_sales = sales_for(snapshot['sales'], 'productId', product.get('id'))
        total_sold = sum(to_number(s.get('quantity')) for s in product_sales)
        revenue = sum(to_number(s.get('total')) for s in product_sales)
        cost = to_number(product.get('cost'))
        price = to_number(product.get('price'))
        profit_margin = (revenue - total_sold * cost) / revenue * 100 if revenue > 0 else 0.0

        recommendation, suggested_price, reason = pricing_action(profit_margin, total_sold, price)
        if recommendation == 'Maintain':
            continue
        rows.append({
            'name': product.get('name'),
            'current_price': price,
            'suggested_price': suggested_price,
            'recommendation': recommendation,
            'reason': reason,
            'profit_margin': profit_margin,
            'sales_count': total_sold,
        })
    return rows


def churn_risk(days_since_last_purchase):
    if days_since_last_purchase > 20:
        return 'High'
    elif days_since_last_purchase > 10:
        return 'Medium'
    return 'Low'


def customer_action(customer_value, risk, avg_purchase_value):
    if customer_value > 500 and risk == 'High':
        return 'Win Back Campaign'
    elif customer_value > 300 and risk == 'Medium':
        return 'Engagement Email'
    elif customer_value < 200 and avg_purchase_value > 50:
        return 'Upsell Opportunity'
    return 'Maintain'


def customer_targeting(snapshot):
    rows = []
    for customer in snapshot['customers']:
        customer_sales = sales_for(snapshot['sales'], 'customerId', customer.get('id'))
        totals = [to_number(s.get('total')) for s in customer_sales]
        avg_purchase_value = float(np.mean(totals)) if totals else 0.0
        # No purchase timestamps per customer: any sale counts as recent
        days_since_last_purchase = RECENT_PURCHASE_DAYS if customer_sales else LAPSED_PURCHASE_DAYS
        customer_value = to_number(customer.get('totalSpent'))
        risk = churn_risk(days_since_last_purchase)

        action = customer_action(customer_value, risk, avg_purchase_value)
        if action == 'Maintain':
            continue
        rows.append({
            'name': customer.get('name'),
            'customer_value': customer_value,
            'churn_risk': risk,
            'action': action,
            'avg_purchase_value': avg_purchase_value,
        })
    rows.sort(key=lambda r: r['customer_value'], reverse=True)
    return rows


def _employee_metrics(snapshot, employee):
    employee_sales = sales_for(snapshot['sales'], 'employeeId', employee.get('id'))
    revenue = sum(to_number(s.get('total')) for s in employee_sales)
    salary = to_number(employee.get('salary'))
    efficiency = revenue / salary * 100 if employee_sales and salary > 0 else 0.0
    avg_sale_value = revenue / len(employee_sales) if employee_sales else 0.0
    return len(employee_sales), avg_sale_value, efficiency


def training_recommendation(efficiency, avg_efficiency, avg_sale_value, sales_count):
    if efficiency < avg_efficiency * EFFICIENCY_FLOOR:
        return 'Sales Training Needed'
    elif avg_sale_value < MIN_AVG_SALE_VALUE:
        return 'Upselling Training'
    elif sales_count < MIN_SALES_COUNT:
        return 'Product Knowledge Training'
    return 'No Action'


def employee_recommendations(snapshot):
    employees = snapshot['employees']
    metrics = [_employee_metrics(snapshot, e) for e in employees]
    avg_efficiency = float(np.mean([m[2] for m in metrics])) if metrics else 0.0

    rows = []
    for employee, (sales_count, avg_sale_value, efficiency) in zip(employees, metrics):
        recommendation = training_recommendation(efficiency, avg_efficiency, avg_sale_value, sales_count)
        if recommendation == 'No Action':
            continue
        rows.append({
            'name': employee.get('name'),
            'efficiency': efficiency,
            'avg_sale_value': avg_sale_value,
            'sales_count': sales_count,
            'recommendation': recommendation,
        })
    return rows


def executive_summary(inventory, pricing, customers):
    potential_revenue = sum(
        (p['suggested_price'] - p['current_price']) * ESTIMATED_UNITS_PER_PRICE_CHANGE
        for p in pricing if p['recommendation'] == 'Increase'
    )
    return {
        'products_to_reorder': len(inventory),
        'total_reorder_cost': sum(p['estimated_cost'] for p in inventory),
        'pricing_adjustments': len(pricing),
        'potential_revenue_increase': potential_revenue,
        'customer_actions': len(customers),
    }


def recommend(snapshot):
    """All prescriptive recommendations for a snapshot"""
    inventory = inventory_recommendations(snapshot)
    pricing = pricing_recommendations(snapshot)
    customers = customer_targeting(snapshot)
    return {
        'summary': executive_summary(inventory, pricing, customers),
        'inventory': inventory,
        'pricing': pricing,
        'customers': customers,
        'employees': employee_recommendations(snapshot),
    }
