# Plotly figures for the analytics pages, rendered as embeddable HTML fragments.
import plotly.graph_objects as go

COLORS = ['#0088FE', '#00C49F', '#FFBB28', '#FF8042', '#8884d8', '#82ca9d']


def to_html(fig, height=400):
    fig.update_layout(height=height, margin=dict(l=40, r=20, t=30, b=40), template='plotly_white')
    # plotly.js is loaded once by the base template
    return fig.to_html(full_html=False, include_plotlyjs=False)


def pie_chart(rows, height=300):
    fig = go.Figure(go.Pie(
        labels=[r['name'] for r in rows],
        values=[r['value'] for r in rows],
        marker=dict(colors=COLORS),
    ))
    return to_html(fig, height)


def top_products_chart(rows):
    fig = go.Figure([
        go.Bar(name='Quantity Sold', x=[r['name'] for r in rows], y=[r['quantity'] for r in rows],
               marker_color='#8884d8'),
        go.Bar(name='Revenue', x=[r['name'] for r in rows], y=[r['revenue'] for r in rows],
               marker_color='#82ca9d'),
    ])
    fig.update_layout(barmode='group')
    return to_html(fig, 300)


def daily_sales_chart(rows):
    fig = go.Figure(go.Scatter(
        x=[r['label'] for r in rows],
        y=[r['sales'] for r in rows],
        mode='lines+markers',
        name='Daily Sales',
        line=dict(color='#8884d8', width=2),
    ))
    return to_html(fig, 300)


def sales_forecast_chart(historical, predictions):
    fig = go.Figure([
        go.Scatter(x=[r['day'] for r in historical], y=[r['sales'] for r in historical],
                   mode='lines+markers', name='Historical', line=dict(color='#8884d8', width=2)),
        go.Scatter(x=[r['day'] for r in predictions], y=[r['sales'] for r in predictions],
                   mode='lines+markers', name='Predicted', line=dict(color='#82ca9d', width=2, dash='dash')),
    ])
    fig.update_xaxes(title_text='Day of month')
    return to_html(fig)


def demand_chart(rows):
    rows = rows[:10]
    fig = go.Figure([
        go.Bar(name='Current Stock', x=[r['name'] for r in rows], y=[r['current_stock'] for r in rows],
               marker_color='#8884d8'),
        go.Bar(name='Predicted Need (30 days)', x=[r['name'] for r in rows],
               y=[r['predicted_need'] for r in rows], marker_color='#82ca9d'),
    ])
    fig.update_layout(barmode='group')
    fig.update_xaxes(tickangle=-45)
    return to_html(fig)


def customer_spending_chart(rows):
    rows = rows[:10]
    fig = go.Figure(go.Bar(
        name='Predicted Spending',
        x=[r['name'] for r in rows],
        y=[r['predicted_spending'] for r in rows],
        marker_color='#8884d8',
    ))
    fig.update_xaxes(tickangle=-45)
    return to_html(fig, 300)
