import logging

from flask import Flask, current_app, flash, jsonify, redirect, render_template, request, url_for
from flask_cors import CORS

from . import charts, descriptive, predictive, prescriptive
from .collection_names import COLLECTION_LABELS, COLLECTIONS, is_collection_name
from .config import load_config
from .json_database import (
    CapacityExceededError,
    DatabaseError,
    JsonDatabase,
    is_plain_object,
    numeric_id,
)
from .logger import setup_logger

app = Flask(__name__)
app.config.from_mapping(load_config())
CORS(app)  # Enable CORS for all routes

setup_logger(app.config['LOG_DIR'])
logger = logging.getLogger(__name__)

# ============================================================================
# DATABASE HELPER FUNCTIONS
# ============================================================================

def get_database():
    """Record store for the configured JSON document (re-read on every call)"""
    return JsonDatabase(current_app.config['DATABASE_PATH'])


def load_snapshot():
    return get_database().read_database()


def unknown_collection_response(collection):
    logger.warning('Unknown collection requested: %s', collection)
    return jsonify({
        'error': f'Unknown collection: {collection}',
        'supported': list(COLLECTIONS)
    }), 404


def invalid_id_response():
    return jsonify({'error': 'Record id must be a number.'}), 400


def invalid_payload_response():
    return jsonify({'error': 'Invalid JSON payload. Expected an object.'}), 400


def not_found_response(collection, record_id):
    return jsonify({'error': f'No record found in {collection} with id {record_id}'}), 404


@app.errorhandler(DatabaseError)
def handle_database_error(e):
    logger.exception('Database unavailable: %s', e)
    if request.path.startswith('/api/'):
        return jsonify({'error': 'Failed to load database'}), 500
    return render_template('error.html', message='Failed to load database'), 500

# ============================================================================
# COLLECTION APIs
# ============================================================================

@app.route('/api/data', methods=['GET'])
def get_snapshot():
    """Full multi-collection snapshot for analytics consumers"""
    return jsonify(load_snapshot())


@app.route('/api/<collection>', methods=['GET'])
def list_records(collection):
    """List every record in a collection, sorted by id"""
    if not is_collection_name(collection):
        return unknown_collection_response(collection)

    data = get_database().get_collection(collection)
    return jsonify({
        'collection': collection,
        'count': len(data),
        'data': data
    })


@app.route('/api/<collection>', methods=['POST'])
def create_record(collection):
    """Insert a record; the id is assigned by the store"""
    if not is_collection_name(collection):
        return unknown_collection_response(collection)

    payload = request.get_json(force=True, silent=True)
    if not is_plain_object(payload):
        return invalid_payload_response()

    try:
        record = get_database().add_record(collection, payload)
    except CapacityExceededError as e:
        logger.warning('Rejected insert into %s: %s', collection, e)
        return jsonify({'error': str(e)}), 400

    return jsonify(record), 201


@app.route('/api/<collection>/<record_id>', methods=['GET'])
def get_record(collection, record_id):
    if not is_collection_name(collection):
        return unknown_collection_response(collection)

    parsed_id = numeric_id(record_id)
    if parsed_id is None:
        return invalid_id_response()

    record = get_database().find_record(collection, parsed_id)
    if not record:
        return not_found_response(collection, record_id)

    return jsonify(record)


@app.route('/api/<collection>/<record_id>', methods=['PATCH'])
def patch_record(collection, record_id):
    """Partially update a record; the id in the payload is ignored"""
    if not is_collection_name(collection):
        return unknown_collection_response(collection)

    parsed_id = numeric_id(record_id)
    if parsed_id is None:
        return invalid_id_response()

    updates = request.get_json(force=True, silent=True)
    if not is_plain_object(updates):
        return invalid_payload_response()

    updated = get_database().update_record(collection, parsed_id, updates)
    if not updated:
        return not_found_response(collection, record_id)

    return jsonify(updated)


@app.route('/api/<collection>/<record_id>', methods=['DELETE'])
def delete_record(collection, record_id):
    if not is_collection_name(collection):
        return unknown_collection_response(collection)

    parsed_id = numeric_id(record_id)
    if parsed_id is None:
        return invalid_id_response()

    if not get_database().remove_record(collection, parsed_id):
        return not_found_response(collection, record_id)

    return jsonify({'success': True})

# ============================================================================
# ANALYTICS APIs
# ============================================================================

@app.route('/api/analytics/descriptive', methods=['GET'])
def get_descriptive_analytics():
    """Summary statistics and sales breakdowns"""
    return jsonify(descriptive.describe(load_snapshot()))


@app.route('/api/analytics/predictive', methods=['GET'])
def get_predictive_analytics():
    """Sales trend regression, demand and spending forecasts"""
    return jsonify(predictive.forecast(load_snapshot()))


@app.route('/api/analytics/prescriptive', methods=['GET'])
def get_prescriptive_analytics():
    """Reorder, pricing, customer and training recommendations"""
    return jsonify(prescriptive.recommend(load_snapshot()))

# ============================================================================
# DASHBOARD PAGES
# ============================================================================

@app.route('/', methods=['GET'])
def home():
    return render_template('home.html')


@app.route('/analytics/descriptive', methods=['GET'])
def descriptive_page():
    metrics = descriptive.describe(load_snapshot())
    figures = {
        'category': charts.pie_chart(metrics['sales_by_category']),
        'top_products': charts.top_products_chart(metrics['top_products']),
        'daily_sales': charts.daily_sales_chart(metrics['daily_sales']),
        'ages': charts.pie_chart(metrics['age_distribution']),
    }
    return render_template('descriptive.html', metrics=metrics, figures=figures)


@app.route('/analytics/predictive', methods=['GET'])
def predictive_page():
    metrics = predictive.forecast(load_snapshot())
    figures = {
        'forecast': charts.sales_forecast_chart(metrics['historical_sales'], metrics['predictions']),
        'demand': charts.demand_chart(metrics['product_demand']),
        'spending': charts.customer_spending_chart(metrics['customer_projections']),
    }
    return render_template('predictive.html', metrics=metrics, figures=figures)


@app.route('/analytics/prescriptive', methods=['GET'])
def prescriptive_page():
    metrics = prescriptive.recommend(load_snapshot())
    return render_template('prescriptive.html', metrics=metrics)

# ============================================================================
# RECORD BROWSER
# ============================================================================

def form_fields(records):
    """Form inputs mirroring the first record's fields (except id)"""
    if not records:
        return []
    fields = []
    for key, value in records[0].items():
        if key == 'id':
            continue
        is_number = isinstance(value, (int, float)) and not isinstance(value, bool)
        fields.append({'key': key, 'type': 'number' if is_number else 'text'})
    return fields


def build_payload(fields, form):
    """Collect non-empty form values, converting numeric fields"""
    payload = {}
    for field in fields:
        raw = form.get(field['key'], '').strip()
        if raw == '':
            continue
        if field['type'] == 'number':
            value = numeric_id(raw)
            if value is None:
                raise ValueError(f"{field['key']} must be a number.")
            payload[field['key']] = value
        else:
            payload[field['key']] = raw
    return payload


@app.route('/database', methods=['GET'])
def database_page():
    active = request.args.get('collection', 'products')
    if not is_collection_name(active):
        active = 'products'

    snapshot = load_snapshot()
    records = get_database().get_collection(active)
    headers = list(records[0].keys()) if records else []
    return render_template(
        'database.html',
        collections=COLLECTIONS,
        labels=COLLECTION_LABELS,
        counts={name: len(snapshot[name]) for name in COLLECTIONS},
        active=active,
        records=records,
        headers=headers,
        fields=form_fields(records),
    )


@app.route('/database/<collection>', methods=['POST'])
def database_create(collection):
    if not is_collection_name(collection):
        return unknown_collection_response(collection)

    database = get_database()
    fields = form_fields(database.get_collection(collection))
    if not fields:
        flash('No sample data available for this table, please add a record via JSON.', 'error')
        return redirect(url_for('database_page', collection=collection))

    try:
        payload = build_payload(fields, request.form)
    except ValueError as e:
        flash(str(e), 'error')
        return redirect(url_for('database_page', collection=collection))

    if not payload:
        flash('Fill in at least one field.', 'error')
        return redirect(url_for('database_page', collection=collection))

    try:
        database.add_record(collection, payload)
    except CapacityExceededError as e:
        logger.warning('Rejected insert into %s: %s', collection, e)
        flash(str(e), 'error')
    else:
        flash('Record saved.', 'success')
    return redirect(url_for('database_page', collection=collection))


@app.route('/database/<collection>/<record_id>/delete', methods=['POST'])
def database_delete(collection, record_id):
    if not is_collection_name(collection):
        return unknown_collection_response(collection)

    parsed_id = numeric_id(record_id)
    if parsed_id is not None and get_database().remove_record(collection, parsed_id):
        flash(f'Record {record_id} deleted.', 'success')
    else:
        flash(f'No record found in {collection} with id {record_id}', 'error')
    return redirect(url_for('database_page', collection=collection))

# ============================================================================
# SYSTEM
# ============================================================================

@app.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint"""
    return jsonify({
        'status': 'CloudBurst dashboard is running',
        'endpoints': {
            'snapshot': '/api/data',
            'collection': '/api/<collection>',
            'record': '/api/<collection>/<id>',
            'descriptive': '/api/analytics/descriptive',
            'predictive': '/api/analytics/predictive',
            'prescriptive': '/api/analytics/prescriptive',
        },
        'collections': list(COLLECTIONS)
    })

# ============================================================================
# MAIN APPLICATION
# ============================================================================

if __name__ == '__main__':
    logger.info('Starting CloudBurst shop dashboard on http://127.0.0.1:%s', app.config['PORT'])
    logger.info('Database: %s', app.config['DATABASE_PATH'])
    app.run(host='127.0.0.1', port=app.config['PORT'])
