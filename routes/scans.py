import io
import logging

import pandas as pd
from flask import Blueprint, render_template, redirect, url_for, jsonify, send_file
from forms.scan_forms import ScanForm
from services import get_record_store, decode_data_url
from services.image_store import extension_for

logger = logging.getLogger(__name__)

scans_bp = Blueprint('scans', __name__)

@scans_bp.route('/')
def index():
    store = get_record_store()
    customers = store.list_customers()
    return render_template('scans/index.html', title='Customer Barcode Scanner', customers=customers)

@scans_bp.route('/scans/<int:customer_id>')
def customer_scans(customer_id):
    store = get_record_store()
    scans = store.list_scans(customer_id)
    return render_template('scans/_scan_list.html', scans=scans, customer=store.get_customer(customer_id))

@scans_bp.route('/scan', methods=['POST'])
def submit_scan():
    form = ScanForm()
    if not form.validate_on_submit():
        return jsonify({'success': False, 'message': 'Store, name, phone and barcode are required',
                        'errors': form.errors}), 400

    store = get_record_store()
    image_bytes = decode_data_url(form.image.data)
    customer_id = store.find_or_create_customer(form.store.data, form.name.data, form.phone.data)
    scan_id = store.record_scan(customer_id, form.barcode.data, image_bytes,
                                image_extension=extension_for(form.image.data))
    return jsonify({'success': True, 'customer_id': customer_id, 'scan_id': scan_id})

@scans_bp.route('/delete-scan/<int:scan_id>')
def delete_scan(scan_id):
    if not get_record_store().delete_scan(scan_id):
        logger.info(f"Scan {scan_id} already gone")
    return redirect(url_for('scans.index'))

@scans_bp.route('/delete-customer/<int:customer_id>')
def delete_customer(customer_id):
    if not get_record_store().delete_customer(customer_id):
        logger.info(f"Customer {customer_id} already gone")
    return redirect(url_for('scans.index'))

@scans_bp.route('/export')
def export_scans():
    scans = get_record_store().list_all_scans()
    data = [{
        'Store': s.customer.store_code,
        'Name': s.customer.name,
        'Phone': s.customer.phone,
        'Barcode': s.barcode,
        'Image': s.image_path or '',
        'Scanned at': s.scanned_at.strftime('%Y-%m-%d %H:%M:%S')
    } for s in scans]
    df = pd.DataFrame(data, columns=['Store', 'Name', 'Phone', 'Barcode', 'Image', 'Scanned at'])
    buffer = io.BytesIO()
    df.to_excel(buffer, index=False, sheet_name='Scans')
    buffer.seek(0)
    return send_file(buffer, as_attachment=True, download_name='scans_export.xlsx',
                     mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet')
