import io
import logging

import pandas as pd
from flask import Blueprint, render_template, redirect, url_for, jsonify, send_file
from forms.scan_forms import RecordForm
from services import get_record_store, decode_data_url
from services.image_store import extension_for

logger = logging.getLogger(__name__)

# سجلات مسطحة: كل إرسال يضيف صفًا جديدًا
records_bp = Blueprint('records', __name__)

@records_bp.route('/')
def index():
    records = get_record_store().list_records()
    return render_template('records/index.html', title='Phone Barcode Scanner', records=records)

@records_bp.route('/add', methods=['POST'])
def add_record():
    form = RecordForm()
    if not form.validate_on_submit():
        return jsonify({'success': False, 'message': 'Name, phone and barcode are required',
                        'errors': form.errors}), 400

    image_bytes = decode_data_url(form.image.data)
    record_id = get_record_store().add_flat_record(
        form.timestamp.data,
        form.store.data,
        form.name.data,
        form.phone.data,
        form.barcode.data,
        image_bytes,
        image_extension=extension_for(form.image.data),
    )
    return jsonify({'success': True, 'record_id': record_id})

@records_bp.route('/delete/<int:record_id>')
def delete_record(record_id):
    if not get_record_store().delete_record(record_id):
        logger.info(f"Record {record_id} already gone")
    return redirect(url_for('records.index'))

@records_bp.route('/export')
def export_records():
    records = get_record_store().list_records()
    data = [{
        'Timestamp': r.timestamp.strftime('%Y-%m-%d %H:%M:%S'),
        'Store': r.store_code or '',
        'Name': r.name,
        'Phone': r.phone,
        'Barcode': r.barcode,
        'Image': r.image_path or ''
    } for r in records]
    df = pd.DataFrame(data, columns=['Timestamp', 'Store', 'Name', 'Phone', 'Barcode', 'Image'])
    buffer = io.BytesIO()
    df.to_excel(buffer, index=False, sheet_name='Records')
    buffer.seek(0)
    return send_file(buffer, as_attachment=True, download_name='records_export.xlsx',
                     mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet')
