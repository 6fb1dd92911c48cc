from models import db
from datetime import datetime

class Scan(db.Model):
    __tablename__ = 'scans'
    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(db.Integer, db.ForeignKey('customers.id'), nullable=False, index=True)
    barcode = db.Column(db.String(255), nullable=False)
    image_path = db.Column(db.String(255), nullable=True)  # relative to IMAGE_FOLDER
    scanned_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<Scan {self.id}: {self.barcode}>'
