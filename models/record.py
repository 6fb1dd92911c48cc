from models import db
from datetime import datetime

# سجل مسطح: كل عملية مسح صف جديد بدون ربط بعميل
class Record(db.Model):
    __tablename__ = 'records'
    id = db.Column(db.Integer, primary_key=True)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    store_code = db.Column(db.String(64), nullable=True)
    name = db.Column(db.String(128), nullable=False)
    phone = db.Column(db.String(32), nullable=False)
    barcode = db.Column(db.String(255), nullable=False)
    image_path = db.Column(db.String(255), nullable=True)

    def __repr__(self):
        return f'<Record {self.id}: {self.barcode}>'
