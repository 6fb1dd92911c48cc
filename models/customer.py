from models import db
from datetime import datetime

class Customer(db.Model):
    __tablename__ = 'customers'
    # store_code + name + phone identify a customer
    __table_args__ = (
        db.UniqueConstraint('store_code', 'name', 'phone', name='uq_customer_identity'),
    )
    id = db.Column(db.Integer, primary_key=True)
    store_code = db.Column(db.String(64), nullable=False)
    name = db.Column(db.String(128), nullable=False)
    phone = db.Column(db.String(32), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    # العلاقات
    scans = db.relationship('Scan', backref='customer', lazy=True, cascade='all, delete-orphan')

    def __repr__(self):
        return f'<Customer {self.id}: {self.name} ({self.phone})>'
