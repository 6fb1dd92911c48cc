"""Customers, their scans, flat records, and the images attached to them."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import Customer, Record, Scan
from .errors import NotFoundError, StorageIOError, ValidationError
from .image_store import DEFAULT_EXTENSION, ImageStore

logger = logging.getLogger(__name__)


def _require(**fields):
    missing = [name for name, value in fields.items() if value is None or not str(value).strip()]
    if missing:
        raise ValidationError(f"Missing required field(s): {', '.join(missing)}")


class RecordStore:
    """Persists customers and scans (or flat records) and their images.

    Rows go through the Flask-SQLAlchemy session, images through an
    ImageStore. Must be used inside an application context.
    """

    def __init__(self, db, images: ImageStore):
        self.db = db
        self.images = images

    @property
    def session(self):
        return self.db.session

    # ------------------------------------------------------------------
    # Customers
    # ------------------------------------------------------------------

    def find_or_create_customer(self, store_code: str, name: str, phone: str) -> int:
        """Return the id of the customer with this exact identity, creating it if needed.

        The match is exact and case-sensitive. If a concurrent request
        created the same customer first, the unique constraint rejects our
        insert and the existing row is returned instead.
        """
        _require(store_code=store_code, name=name, phone=phone)

        customer = self._find_customer(store_code, name, phone)
        if customer:
            return customer.id

        try:
            customer = Customer(store_code=store_code, name=name, phone=phone,
                                created_at=datetime.utcnow())
            self.session.add(customer)
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            customer = self._find_customer(store_code, name, phone)
            if customer is None:
                raise
            return customer.id

        logger.info(f"Created customer {customer.id} ({store_code}/{name}/{phone})")
        return customer.id

    def _find_customer(self, store_code, name, phone) -> Optional[Customer]:
        return Customer.query.filter(
            Customer.store_code == store_code,
            Customer.name == name,
            Customer.phone == phone,
        ).first()

    def get_customer(self, customer_id: int) -> Optional[Customer]:
        return self.session.get(Customer, customer_id)

    def list_customers(self) -> list[tuple[Customer, int]]:
        """All customers, newest first, each paired with its scan count."""
        rows = (
            self.session.query(Customer, func.count(Scan.id))
            .outerjoin(Scan, Scan.customer_id == Customer.id)
            .group_by(Customer.id)
            .order_by(Customer.created_at.desc(), Customer.id.desc())
            .all()
        )
        return [(customer, count) for customer, count in rows]

    def delete_customer(self, customer_id: int) -> bool:
        """Delete a customer together with its scans and their images.

        Rows are removed in one commit; image files are removed afterwards.
        Returns False if the customer does not exist.
        """
        customer = self.get_customer(customer_id)
        if customer is None:
            return False

        scan_count = len(customer.scans)
        image_paths = [scan.image_path for scan in customer.scans if scan.image_path]
        self.session.delete(customer)
        self.session.commit()
        logger.info(f"Deleted customer {customer_id} with {scan_count} scan(s)")

        for image_path in image_paths:
            self._discard_image(image_path)
        return True

    # ------------------------------------------------------------------
    # Scans
    # ------------------------------------------------------------------

    def record_scan(self, customer_id: int, barcode: str, image_bytes: Optional[bytes] = None,
                    image_extension: str = DEFAULT_EXTENSION) -> int:
        """Insert a scan for a customer, storing the image first if one is given.

        Raises:
            ValidationError: If the barcode is empty.
            NotFoundError: If the customer does not exist.
            StorageIOError: If the image cannot be written. No row is inserted.
        """
        _require(barcode=barcode)
        if self.get_customer(customer_id) is None:
            raise NotFoundError(f"Customer {customer_id} not found")

        image_path = self._store_image(image_bytes, image_extension)
        scan = Scan(customer_id=customer_id, barcode=barcode, image_path=image_path,
                    scanned_at=datetime.utcnow())
        self._insert(scan, image_path)

        logger.info(f"Recorded scan {scan.id} ({barcode}) for customer {customer_id}")
        return scan.id

    def list_scans(self, customer_id: int) -> list[Scan]:
        """Scans of a customer, newest first. Unknown customers have none."""
        return (
            Scan.query.filter_by(customer_id=customer_id)
            .order_by(Scan.scanned_at.desc(), Scan.id.desc())
            .all()
        )

    def list_all_scans(self) -> list[Scan]:
        return Scan.query.order_by(Scan.scanned_at.desc(), Scan.id.desc()).all()

    def delete_scan(self, scan_id: int) -> bool:
        """Delete a scan row, then its image file.

        A leftover file is harmless, a row pointing at a missing file is not,
        so the row goes first. Returns False if the scan does not exist.
        """
        scan = self.session.get(Scan, scan_id)
        if scan is None:
            return False

        image_path = scan.image_path
        self.session.delete(scan)
        self.session.commit()
        logger.info(f"Deleted scan {scan_id}")

        self._discard_image(image_path)
        return True

    # ------------------------------------------------------------------
    # Flat records
    # ------------------------------------------------------------------

    def add_flat_record(self, timestamp: Optional[datetime], store_code: Optional[str], name: str,
                        phone: str, barcode: str, image_bytes: Optional[bytes] = None,
                        image_extension: str = DEFAULT_EXTENSION) -> int:
        """Insert a self-contained record. No customer lookup is done."""
        _require(name=name, phone=phone, barcode=barcode)

        image_path = self._store_image(image_bytes, image_extension)
        record = Record(
            timestamp=timestamp or datetime.utcnow(),
            store_code=store_code or None,
            name=name,
            phone=phone,
            barcode=barcode,
            image_path=image_path,
        )
        self._insert(record, image_path)

        logger.info(f"Added record {record.id} ({barcode})")
        return record.id

    def list_records(self) -> list[Record]:
        return Record.query.order_by(Record.timestamp.desc(), Record.id.desc()).all()

    def delete_record(self, record_id: int) -> bool:
        record = self.session.get(Record, record_id)
        if record is None:
            return False

        image_path = record.image_path
        self.session.delete(record)
        self.session.commit()
        logger.info(f"Deleted record {record_id}")

        self._discard_image(image_path)
        return True

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def image_path_for(self, relative_path: str) -> Path:
        return self.images.resolve(relative_path)

    def _store_image(self, image_bytes: Optional[bytes], extension: str) -> Optional[str]:
        if not image_bytes:
            return None
        return self.images.save(image_bytes, extension)

    def _insert(self, row, image_path: Optional[str]) -> None:
        # the image is already on disk; remove it again if the row can't be saved
        try:
            self.session.add(row)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            if image_path:
                self._discard_image(image_path)
            raise

    def _discard_image(self, image_path: Optional[str]) -> None:
        if not image_path:
            return
        try:
            self.images.delete(image_path)
        except (StorageIOError, ValidationError) as e:
            logger.warning(f"Orphaned image {image_path} left on disk: {e}")


def get_record_store() -> RecordStore:
    """The RecordStore of the current application."""
    return current_app.extensions["record_store"]
