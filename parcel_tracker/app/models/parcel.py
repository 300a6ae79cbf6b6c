"""
Parcel database model.

One row per shipment; the store maps rows to the Parcel schema.
"""

from sqlalchemy import Column, Integer, String, Enum
from parcel_tracker.app.db.session import Base
from parcel_tracker.app.models.parcel_enums import ParcelStatus


class ParcelRecord(Base):
    """
    Persisted parcel row.
    
    Status is stored as its lowercase string value, created_at as the
    RFC3339 string supplied by the caller.
    """
    __tablename__ = "parcel"
    # Numbers of deleted parcels are never handed out again on SQLite
    __table_args__ = {"sqlite_autoincrement": True}

    number = Column(Integer, primary_key=True, autoincrement=True)
    
    # Ownership - not enforced by a foreign key
    client = Column(Integer, nullable=False, index=True)
    
    status = Column(
        Enum(
            ParcelStatus,
            native_enum=False,
            length=16,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        default=ParcelStatus.REGISTERED,
        nullable=False,
    )
    address = Column(String, nullable=False)
    created_at = Column(String(64), nullable=False)
    
    def __repr__(self):
        return f"<ParcelRecord(number={self.number}, client={self.client}, status='{self.status}')>"
