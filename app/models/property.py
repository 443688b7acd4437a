import enum
from decimal import Decimal
from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, Enum
from sqlalchemy.orm import relationship
from app.database import Base, TimestampMixin

class UnitStatus(str, enum.Enum):
    verfuegbar = "verfügbar"
    besetzt = "besetzt"

class Property(Base, TimestampMixin):
    __tablename__ = "properties"

    id = Column(Integer, primary_key=True, index=True)
    address = Column(String, nullable=False)
    property_type = Column(String, nullable=False)

    units = relationship(
        "Unit",
        back_populates="property",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Unit.id",
    )

    @property
    def total_rent(self) -> Decimal:
        """Sum of the rent of all occupied units."""
        return sum(
            (unit.rent or Decimal("0") for unit in self.units if unit.status == UnitStatus.besetzt),
            Decimal("0"),
        )

class Unit(Base, TimestampMixin):
    __tablename__ = "units"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    size = Column(Numeric(10, 2), nullable=False, default=0)
    status = Column(
        Enum(UnitStatus, name="unit_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=UnitStatus.verfuegbar,
    )
    rent = Column(Numeric(10, 2), nullable=False, default=0)

    property = relationship("Property", back_populates="units")
