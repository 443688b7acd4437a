from sqlalchemy import Column, Integer, String, Boolean, Date, ForeignKey, Index, text
from sqlalchemy.orm import relationship
from app.database import Base, TimestampMixin

class Tenant(Base, TimestampMixin):
    __tablename__ = "tenants"
    __table_args__ = (
        # At most one active tenant per unit
        Index(
            "uq_tenants_active_unit",
            "unit_id",
            unique=True,
            postgresql_where=text("active"),
            sqlite_where=text("active"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    address = Column(String, nullable=True)
    unit_id = Column(Integer, ForeignKey("units.id", ondelete="SET NULL"), nullable=True)
    rent_start_date = Column(Date, nullable=True)
    rent_end_date = Column(Date, nullable=True)
    active = Column(Boolean, nullable=False, default=True)

    unit = relationship("Unit")

    @property
    def unit_name(self):
        return self.unit.name if self.unit else None

    @property
    def unit_type(self):
        return self.unit.type if self.unit else None

    @property
    def property_address(self):
        if self.unit and self.unit.property:
            return self.unit.property.address
        return None

    @property
    def property_type(self):
        if self.unit and self.unit.property:
            return self.unit.property.property_type
        return None
