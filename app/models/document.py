import enum
from sqlalchemy import Column, Integer, String, Boolean, BigInteger, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from app.database import Base

class PermissionRole(str, enum.Enum):
    admin = "admin"
    manager = "manager"
    tenant = "tenant"

class DocumentCategory(Base):
    __tablename__ = "document_categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    description = Column(String, nullable=True)

class DocumentTag(Base):
    __tablename__ = "document_tags"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)

class DocumentTagRelation(Base):
    __tablename__ = "document_tag_relations"

    document_id = Column(Integer, ForeignKey("documents.id", ondelete="CASCADE"), primary_key=True)
    tag_id = Column(Integer, ForeignKey("document_tags.id", ondelete="CASCADE"), primary_key=True)

    tag = relationship("DocumentTag", lazy="joined")

class DocumentPermission(Base):
    __tablename__ = "document_permissions"

    id = Column(Integer, primary_key=True, index=True)
    document_id = Column(Integer, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False, index=True)
    role_type = Column(Enum(PermissionRole, name="permission_role"), nullable=False)
    can_view = Column(Boolean, nullable=False, default=False)
    can_edit = Column(Boolean, nullable=False, default=False)
    can_delete = Column(Boolean, nullable=False, default=False)

class Document(Base):
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, index=True)
    filename = Column(String, nullable=False)
    original_filename = Column(String, nullable=False)
    mime_type = Column(String, nullable=False)
    file_size = Column(BigInteger, nullable=False)
    category_id = Column(Integer, ForeignKey("document_categories.id"), nullable=False)
    tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="SET NULL"), nullable=True, index=True)
    description = Column(String, nullable=True)
    is_confidential = Column(Boolean, nullable=False, default=False)
    created_by = Column(String, nullable=False, default="system")
    file_path = Column(String, nullable=False)
    upload_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    last_modified = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    category = relationship("DocumentCategory", lazy="joined")
    tenant = relationship("Tenant", lazy="joined")
    tag_links = relationship(
        "DocumentTagRelation",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    permissions = relationship(
        "DocumentPermission",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="DocumentPermission.id",
    )

    @property
    def category_name(self):
        return self.category.name if self.category else None

    @property
    def tags(self):
        return sorted(link.tag.name for link in self.tag_links if link.tag)
