from typing import Optional, List
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import select, or_
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from app.crud.base import CRUDBase
from app.models.document import (
    Document,
    DocumentCategory,
    DocumentPermission,
    DocumentTag,
    DocumentTagRelation,
    PermissionRole,
)
from app.schemas.document import DocumentCreate, DocumentUpdate, DocumentFilter

_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class CRUDDocument(CRUDBase[Document, DocumentCreate, DocumentUpdate]):
    """
    CRUD operations for Document model and its tag/permission rows.
    """

    def get(self, db: Session, id: int) -> Optional[Document]:
        stmt = (
            select(Document)
            .where(Document.id == id)
            .options(selectinload(Document.tag_links), selectinload(Document.permissions))
        )
        result = db.execute(stmt)
        return result.unique().scalar_one_or_none()

    def get_filtered(self, db: Session, *, filters: DocumentFilter) -> List[Document]:
        """
        List documents matching all given filters, newest first.

        Documents without a tenant are shared and always pass the tenant
        filter. The tag filter keeps documents carrying any of the tags.
        """
        stmt = select(Document).options(selectinload(Document.tag_links))

        if filters.tenant_id is not None:
            stmt = stmt.where(or_(Document.tenant_id == filters.tenant_id, Document.tenant_id.is_(None)))

        if filters.category_id is not None:
            stmt = stmt.where(Document.category_id == filters.category_id)

        if filters.is_confidential is not None:
            stmt = stmt.where(Document.is_confidential.is_(filters.is_confidential))

        if filters.tags:
            tagged = (
                select(DocumentTagRelation.document_id)
                .join(DocumentTag, DocumentTagRelation.tag_id == DocumentTag.id)
                .where(DocumentTag.name.in_(filters.tags))
            )
            stmt = stmt.where(Document.id.in_(tagged))

        stmt = stmt.order_by(Document.upload_date.desc(), Document.id.desc())
        result = db.execute(stmt)
        return list(result.unique().scalars().all())

    def upsert_tag(self, db: Session, *, name: str) -> int:
        """
        Insert a tag by name unless it exists, return its ID either way.
        """
        insert_fn = _UPSERT_INSERTS.get(db.get_bind().dialect.name)
        if insert_fn is not None:
            stmt = insert_fn(DocumentTag).values(name=name).on_conflict_do_nothing(index_elements=["name"])
            db.execute(stmt)
        elif db.execute(select(DocumentTag.id).where(DocumentTag.name == name)).first() is None:
            db.add(DocumentTag(name=name))
            db.flush()
        return db.execute(select(DocumentTag.id).where(DocumentTag.name == name)).scalar_one()

    def set_tags(self, db: Session, *, db_obj: Document, names: List[str]) -> Document:
        """
        Replace the tag relations of a document with the given tag names.
        """
        db_obj.tag_links.clear()
        db.flush()
        for name in names:
            tag_id = self.upsert_tag(db, name=name)
            db_obj.tag_links.append(DocumentTagRelation(tag_id=tag_id))
        db.flush()
        return db_obj

    def seed_permissions(self, db: Session, *, db_obj: Document) -> Document:
        """
        Create the default role permissions of a new document.

        Admins have full access, managers may view and edit, tenants may
        only view and only when the document is not confidential.
        """
        db_obj.permissions.extend([
            DocumentPermission(role_type=PermissionRole.admin,
                               can_view=True, can_edit=True, can_delete=True),
            DocumentPermission(role_type=PermissionRole.manager,
                               can_view=True, can_edit=True, can_delete=False),
            DocumentPermission(role_type=PermissionRole.tenant,
                               can_view=not db_obj.is_confidential, can_edit=False, can_delete=False),
        ])
        db.flush()
        return db_obj

    def sync_tenant_visibility(self, db: Session, *, db_obj: Document) -> Document:
        for permission in db_obj.permissions:
            if permission.role_type == PermissionRole.tenant:
                permission.can_view = not db_obj.is_confidential
        db.flush()
        return db_obj

    def delete_with_relations(self, db: Session, *, db_obj: Document) -> None:
        """
        Delete a document row together with its tag relations and permissions.

        Both collections cascade, so the dependent rows are deleted before
        the document row within the same flush.
        """
        db.delete(db_obj)
        db.flush()


class CRUDDocumentCategory(CRUDBase[DocumentCategory, DocumentCreate, DocumentUpdate]):
    """
    CRUD operations for DocumentCategory model.
    """

    def get_multi_by_name(self, db: Session) -> List[DocumentCategory]:
        stmt = select(DocumentCategory).order_by(DocumentCategory.name)
        result = db.execute(stmt)
        return list(result.scalars().all())


# Create singleton instances
document = CRUDDocument(Document)
document_category = CRUDDocumentCategory(DocumentCategory)
