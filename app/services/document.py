from typing import List, Tuple
from sqlalchemy.orm import Session
from app.crud import document as document_crud, document_category as category_crud, tenant as tenant_crud
from app.core.config import settings
from app.core.exceptions import AppError, InvalidInputError, NotFoundError
from app.core.logging_config import logger
from app.core.transaction import transaction
from app.models.document import Document, DocumentCategory
from app.schemas.document import DocumentCreate, DocumentUpdate, DocumentFilter
from app.services.storage import DocumentStorage


class DocumentService:
    """
    Service layer for documents, their tags, permissions and stored bytes.

    Writing a document touches the database and the filesystem. The bytes
    are staged next to their final location, the metadata is committed,
    and only then is the staged file moved into place. A committed row
    whose file cannot be promoted is removed again.
    """

    def __init__(self, storage: DocumentStorage):
        self.crud = document_crud
        self.category_crud = category_crud
        self.tenant_crud = tenant_crud
        self.storage = storage

    def get_document(self, db: Session, document_id: int) -> Document:
        """
        Get document metadata.

        Raises:
            NotFoundError: If document not found
        """
        document = self.crud.get(db=db, id=document_id)

        if not document:
            raise NotFoundError(f"Dokument {document_id} nicht gefunden")

        return document

    def get_document_with_content(self, db: Session, document_id: int) -> Tuple[Document, bytes]:
        """
        Get document metadata together with the stored file bytes.

        Raises:
            NotFoundError: If document not found
            StorageError: If the file cannot be read
        """
        document = self.get_document(db=db, document_id=document_id)
        content = self.storage.read(document.file_path)
        return document, content

    def get_documents(self, db: Session, filters: DocumentFilter) -> List[Document]:
        return self.crud.get_filtered(db=db, filters=filters)

    def get_categories(self, db: Session) -> List[DocumentCategory]:
        return self.category_crud.get_multi_by_name(db=db)

    def create_document(
        self,
        db: Session,
        *,
        content: bytes,
        original_filename: str,
        mime_type: str,
        document_data: DocumentCreate
    ) -> Document:
        """
        Store an uploaded file and its metadata.

        Args:
            db: Database session
            content: File bytes
            original_filename: Name of the file as uploaded
            mime_type: Content type reported by the client
            document_data: Category, tenant, description, flags and tags

        Returns:
            Created Document instance

        Raises:
            InvalidInputError: If category or tenant do not exist
            StorageError: If the file cannot be written
            WriteError: If the metadata cannot be stored
        """
        if not self.category_crud.get(db=db, id=document_data.category_id):
            raise InvalidInputError("Kategorie nicht gefunden")
        if document_data.tenant_id is not None and not self.tenant_crud.get(db=db, id=document_data.tenant_id):
            raise InvalidInputError("Mieter nicht gefunden")

        filename = self.storage.build_filename(original_filename)
        file_path = self.storage.relative_path(filename, document_data.tenant_id)
        staged = self.storage.stage(file_path, content)

        try:
            with transaction(db, "Fehler beim Hochladen des Dokuments"):
                document = self.crud.create(
                    db=db,
                    obj_in={
                        "filename": filename,
                        "original_filename": original_filename,
                        "mime_type": mime_type,
                        "file_size": len(content),
                        "category_id": document_data.category_id,
                        "tenant_id": document_data.tenant_id,
                        "description": document_data.description,
                        "is_confidential": document_data.is_confidential,
                        "created_by": document_data.created_by,
                        "file_path": file_path,
                    }
                )
                self.crud.set_tags(db=db, db_obj=document, names=document_data.tags)
                self.crud.seed_permissions(db=db, db_obj=document)
        except Exception:
            self.storage.discard(staged)
            raise

        document_id = document.id
        try:
            self.storage.promote(staged, file_path)
        except AppError:
            self.storage.discard(staged)
            self._remove_orphan_row(db, document_id)
            raise

        logger.info(f"Stored document {document_id} at {file_path}")
        return self.get_document(db=db, document_id=document_id)

    def update_document(self, db: Session, document_id: int, document_data: DocumentUpdate) -> Document:
        """
        Partially update a document.

        Only fields present in the request are written. Supplied tags
        replace the whole tag set; the tenant view permission follows the
        confidentiality flag.

        Raises:
            NotFoundError: If document not found
            InvalidInputError: If the new category does not exist
        """
        update_data = document_data.model_dump(exclude_unset=True, exclude={"tags"})
        for field in ("category_id", "is_confidential"):
            if field in update_data and update_data[field] is None:
                raise InvalidInputError(f"Ungültige Eingabe: {field}")

        with transaction(db, "Fehler beim Aktualisieren des Dokuments"):
            document = self.crud.get(db=db, id=document_id)
            if not document:
                raise NotFoundError(f"Dokument {document_id} nicht gefunden")

            if "category_id" in update_data and not self.category_crud.get(db=db, id=update_data["category_id"]):
                raise InvalidInputError("Kategorie nicht gefunden")

            if update_data:
                self.crud.update(db=db, db_obj=document, obj_in=update_data)
            if "is_confidential" in update_data:
                self.crud.sync_tenant_visibility(db=db, db_obj=document)
            if document_data.tags is not None:
                self.crud.set_tags(db=db, db_obj=document, names=document_data.tags)

        return self.get_document(db=db, document_id=document_id)

    def delete_document(self, db: Session, document_id: int) -> None:
        """
        Delete a document, its tag relations, permissions and stored file.

        The rows are removed first and the file afterwards, inside the same
        transaction. A file that is already gone fails the delete and the
        rows are kept.

        Raises:
            NotFoundError: If document not found
            StorageError: If the file cannot be removed
        """
        with transaction(db, "Fehler beim Löschen des Dokuments"):
            document = self.crud.get(db=db, id=document_id)
            if not document:
                raise NotFoundError(f"Dokument {document_id} nicht gefunden")

            file_path = document.file_path
            self.crud.delete_with_relations(db=db, db_obj=document)
            self.storage.delete(file_path)

    def _remove_orphan_row(self, db: Session, document_id: int) -> None:
        with transaction(db, "Fehler beim Hochladen des Dokuments"):
            document = self.crud.get(db=db, id=document_id)
            if document:
                self.crud.delete_with_relations(db=db, db_obj=document)
        logger.warning(f"Removed document {document_id} after its file could not be stored")


# Create a singleton instance
document_service = DocumentService(DocumentStorage(settings.UPLOAD_DIR))
