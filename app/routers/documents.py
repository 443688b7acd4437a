import json
from urllib.parse import quote
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import Response
from sqlalchemy.orm import Session
from typing import List, Optional
from app.database import get_db
from app.schemas.common import MessageResponse
from app.schemas.document import (
    DocumentCategoryResponse,
    DocumentCreate,
    DocumentCreatedResponse,
    DocumentFilter,
    DocumentResponse,
    DocumentUpdate,
)
from app.services.document import document_service
from app.core.config import settings
from app.core.exceptions import InvalidInputError, PayloadTooLargeError, UnsupportedPreviewError
from app.core.logging_config import logger

router = APIRouter()


def _optional_int(value: Optional[str]) -> Optional[int]:
    """Query ids that are not numeric are ignored."""
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _parse_tags(raw: Optional[str]) -> List[str]:
    if raw is None or not raw.strip():
        return []
    try:
        tags = json.loads(raw)
    except ValueError as e:
        raise InvalidInputError("Ungültige Tags") from e
    if not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags):
        raise InvalidInputError("Ungültige Tags")
    return tags


def _content_disposition(disposition: str, filename: str) -> str:
    try:
        filename.encode("latin-1")
        escaped = filename.replace("\\", "\\\\").replace('"', '\\"')
        return f'{disposition}; filename="{escaped}"'
    except UnicodeEncodeError:
        return f"{disposition}; filename*=UTF-8''{quote(filename)}"


@router.get("", response_model=List[DocumentResponse])
def get_documents(
    tenant_id: Optional[str] = Query(None, alias="tenantId"),
    category_id: Optional[str] = Query(None, alias="categoryId"),
    is_confidential: Optional[str] = Query(None, alias="isConfidential"),
    tags: Optional[str] = Query(None, description="Comma-separated tag names"),
    db: Session = Depends(get_db)
):
    """
    Retrieve documents, newest first.

    Documents that belong to no tenant are listed for every tenant filter.

    Args:
        tenant_id: Only documents of this tenant (plus general documents)
        category_id: Only documents of this category
        is_confidential: "true" or "false"
        tags: Documents carrying at least one of these tags
        db: Database session

    Returns:
        List of documents
    """
    confidential = None
    if is_confidential in ("true", "false"):
        confidential = is_confidential == "true"

    filters = DocumentFilter(
        tenant_id=_optional_int(tenant_id),
        category_id=_optional_int(category_id),
        is_confidential=confidential,
        tags=[tag.strip() for tag in tags.split(",") if tag.strip()] if tags else None,
    )
    return document_service.get_documents(db=db, filters=filters)


# Must stay above "/{document_id}"
@router.get("/categories", response_model=List[DocumentCategoryResponse])
def get_categories(db: Session = Depends(get_db)):
    return document_service.get_categories(db=db)


@router.get("/{document_id}", response_model=DocumentResponse)
def get_document(document_id: int, db: Session = Depends(get_db)):
    return document_service.get_document(db=db, document_id=document_id)


@router.post("", response_model=DocumentCreatedResponse, status_code=status.HTTP_201_CREATED)
def upload_document(
    file: UploadFile = File(...),
    category_id: int = Form(..., alias="categoryId"),
    tenant_id: Optional[str] = Form(None, alias="tenantId"),
    description: Optional[str] = Form(None),
    is_confidential: Optional[str] = Form(None, alias="isConfidential"),
    created_by: Optional[str] = Form(None, alias="createdBy"),
    tags: Optional[str] = Form(None, description="JSON array of tag names"),
    db: Session = Depends(get_db)
):
    """
    Upload a document (multipart form).

    Args:
        file: Uploaded file
        category_id: Document category
        tenant_id: Owning tenant, empty for general documents
        description: Free text
        is_confidential: "true" marks the document confidential
        created_by: Author, defaults to "system"
        tags: JSON array of tag names
        db: Database session

    Returns:
        ID of the created document

    Raises:
        PayloadTooLargeError 413: If the file exceeds the upload limit
    """
    content = file.file.read(settings.MAX_UPLOAD_SIZE + 1)
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise PayloadTooLargeError("Datei ist zu groß")

    parsed_tenant_id = None
    if tenant_id is not None and tenant_id.strip():
        parsed_tenant_id = _optional_int(tenant_id)
        if parsed_tenant_id is None:
            raise InvalidInputError("Ungültige Mieter-ID")

    document_data = DocumentCreate(
        category_id=category_id,
        tenant_id=parsed_tenant_id,
        description=description or None,
        is_confidential=is_confidential == "true",
        created_by=created_by or "system",
        tags=_parse_tags(tags),
    )

    try:
        logger.info(f"Uploading document: filename={file.filename}, size={len(content)}, tenant_id={parsed_tenant_id}")
        result = document_service.create_document(
            db=db,
            content=content,
            original_filename=file.filename or "upload",
            mime_type=file.content_type or "application/octet-stream",
            document_data=document_data
        )
        logger.info(f"Document uploaded successfully: id={result.id}")
        return {"id": result.id}
    except Exception as e:
        logger.error(f"Error uploading document: {type(e).__name__}: {str(e)}")
        raise


@router.put("/{document_id}", response_model=DocumentResponse)
def update_document(
    document_id: int,
    document_data: DocumentUpdate,
    db: Session = Depends(get_db)
):
    """
    Partially update a document. Submitted tags replace the existing ones.

    Raises:
        NotFoundError 404: If document not found
    """
    try:
        logger.info(f"Updating document: id={document_id}")
        result = document_service.update_document(db=db, document_id=document_id, document_data=document_data)
        logger.info(f"Document updated successfully: id={document_id}")
        return result
    except Exception as e:
        logger.error(f"Error updating document {document_id}: {type(e).__name__}: {str(e)}")
        raise


@router.get("/{document_id}/preview")
def preview_document(document_id: int, db: Session = Depends(get_db)):
    """
    Return the document inline. Only images and PDFs can be previewed.

    Raises:
        UnsupportedPreviewError 415: For any other file type
    """
    document = document_service.get_document(db=db, document_id=document_id)
    if not (document.mime_type.startswith("image/") or document.mime_type == "application/pdf"):
        raise UnsupportedPreviewError("Vorschau für diesen Dateityp nicht verfügbar")

    document, content = document_service.get_document_with_content(db=db, document_id=document_id)
    return Response(
        content=content,
        media_type=document.mime_type,
        headers={"Content-Disposition": _content_disposition("inline", document.original_filename)},
    )


@router.get("/{document_id}/download")
def download_document(document_id: int, db: Session = Depends(get_db)):
    document, content = document_service.get_document_with_content(db=db, document_id=document_id)
    return Response(
        content=content,
        media_type=document.mime_type,
        headers={"Content-Disposition": _content_disposition("attachment", document.original_filename)},
    )


@router.delete("/{document_id}", response_model=MessageResponse)
def delete_document(document_id: int, db: Session = Depends(get_db)):
    """
    Delete a document with its tags, permissions and stored file.
    """
    try:
        logger.info(f"Deleting document: id={document_id}")
        document_service.delete_document(db=db, document_id=document_id)
        return {"message": "Dokument erfolgreich gelöscht"}
    except Exception as e:
        logger.error(f"Error deleting document {document_id}: {type(e).__name__}: {str(e)}")
        raise
