# quotebroker/api/v1/quotes.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from quotebroker.core.auth_deps import get_current_principal
from quotebroker.core.config import Settings, get_settings
from quotebroker.db.session import get_db
from quotebroker.models.enums import CONTRACTOR_TYPES
from quotebroker.policies.rbac import Principal
from quotebroker.services.quotes_service import PDF_CONTENT_TYPE, QuotesService
from quotebroker.services.storage_service import LocalQuoteStorage, get_storage

router = APIRouter(prefix="/quotes")


@router.get("/contractor-types")
async def contractor_types():
    return {"items": list(CONTRACTOR_TYPES)}


@router.get("/{quote_id}/download")
def download_quote(
    quote_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    storage: LocalQuoteStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    quote, path = QuotesService(storage, settings.max_quote_file_bytes).get_download(
        db, quote_id=quote_id, viewer=principal
    )
    return FileResponse(path, media_type=PDF_CONTENT_TYPE, filename=quote.file_name)


@router.delete("/{quote_id}")
def delete_quote(
    quote_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    storage: LocalQuoteStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    QuotesService(storage, settings.max_quote_file_bytes).delete(
        db, quote_id=quote_id, caller=principal
    )
    return {"success": True}
