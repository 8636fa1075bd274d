from fastapi import APIRouter, Depends
from fastapi.responses import Response

from itemlister.api.dependencies import get_services
from itemlister.api.schemas import BookExportRequest, CardExportRequest, CompactRequest
from itemlister.api.services import Services
from itemlister.export.exporter import RecordExporter

card_export_router = APIRouter(prefix="/api/export", tags=["export"])
book_export_router = APIRouter(prefix="/api/book-export", tags=["export"])


def _csv_response(exporter: RecordExporter, record_id: str) -> Response:
    filename, content = exporter.to_csv(record_id)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@card_export_router.post("/csv")
def export_card_csv(body: CardExportRequest, services: Services = Depends(get_services)) -> Response:
    return _csv_response(services.cards.exporter, body.card_id)


@card_export_router.post("/sheets")
def export_card_sheets(body: CardExportRequest, services: Services = Depends(get_services)) -> dict:
    result = services.cards.exporter.to_sheet(body.card_id, body.spreadsheet_id, body.sheet_name)
    return {"message": "Data exported to Google Sheets successfully", **result.to_dict()}


@card_export_router.post("/sheets/compact")
def compact_card_sheet(body: CompactRequest, services: Services = Depends(get_services)) -> dict:
    removed = services.cards.exporter.compact(body.spreadsheet_id, body.sheet_name)
    return {"message": f"Removed {removed} blank row(s)", "removed": removed}


@book_export_router.post("/csv")
def export_book_csv(body: BookExportRequest, services: Services = Depends(get_services)) -> Response:
    return _csv_response(services.books.exporter, body.book_id)


@book_export_router.post("/sheets")
def export_book_sheets(body: BookExportRequest, services: Services = Depends(get_services)) -> dict:
    result = services.books.exporter.to_sheet(body.book_id, body.spreadsheet_id, body.sheet_name)
    return {"message": "Book data exported to Google Sheets successfully", **result.to_dict()}
