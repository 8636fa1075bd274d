from fastapi import APIRouter, Depends

from itemlister.api.dependencies import get_services
from itemlister.api.schemas import RecordCreateRequest, RecordUpdateRequest
from itemlister.api.services import KindServices, Services
from itemlister.records.editing import apply_user_edit, create_from_partial

cards_router = APIRouter(prefix="/api/cards", tags=["cards"])
books_router = APIRouter(prefix="/api/books", tags=["books"])


def _create(kind: KindServices, body: RecordCreateRequest) -> dict:
    return create_from_partial(kind.store, body.model_dump(by_alias=True)).to_dict()


def _update(kind: KindServices, record_id: str, body: RecordUpdateRequest) -> dict:
    return apply_user_edit(
        kind.store,
        record_id,
        normalized=body.normalized,
        auto_title=body.auto_title,
        auto_description=body.auto_description,
    ).to_dict()


@cards_router.post("")
def create_card(body: RecordCreateRequest, services: Services = Depends(get_services)) -> dict:
    card = _create(services.cards, body)
    return {"cardId": card["id"], "card": card}


@cards_router.get("/{card_id}")
def get_card(card_id: str, services: Services = Depends(get_services)) -> dict:
    return services.cards.store.get(card_id).to_dict()


@cards_router.put("/{card_id}")
def update_card(card_id: str, body: RecordUpdateRequest, services: Services = Depends(get_services)) -> dict:
    return _update(services.cards, card_id, body)


@books_router.post("")
def create_book(body: RecordCreateRequest, services: Services = Depends(get_services)) -> dict:
    book = _create(services.books, body)
    return {"bookId": book["id"], "book": book}


@books_router.get("/{book_id}")
def get_book(book_id: str, services: Services = Depends(get_services)) -> dict:
    return services.books.store.get(book_id).to_dict()


@books_router.put("/{book_id}")
def update_book(book_id: str, body: RecordUpdateRequest, services: Services = Depends(get_services)) -> dict:
    return _update(services.books, book_id, body)
