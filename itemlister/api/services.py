from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from itemlister.config.settings import Settings
from itemlister.export.exporter import RecordExporter, SheetExporter
from itemlister.export.gspread_adapter import GspreadSheetsAdapter
from itemlister.export.schema import BOOK_EXPORT_SCHEMA, CARD_EXPORT_SCHEMA
from itemlister.export.sheets_base import BaseSheetsClient
from itemlister.generation.client_base import BaseGenerationClient
from itemlister.generation.factory import GenerationClientFactory
from itemlister.generation.orchestrator import GenerationOrchestrator
from itemlister.listing.generator import BookListingGenerator, CardListingGenerator, ListingGenerator
from itemlister.normalization.normalizer import BookNormalizer, CardNormalizer
from itemlister.ocr.base import BaseOcrClient
from itemlister.ocr.factory import OcrClientFactory
from itemlister.processor.background import BackgroundCompletionUpdater
from itemlister.processor.file_loader import FileLoader
from itemlister.processor.processor import IngestionProcessor
from itemlister.records.models import RecordKind
from itemlister.records.store import RecordStore


@dataclass
class KindServices:
    """Everything wired for one record kind."""

    store: RecordStore
    processor: IngestionProcessor
    listing_generator: ListingGenerator
    updater: BackgroundCompletionUpdater
    exporter: RecordExporter


@dataclass
class Services:
    settings: Settings
    file_loader: FileLoader
    orchestrator: GenerationOrchestrator
    ocr_client: BaseOcrClient
    cards: KindServices
    books: KindServices
    executor: Executor

    def wait_idle(self, timeout: float | None = None) -> bool:
        cards_done = self.cards.updater.wait_idle(timeout)
        books_done = self.books.updater.wait_idle(timeout)
        return cards_done and books_done

    def shutdown(self) -> None:
        self.executor.shutdown(wait=False)


def build_services(
    settings: Settings,
    *,
    generation_client: BaseGenerationClient | None = None,
    ocr_client: BaseOcrClient | None = None,
    sheets_client: BaseSheetsClient | None = None,
    executor: Executor | None = None,
) -> Services:
    """Build all adapters and per-kind pipelines from settings.

    Injected clients replace the configured providers.
    """
    orchestrator = GenerationClientFactory.create_orchestrator(settings, client=generation_client)
    ocr = ocr_client or OcrClientFactory.create(settings)
    sheets = sheets_client or GspreadSheetsAdapter(
        credentials_json=settings.sheets_credentials_json,
        credentials_file=settings.sheets_credentials_file,
    )
    sheet_exporter = SheetExporter(sheets)
    file_loader = FileLoader(Path(settings.upload_dir))
    pool = executor or ThreadPoolExecutor(
        max_workers=settings.background_workers, thread_name_prefix="listing"
    )

    card_store = RecordStore(RecordKind.CARD)
    card_generator = CardListingGenerator(
        orchestrator=orchestrator,
        temperature=settings.listing_temperature,
        max_output_tokens=settings.listing_max_output_tokens,
    )
    card_updater = BackgroundCompletionUpdater(store=card_store, generator=card_generator, executor=pool)
    cards = KindServices(
        store=card_store,
        processor=IngestionProcessor(
            file_loader=file_loader,
            ocr_client=ocr,
            normalizer=CardNormalizer(
                orchestrator=orchestrator,
                temperature=settings.normalization_temperature,
                max_output_tokens=settings.normalization_max_output_tokens,
            ),
            listing_generator=card_generator,
            store=card_store,
            updater=card_updater,
        ),
        listing_generator=card_generator,
        updater=card_updater,
        exporter=RecordExporter(
            store=card_store,
            schema=CARD_EXPORT_SCHEMA,
            sheet_exporter=sheet_exporter,
            default_spreadsheet_id=settings.card_spreadsheet_id,
            default_sheet_name=settings.card_sheet_name,
        ),
    )

    book_store = RecordStore(RecordKind.BOOK)
    book_generator = BookListingGenerator(
        orchestrator=orchestrator,
        temperature=settings.listing_temperature,
        max_output_tokens=settings.book_listing_max_output_tokens,
    )
    book_updater = BackgroundCompletionUpdater(store=book_store, generator=book_generator, executor=pool)
    books = KindServices(
        store=book_store,
        processor=IngestionProcessor(
            file_loader=file_loader,
            ocr_client=ocr,
            normalizer=BookNormalizer(
                orchestrator=orchestrator,
                temperature=settings.normalization_temperature,
                max_output_tokens=settings.normalization_max_output_tokens,
            ),
            listing_generator=book_generator,
            store=book_store,
            updater=book_updater,
        ),
        listing_generator=book_generator,
        updater=book_updater,
        exporter=RecordExporter(
            store=book_store,
            schema=BOOK_EXPORT_SCHEMA,
            sheet_exporter=sheet_exporter,
            default_spreadsheet_id=settings.book_spreadsheet_id,
            default_sheet_name=settings.book_sheet_name,
        ),
    )

    return Services(
        settings=settings,
        file_loader=file_loader,
        orchestrator=orchestrator,
        ocr_client=ocr,
        cards=cards,
        books=books,
        executor=pool,
    )
