from datetime import date, datetime
from typing import Dict, List, Optional

import pytest
from PyQt6.QtCore import QSettings

from inkplanner.config import AppConfig
from inkplanner.database import DatabaseManager
from inkplanner.models.document import RemoteDocument
from inkplanner.models.event import CalendarRecord
from inkplanner.models.types import OCRProvider
from inkplanner.repositories import CalendarRepository, DocumentRepository, EventRepository

USER = "user-1"


class FixedClock:
    def __init__(self, now: datetime) -> None:
        self._now = now

    def now(self) -> datetime:
        return self._now

    def today(self) -> date:
        return self._now.date()


class FakeDevice:
    """In-memory device cloud: a listing plus downloadable PDF content."""

    def __init__(self, documents: Optional[List[RemoteDocument]] = None, content: bytes = b"%PDF-1.4 fake") -> None:
        self.documents = documents or []
        self.content = content
        self.listed_folders: List[str] = []
        self.downloads: List[str] = []
        self.list_error: Optional[Exception] = None
        self.download_error: Optional[Exception] = None

    def list_documents(self, folder_path: str) -> List[RemoteDocument]:
        self.listed_folders.append(folder_path)
        if self.list_error:
            raise self.list_error
        return list(self.documents)

    def download_with_annotations(self, document_id: str) -> bytes:
        self.downloads.append(document_id)
        if self.download_error:
            raise self.download_error
        return self.content


class FakeSettings:
    def __init__(self, provider: OCRProvider = OCRProvider.OPENAI, keys: Optional[Dict[OCRProvider, str]] = None,
                 notes_folder: str = "/Calendar/Notes") -> None:
        self.provider = provider
        self.keys = keys if keys is not None else {OCRProvider.OPENAI: "sk-test"}
        self.notes_folder = notes_folder

    def get_ocr_provider(self) -> OCRProvider:
        return self.provider

    def get_ocr_api_key(self, provider: OCRProvider) -> str:
        return self.keys.get(provider, "")

    def get_notes_folder(self) -> str:
        return self.notes_folder


class FakeOCR:
    def __init__(self, text: str = "", error: Optional[Exception] = None) -> None:
        self.text = text
        self.error = error
        self.calls = []

    def recognize(self, provider, payload, credentials) -> str:
        self.calls.append((provider, payload, credentials))
        if self.error:
            raise self.error
        return self.text


def remote_doc(doc_id: str, version="1", name: Optional[str] = None, type_: str = "DocumentType") -> RemoteDocument:
    return RemoteDocument(
        id=doc_id,
        version=version,
        name=name or f"Note {doc_id}",
        type=type_,
        lastModified=datetime(2024, 1, 9, 18, 30),
    )


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 1, 10, 8, 0))


@pytest.fixture
def db():
    manager = DatabaseManager(":memory:")
    yield manager
    manager.close()


@pytest.fixture
def doc_repo(db):
    return DocumentRepository(db)


@pytest.fixture
def event_repo(db):
    return EventRepository(db)


@pytest.fixture
def calendar_repo(db):
    repo = CalendarRepository(db)
    repo.save(CalendarRecord(id="cal-work", user_id=USER, name="Work", is_primary=False))
    repo.save(CalendarRecord(id="cal-home", user_id=USER, name="Home", is_primary=True))
    return repo


@pytest.fixture
def config(tmp_path, monkeypatch):
    # Isolated INI store, no API keys leaking in from the environment
    for env in AppConfig.API_KEY_ENV.values():
        monkeypatch.delenv(env, raising=False)
    settings = QSettings(str(tmp_path / "inkplanner.ini"), QSettings.Format.IniFormat)
    settings.clear()
    return AppConfig(settings=settings)


@pytest.fixture
def make_remote():
    return remote_doc


@pytest.fixture
def device():
    return FakeDevice()


@pytest.fixture
def fake_settings():
    return FakeSettings()


@pytest.fixture
def fake_ocr():
    return FakeOCR()
