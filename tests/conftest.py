"""
Pytest configuration and fixtures for ConcursoFlow tests.
"""
import sys
import os
from datetime import datetime, timedelta, timezone

import pytest

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from PySide6.QtCore import QCoreApplication

from BackEnd.repos.memory_repo import MemoryStudyRepository
from BackEnd.services.catalog_service import CatalogService
from BackEnd.services.cycle_service import CycleTracker
from BackEnd.services.timer_service import SessionTimer


class FakeClock:
    """Callable clock the tests move by hand."""

    def __init__(self, start):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


@pytest.fixture(scope="session", autouse=True)
def qt_app():
    """QTimer needs an application object on the main thread."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def repo():
    return MemoryStudyRepository()


@pytest.fixture
def tracker(repo, clock):
    return CycleTracker(repo, clock=clock)


@pytest.fixture
def catalog(repo, clock):
    return CatalogService(repo, clock=clock)


@pytest.fixture
def exam(catalog):
    return catalog.create_exam("TRF 3ª Região", board="FCC", role="Analista Judiciário")


@pytest.fixture
def subjects(catalog, exam):
    """Three subjects, in order: Português, Constitucional, Informática."""
    return [
        catalog.create_subject(exam.id, "Português", priority="alta"),
        catalog.create_subject(exam.id, "Direito Constitucional"),
        catalog.create_subject(exam.id, "Informática", priority="baixa"),
    ]


@pytest.fixture
def timer(repo, tracker, clock):
    return SessionTimer(repo, tracker, clock=clock)


@pytest.fixture
def make_timer(repo, tracker, clock):
    """Factory for extra timers sharing the same store and clock."""
    return lambda: SessionTimer(repo, tracker, clock=clock)
