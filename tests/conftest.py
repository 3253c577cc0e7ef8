import pytest

from sustainability_engine.catalog import load_catalog, load_sdg_goals
from sustainability_engine.events import EventNotifier
from sustainability_engine.ledger import SustainabilityLedger
from sustainability_engine.storage import LedgerStore
from sustainability_engine.utils import clear_dataset_cache


def _clear_caches() -> None:
    clear_dataset_cache()
    load_catalog.cache_clear()
    load_sdg_goals.cache_clear()


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep every test away from the real home directory and dataset overrides."""
    monkeypatch.setenv("IRISH_GARDEN_STORAGE_DIR", str(tmp_path / "storage"))
    monkeypatch.delenv("SUSTAINABILITY_DATA_DIR", raising=False)
    monkeypatch.delenv("SUSTAINABILITY_OVERLAY_DIR", raising=False)
    _clear_caches()
    yield
    _clear_caches()


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "ledger.json"


@pytest.fixture
def store(store_path):
    return LedgerStore(store_path)


@pytest.fixture
def notifier():
    return EventNotifier()


@pytest.fixture
def events(notifier):
    """Collect every event emitted through ``notifier`` as ``(name, payload)``."""
    received: list[tuple[str, dict]] = []
    names = (
        "sustainability-practice-added",
        "sustainability-practice-removed",
        "resource-usage-updated",
        "carbon-offset-recorded",
        "sustainability-data-changed",
    )
    for name in names:
        notifier.on(name, lambda payload, name=name: received.append((name, payload)))
    return received


@pytest.fixture
def ledger(store, notifier):
    return SustainabilityLedger(store=store, catalog=load_catalog(), notifier=notifier)
