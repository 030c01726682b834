"""
Shared pytest fixtures for the operator console tests.

Every test gets its own copy of the sample collections in a temp directory,
so status updates and appended records never leak between tests or into
data/.
"""

import shutil

import pytest
from pathlib import Path

from operator_console.notification_queue import NotificationQueue
from operator_console.scheduler import ManualScheduler
from shared.auth import generate_admin_token
from shared.data_store import DataStore, reset_data_store
from shared.settings import ConsoleSettings, reset_settings
from shared.sounds import SoundPlayer


@pytest.fixture
def sample_dir() -> Path:
    """Path to the sample data shipped with the repo."""
    return Path(__file__).parent.parent / "data"


@pytest.fixture
def data_dir(tmp_path: Path, sample_dir: Path) -> Path:
    """Scratch copy of the sample collections."""
    target = tmp_path / "data"
    shutil.copytree(sample_dir, target)
    return target


@pytest.fixture
def data_store(data_dir: Path) -> DataStore:
    """Fresh DataStore over the scratch copy."""
    return DataStore(data_dir=data_dir)


@pytest.fixture
def empty_store(tmp_path: Path) -> DataStore:
    """DataStore over a directory with no collections at all."""
    return DataStore(data_dir=tmp_path / "empty")


@pytest.fixture(autouse=True)
def settings(data_dir: Path) -> ConsoleSettings:
    """
    Process settings pinned to defaults and the scratch data dir.

    Ignores any .env file or STORE_CONSOLE_* variables on the machine
    running the tests.
    """
    current = reset_settings(ConsoleSettings(_env_file=None, data_dir=data_dir))
    yield current
    reset_settings(None)
    reset_data_store(None)


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Virtual clock starting at t=0."""
    return ManualScheduler()


@pytest.fixture
def sound_player() -> SoundPlayer:
    """Fresh SoundPlayer for each test."""
    return SoundPlayer(fail_rate=0.0)


@pytest.fixture
def queue(scheduler: ManualScheduler, sound_player: SoundPlayer) -> NotificationQueue:
    """NotificationQueue with the 5s default TTL."""
    return NotificationQueue(scheduler, sound_player=sound_player)


@pytest.fixture
def admin_token() -> str:
    """A valid admin token for the API."""
    return generate_admin_token("admin_001")


@pytest.fixture
def admin_headers(admin_token: str) -> dict[str, str]:
    return {"X-Admin-Token": admin_token}


# =============================================================================
# Record Fixtures
# =============================================================================

@pytest.fixture
def paid_order_id() -> str:
    """Ana's order: status "paid" with one history entry."""
    return "ord_1"


@pytest.fixture
def waiting_order_id() -> str:
    """Bruno's order: "waiting_payment" with an empty history."""
    return "ord_2"


@pytest.fixture
def in_transit_tracking_id() -> str:
    """Carla's parcel to Canoas - RS, code DCA1B2C3D4, two timeline entries."""
    return "trk_1"


@pytest.fixture
def delivered_tracking_id() -> str:
    """Diego's parcel to Florianópolis - SC, already delivered."""
    return "trk_2"
