import platformdirs
import pytest
import requests
from requests.adapters import HTTPAdapter

from http_stubs import StubAdapter

_NETWORK_BLOCK_MSG = (
    "Network access is blocked during tests. Mount a StubAdapter on the session."
)


def _block_network(*_args, **_kwargs):
    """
    Prevent network calls in tests by raising a RuntimeError.

    Raises:
        RuntimeError: with `_NETWORK_BLOCK_MSG` indicating that network access is blocked during tests.
    """
    raise RuntimeError(_NETWORK_BLOCK_MSG)


def pytest_configure(config):
    """
    Register the markers used across the test suite.
    """
    config.addinivalue_line("markers", "unit: fast tests with no I/O")
    config.addinivalue_line("markers", "core: version and constraint engine")
    config.addinivalue_line("markers", "catalog: release catalog assembly")
    config.addinivalue_line("markers", "cli: command-line interface")
    config.addinivalue_line("markers", "configuration: configuration loading")


@pytest.fixture(autouse=True)
def _isolate_test_environment(tmp_path_factory, monkeypatch):
    """
    Point the config directory and config file at a temporary location.

    Also clears GORELEASES_CONFIG and GORELEASES_LOG_LEVEL so the developer's
    environment cannot leak into tests.
    """
    base = tmp_path_factory.mktemp("goreleases")
    config_dir = base / "config"
    config_dir.mkdir(parents=True, exist_ok=True)

    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_dir))
    monkeypatch.delenv("GORELEASES_CONFIG", raising=False)
    monkeypatch.delenv("GORELEASES_LOG_LEVEL", raising=False)
    monkeypatch.setattr(
        platformdirs, "user_config_dir", lambda *_args, **_kwargs: str(config_dir)
    )

    import goreleases.config as config

    monkeypatch.setattr(config, "CONFIG_DIR", str(config_dir))
    monkeypatch.setattr(
        config, "CONFIG_FILE", str(config_dir / config.CONFIG_FILE_NAME)
    )


def pytest_runtest_setup():
    """
    Prevent real network requests during tests.

    Top-level requests helpers are replaced with a blocker, and so is
    HTTPAdapter.send, the point where a Session hands a request to the network.
    Sessions with a StubAdapter mounted keep working.
    """
    requests.get = _block_network
    requests.post = _block_network
    requests.put = _block_network
    requests.delete = _block_network
    requests.head = _block_network
    requests.patch = _block_network
    requests.options = _block_network
    HTTPAdapter.send = _block_network


# =============================================================================
# HTTP Stubs
# =============================================================================


@pytest.fixture
def stub_adapter():
    """Provide a fresh StubAdapter."""
    return StubAdapter()


@pytest.fixture
def stub_session(stub_adapter):
    """
    Provide a requests Session whose http and https traffic goes to `stub_adapter`.
    """
    session = requests.Session()
    session.mount("https://", stub_adapter)
    session.mount("http://", stub_adapter)
    yield session
    session.close()
