import importlib.metadata

import pytest
from requests.adapters import HTTPAdapter

from goreleases import utils
from http_stubs import StubResponse

pytestmark = [pytest.mark.unit]


@pytest.fixture(autouse=True)
def _reset_user_agent_cache(monkeypatch):
    monkeypatch.setattr(utils, "_USER_AGENT_CACHE", None)


class TestUserAgent:
    def test_uses_package_version(self, mocker):
        mocker.patch("goreleases.utils.package_version", return_value="1.2.3")
        assert utils.get_user_agent() == "goreleases/1.2.3"

    def test_unknown_version(self, mocker):
        mocker.patch(
            "goreleases.utils.package_version",
            side_effect=importlib.metadata.PackageNotFoundError,
        )
        assert utils.get_user_agent() == "goreleases/unknown"

    def test_cached(self, mocker):
        lookup = mocker.patch("goreleases.utils.package_version", return_value="1.0")
        utils.get_user_agent()
        utils.get_user_agent()
        lookup.assert_called_once()


class TestCreateSession:
    def test_sets_user_agent(self, mocker):
        mocker.patch("goreleases.utils.package_version", return_value="0.1.0")
        session = utils.create_session()
        assert session.headers["User-Agent"] == "goreleases/0.1.0"

    def test_no_retries_by_default(self):
        session = utils.create_session()
        adapter = session.get_adapter("https://go.dev/dl/")
        assert adapter.max_retries.total == 0

    def test_retries_mount_retry_policy(self):
        session = utils.create_session(connect_retries=3)
        adapter = session.get_adapter("https://storage.googleapis.com/")
        assert isinstance(adapter, HTTPAdapter)
        assert adapter.max_retries.total == 3
        assert 503 in adapter.max_retries.status_forcelist


class TestHttpGet:
    def test_passes_params_and_timeout(self, stub_session, stub_adapter):
        stub_adapter.add("https://go.dev/dl/", StubResponse(text="ok"))

        response = utils.http_get(
            stub_session, "https://go.dev/dl/", params={"mode": "json"}, timeout=5
        )

        assert response.text == "ok"
        assert stub_adapter.urls() == ["https://go.dev/dl/?mode=json"]

    def test_default_timeout(self, mocker):
        session = mocker.MagicMock()
        utils.http_get(session, "https://go.dev/dl/")
        session.get.assert_called_once_with(
            "https://go.dev/dl/", params=None, timeout=30
        )
