from urllib.parse import parse_qs, urlsplit

import pytest
import requests

from goreleases.catalog.interfaces import Release, ReleaseFile, StorageObject
from goreleases.catalog.upstream import GoDevClient, StorageClient
from goreleases.exceptions import UpstreamError
from http_stubs import StubResponse

pytestmark = [pytest.mark.unit, pytest.mark.catalog]

LISTING_URL = "https://storage.googleapis.com/storage/v1/b/golang/o"
GO_DEV_URL = "https://go.dev/dl/"


def query(request):
    return parse_qs(urlsplit(request.url).query, keep_blank_values=True)


class TestStorageClient:
    def test_urls(self, stub_session):
        client = StorageClient(session=stub_session, base_url="https://example.com/")
        assert client.listing_url == "https://example.com/storage/v1/b/golang/o"
        assert (
            client.object_url("go1.16.src.tar.gz.sha256")
            == "https://example.com/golang/go1.16.src.tar.gz.sha256"
        )

    def test_fetch_storage_objects_follows_pages(self, stub_session, stub_adapter):
        pages = {
            "": {
                "items": [
                    {"name": "go1.15.src.tar.gz", "size": "123", "etag": "e1"},
                    {"name": "go1.16.src.tar.gz", "size": "456"},
                ],
                "nextPageToken": "page2",
            },
            "page2": {
                "items": [
                    {
                        "name": "go1.16rc1.src.tar.gz",
                        "size": "bogus",
                        "timeCreated": "2021-01-01T00:00:00Z",
                    }
                ]
            },
        }

        def listing(request):
            params = query(request)
            assert params["prefix"] == ["go1"]
            return StubResponse(json_data=pages[params["pageToken"][0]])

        stub_adapter.add(LISTING_URL, listing)

        objects = StorageClient(session=stub_session).fetch_storage_objects()

        assert objects == [
            StorageObject(name="go1.15.src.tar.gz", size=123, etag="e1"),
            StorageObject(name="go1.16.src.tar.gz", size=456),
            StorageObject(
                name="go1.16rc1.src.tar.gz",
                size=0,
                time_created="2021-01-01T00:00:00Z",
            ),
        ]
        assert len(stub_adapter.requests) == 2

    def test_empty_listing(self, stub_session, stub_adapter):
        stub_adapter.add(LISTING_URL, StubResponse(json_data={}))
        assert StorageClient(session=stub_session).fetch_storage_objects() == []

    def test_non_200_fails(self, stub_session, stub_adapter):
        stub_adapter.add(LISTING_URL, StubResponse(status_code=503, text="unavailable"))
        with pytest.raises(UpstreamError) as exc_info:
            StorageClient(session=stub_session).fetch_storage_objects()
        assert exc_info.value.status_code == 503
        assert exc_info.value.url == LISTING_URL

    def test_transport_error_fails(self, stub_session, stub_adapter):
        stub_adapter.add(LISTING_URL, requests.ConnectionError("connection reset"))
        with pytest.raises(UpstreamError, match="connection reset"):
            StorageClient(session=stub_session).fetch_storage_objects()

    def test_invalid_json_fails(self, stub_session, stub_adapter):
        stub_adapter.add(LISTING_URL, StubResponse(text="<html>"))
        with pytest.raises(UpstreamError, match="invalid JSON"):
            StorageClient(session=stub_session).fetch_storage_objects()

    def test_get_object_content_returns_raw_response(self, stub_session, stub_adapter):
        stub_adapter.add(
            "https://storage.googleapis.com/golang/go1.16.src.tar.gz.sha256",
            StubResponse(text="abc123\n"),
        )
        response = StorageClient(session=stub_session).get_object_content(
            "go1.16.src.tar.gz.sha256"
        )
        assert response.status_code == 200
        assert response.text == "abc123\n"


class TestGoDevClient:
    def test_fetch_releases(self, stub_session, stub_adapter):
        feed = [
            {
                "version": "go1.16",
                "stable": True,
                "files": [
                    {
                        "filename": "go1.16.src.tar.gz",
                        "os": "",
                        "arch": "",
                        "version": "go1.16",
                        "sha256": "deadbeef",
                        "size": 20895394,
                        "kind": "source",
                    }
                ],
            }
        ]
        stub_adapter.add(GO_DEV_URL, StubResponse(json_data=feed))

        releases = GoDevClient(session=stub_session).fetch_releases()

        assert releases == [
            Release(
                version="go1.16",
                stable=True,
                files=[
                    ReleaseFile(
                        filename="go1.16.src.tar.gz",
                        version="go1.16",
                        sha256="deadbeef",
                        size=20895394,
                        kind="source",
                    )
                ],
            )
        ]
        assert stub_adapter.urls() == ["https://go.dev/dl/?mode=json&include=all"]

    def test_unexpected_content_fails(self, stub_session, stub_adapter):
        stub_adapter.add(GO_DEV_URL, StubResponse(json_data={"releases": []}))
        with pytest.raises(UpstreamError, match="unexpected release feed content"):
            GoDevClient(session=stub_session).fetch_releases()

    def test_non_200_fails(self, stub_session, stub_adapter):
        stub_adapter.add(GO_DEV_URL, StubResponse(status_code=500))
        with pytest.raises(UpstreamError) as exc_info:
            GoDevClient(session=stub_session).fetch_releases()
        assert exc_info.value.status_code == 500
