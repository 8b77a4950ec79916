"""
Tests for the YouTube channel proxy.
"""
import requests

from blog_api.config import settings
from blog_api.services.youtube import DEFAULT_LIMIT, MAX_LIMIT, parse_limit
from tests.conftest import FakeResponse


SEARCH_PAYLOAD = {
    "items": [
        {"id": {"kind": "youtube#video", "videoId": "vid1"}},
        {"id": {"kind": "youtube#video", "videoId": "vid2"}},
    ]
}
VIDEOS_PAYLOAD = {
    "items": [
        {
            "id": "vid1",
            "snippet": {
                "title": "First",
                "description": "One",
                "publishedAt": "2024-01-02T00:00:00Z",
                "thumbnails": {"default": {"url": "https://i.ytimg.com/vid1.jpg"}},
            },
            "contentDetails": {"duration": "PT4M13S"},
        },
        {
            "id": "vid2",
            "snippet": {"title": "Second", "publishedAt": "2024-01-01T00:00:00Z"},
            "contentDetails": {"duration": "PT1M"},
        },
    ]
}


class TestParseLimit:
    def test_defaults(self):
        assert parse_limit(None) == DEFAULT_LIMIT
        assert parse_limit("") == DEFAULT_LIMIT

    def test_invalid_values_fall_back(self):
        for value in ("abc", "0", "-3", "2.5"):
            assert parse_limit(value) == DEFAULT_LIMIT

    def test_capped(self):
        assert parse_limit("50") == MAX_LIMIT
        assert parse_limit("7") == 7


class TestYouTubeProxy:
    def test_lists_channel_videos(self, client, youtube_session):
        youtube_session.responses = {
            "search": FakeResponse(200, SEARCH_PAYLOAD),
            "videos": FakeResponse(200, VIDEOS_PAYLOAD),
        }
        response = client.get("/youtube/posts", params={"channelId": "UC123", "limit": "2"})
        assert response.status_code == 200
        videos = response.json()
        assert [v["id"] for v in videos] == ["vid1", "vid2"]
        assert videos[0]["duration"] == "PT4M13S"
        assert videos[0]["url"] == "https://www.youtube.com/watch?v=vid1"
        assert videos[1]["description"] == ""

        search_url, search_params = youtube_session.calls[0]
        assert search_url.endswith("/search")
        assert search_params["channelId"] == "UC123"
        assert search_params["maxResults"] == 2
        assert search_params["key"] == "test-key"
        assert youtube_session.calls[1][1]["id"] == "vid1,vid2"

    def test_no_videos_returns_empty_list(self, client, youtube_session):
        youtube_session.responses = {"search": FakeResponse(200, {"items": []})}
        response = client.get("/youtube/posts", params={"channelId": "UC123"})
        assert response.json() == []
        assert len(youtube_session.calls) == 1

    def test_default_limit_and_channel(self, client, youtube_session, monkeypatch):
        monkeypatch.setattr(settings, "YOUTUBE_DEFAULT_CHANNEL_ID", "UCdefault")
        youtube_session.responses = {"search": FakeResponse(200, {"items": []})}
        client.get("/youtube/posts", params={"limit": "nope"})
        params = youtube_session.calls[0][1]
        assert params["channelId"] == "UCdefault"
        assert params["maxResults"] == DEFAULT_LIMIT

    def test_missing_channel(self, client, youtube_session, monkeypatch):
        monkeypatch.setattr(settings, "YOUTUBE_DEFAULT_CHANNEL_ID", "")
        response = client.get("/youtube/posts")
        assert response.status_code == 400
        assert youtube_session.calls == []

    def test_upstream_error_is_bad_gateway(self, client, youtube_session):
        youtube_session.responses = {"search": FakeResponse(403, text='{"error": "quotaExceeded"}')}
        response = client.get("/youtube/posts", params={"channelId": "UC123"})
        assert response.status_code == 502
        assert "quotaExceeded" in response.json()["details"]

    def test_network_error_is_bad_gateway(self, client, youtube_session):
        youtube_session.error = requests.ConnectionError("connection refused")
        response = client.get("/youtube/posts", params={"channelId": "UC123"})
        assert response.status_code == 502

    def test_missing_api_key(self, client, monkeypatch):
        monkeypatch.setattr(settings, "YOUTUBE_API_KEY", "")
        response = client.get("/youtube/posts", params={"channelId": "UC123"})
        assert response.status_code == 500
        assert response.json() == {"message": "Missing YOUTUBE_API_KEY configuration"}
