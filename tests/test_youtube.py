"""Tests for the YouTube route."""

import unittest
from unittest.mock import patch

import app as dashboard
import youtube.helpers
import youtube.routes

POPULAR = {
    "items": [
        {
            "id": "abc123",
            "snippet": {
                "title": "Popular video",
                "channelTitle": "Some Channel",
                "publishedAt": "2024-01-02T10:00:00Z",
                "thumbnails": {
                    "default": {"url": "https://i.ytimg.com/default.jpg"},
                    "high": {"url": "https://i.ytimg.com/high.jpg"},
                },
            },
            "statistics": {"viewCount": "1000"},
            "contentDetails": {"duration": "PT4M13S"},
        }
    ]
}

SEARCH = {
    "items": [
        {
            "id": {"kind": "youtube#video", "videoId": "xyz789"},
            "snippet": {
                "title": "Search hit",
                "channelTitle": "Other Channel",
                "publishedAt": "2024-01-01T00:00:00Z",
                "thumbnails": {"medium": {"url": "https://i.ytimg.com/medium.jpg"}},
            },
        }
    ]
}


@patch("config.YOUTUBE_API_KEY", "test-key")
class TestYoutubeRoute(unittest.TestCase):

    def setUp(self):
        dashboard.app.config["TESTING"] = True
        self.client = dashboard.app.test_client()
        youtube.routes.youtube_cache.clear()

    def test_api_key_required(self):
        with patch("config.YOUTUBE_API_KEY", ""):
            resp = self.client.get("/api/youtube")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.get_json(), {"error": "YouTube API key not configured"})

    @patch("youtube.helpers.yt_client")
    def test_popular_default(self, mock_client):
        client = mock_client.return_value
        client.videos.return_value.list.return_value.execute.return_value = POPULAR

        resp = self.client.get("/api/youtube")

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json(), [{
            "videoId": "abc123",
            "title": "Popular video",
            "channel": "Some Channel",
            "thumbnail": "https://i.ytimg.com/high.jpg",
            "publishedAt": "2024-01-02T10:00:00Z",
            "viewCount": "1000",
            "duration": 253,
        }])
        client.videos.return_value.list.assert_called_once_with(
            part="snippet,statistics,contentDetails",
            chart="mostPopular",
            regionCode="CA",
            maxResults=12,
        )
        self.assertIn("s-maxage=300", resp.headers["Cache-Control"])

    @patch("youtube.helpers.yt_client")
    def test_search(self, mock_client):
        client = mock_client.return_value
        client.search.return_value.list.return_value.execute.return_value = SEARCH

        resp = self.client.get("/api/youtube?type=search&q=python&region=US&maxResults=5")

        item = resp.get_json()[0]
        self.assertEqual(item["videoId"], "xyz789")
        self.assertEqual(item["thumbnail"], "https://i.ytimg.com/medium.jpg")
        self.assertIsNone(item["viewCount"])
        self.assertIsNone(item["duration"])
        client.search.return_value.list.assert_called_once_with(
            part="snippet", q="python", type="video", maxResults=5, regionCode="US"
        )

    @patch("youtube.helpers.yt_client")
    def test_search_without_query_falls_back_to_popular(self, mock_client):
        client = mock_client.return_value
        client.videos.return_value.list.return_value.execute.return_value = POPULAR

        self.client.get("/api/youtube?type=search")

        client.search.assert_not_called()
        client.videos.return_value.list.assert_called_once()

    @patch("youtube.helpers.yt_client")
    def test_cached(self, mock_client):
        execute = mock_client.return_value.videos.return_value.list.return_value.execute
        execute.return_value = POPULAR

        self.client.get("/api/youtube?region=GB")
        self.client.get("/api/youtube?region=GB")
        self.assertEqual(execute.call_count, 1)

        self.client.get("/api/youtube?region=AU")
        self.assertEqual(execute.call_count, 2)

    @patch("youtube.helpers.yt_client")
    def test_upstream_failure(self, mock_client):
        mock_client.return_value.videos.return_value.list.return_value.execute.side_effect = Exception("quota")

        resp = self.client.get("/api/youtube")

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.get_json(), {"error": "Failed to fetch YouTube data"})


class TestNormalizeVideo(unittest.TestCase):

    def test_missing_thumbnails(self):
        video = youtube.helpers.normalize_video({"id": "a", "snippet": {}})
        self.assertIsNone(video["thumbnail"])
        self.assertEqual(video["videoId"], "a")


if __name__ == "__main__":
    unittest.main()
