import threading

from googleapiclient.discovery import build

from helpers import iso8601_to_seconds

_thread_local = threading.local()


def yt_client():
    if not hasattr(_thread_local, 'youtube_client'):
        from config import YOUTUBE_API_KEY
        _thread_local.youtube_client = build('youtube', 'v3', developerKey=YOUTUBE_API_KEY, cache_discovery=False)
    return _thread_local.youtube_client


def thumb_url(video_data):
    thumbnails = video_data.get('snippet', {}).get('thumbnails', {})
    for quality in ['high', 'medium', 'default']:
        if thumbnails.get(quality, {}).get('url'):
            return thumbnails[quality]['url']
    return None


def video_duration(video_data):
    duration = video_data.get('contentDetails', {}).get('duration')
    if not duration:
        return None
    try:
        return iso8601_to_seconds(duration)
    except ValueError:
        return None


def normalize_video(video_data):
    video_id = video_data.get('id')
    if not isinstance(video_id, str):
        video_id = (video_id or {}).get('videoId')
    snippet = video_data.get('snippet', {})
    return {
        'videoId': video_id,
        'title': snippet.get('title'),
        'channel': snippet.get('channelTitle'),
        'thumbnail': thumb_url(video_data),
        'publishedAt': snippet.get('publishedAt'),
        'viewCount': video_data.get('statistics', {}).get('viewCount') or None,
        'duration': video_duration(video_data),
    }


def popular_videos(region, max_results):
    response = yt_client().videos().list(
        part="snippet,statistics,contentDetails",
        chart="mostPopular",
        regionCode=region,
        maxResults=max_results
    ).execute()
    return [normalize_video(item) for item in response.get('items', [])]


def search_videos(query, region, max_results):
    response = yt_client().search().list(
        part="snippet",
        q=query,
        type="video",
        maxResults=max_results,
        regionCode=region
    ).execute()
    return [normalize_video(item) for item in response.get('items', [])]
