"""Twitch API access for the thumbnail pipeline.

Covers the two authenticated calls the pipeline makes:
    - ``TokenProvider``: app access token via the Client Credentials grant
      (``POST https://id.twitch.tv/oauth2/token``).
    - ``StreamLookup``: live-stream records for one channel login
      (``GET https://api.twitch.tv/helix/streams``).

Thumbnail download is unauthenticated and lives in
:mod:`thumbnail_archiver.thumbnails`.
"""
