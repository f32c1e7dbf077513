"""
Album cover lookup service.
Resolves covers via a built-in table, the iTunes search API and Last.fm.
"""

import hashlib
import logging
from typing import Optional
from urllib.parse import quote

import httpx

from config.settings import Settings
from .errors import NotFoundError
from .song_store import SongStore

logger = logging.getLogger(__name__)

# Known covers, matched by "artist album-or-title" substring
FALLBACK_COVERS = {
    "nirvana nevermind": "https://upload.wikimedia.org/wikipedia/en/b/b7/NirvanaNevermindalbumcover.jpg",
    "nirvana in utero": "https://upload.wikimedia.org/wikipedia/en/5/50/In_Utero.png",
    "nirvana smells like teen spirit": "https://upload.wikimedia.org/wikipedia/en/b/b7/NirvanaNevermindalbumcover.jpg",
    "linkin park hybrid theory": "https://upload.wikimedia.org/wikipedia/en/1/1c/Linkin_Park_Hybrid_Theory_Album_Cover.jpg",
    "linkin park meteora": "https://upload.wikimedia.org/wikipedia/en/0/03/LinkinParkMeteora.jpg",
    "linkin park in the end": "https://upload.wikimedia.org/wikipedia/en/1/1c/Linkin_Park_Hybrid_Theory_Album_Cover.jpg",
    "queens of the stone age lullabies to paralyze": "https://upload.wikimedia.org/wikipedia/en/a/a6/Qotsa_lullabies.jpg",
    "radiohead ok computer": "https://upload.wikimedia.org/wikipedia/en/b/ba/Radioheadokcomputer.png",
    "radiohead the bends": "https://upload.wikimedia.org/wikipedia/en/8/8b/Radiohead.thebends.albumart.jpg",
    "radiohead creep": "https://upload.wikimedia.org/wikipedia/en/f/f2/Radiohead_-_Pablo_Honey.png",
}

PLACEHOLDER_COLORS = [
    "ff6b6b", "feca57", "48dbfb", "ff9ff3", "54a0ff",
    "5f27cd", "00d2d3", "ff9f43", "ee5a6f", "0abde3",
]


def placeholder_cover(artist: str, title: str) -> str:
    """Generated placeholder cover URL; the color is stable per song."""
    digest = hashlib.md5(f"{artist}|{title}".lower().encode("utf-8")).hexdigest()
    color = PLACEHOLDER_COLORS[int(digest, 16) % len(PLACEHOLDER_COLORS)]
    text = f"{quote(artist[:15])}+-+{quote(title[:15])}"
    return f"https://via.placeholder.com/300x300/{color}/ffffff?text={text}"


class CoverArtService:
    """
    Looks up album covers over HTTP.
    Never called on the vote path; results are written back to the store.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize cover art service.

        Args:
            settings: Application settings
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.settings = settings
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.settings.cover_lookup_timeout,
            transport=self._transport,
        )

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    async def search_cover(self, artist: str, title: str, album: Optional[str] = None) -> Optional[str]:
        """
        Find a cover URL for a song.

        Returns:
            Cover URL or None if nothing was found
        """
        subject = album or title
        cover = self._lookup_fallback(artist, subject)
        if cover:
            logger.info(f"Cover found in fallback table for {artist} - {subject}")
            return cover

        if not self.settings.cover_lookup_enabled:
            return None

        cover = await self._search_itunes(artist, title, album)
        if cover:
            return cover

        if self.settings.lastfm_api_key:
            cover = await self._search_lastfm(artist, subject)
            if cover:
                return cover

        logger.warning(f"No cover found for {artist} - {subject}")
        return None

    def _lookup_fallback(self, artist: str, subject: str) -> Optional[str]:
        search_key = f"{artist.lower()} {subject.lower()}"
        for key, cover in FALLBACK_COVERS.items():
            if key in search_key:
                return cover
        return None

    async def _search_itunes(self, artist: str, title: str, album: Optional[str]) -> Optional[str]:
        params = {
            "term": f"{artist} {album or title}",
            "media": "music",
            "entity": "album",
            "limit": 3,
        }
        try:
            async with self._client() as client:
                response = await client.get(self.settings.itunes_search_url, params=params)
                response.raise_for_status()
                results = response.json().get("results", [])
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"iTunes lookup failed: {e}")
            return None

        if not results:
            return None

        artist_lower = artist.lower()
        subject_lower = (album or title).lower()
        best = next(
            (
                r for r in results
                if artist_lower in r.get("artistName", "").lower()
                and (
                    subject_lower in r.get("collectionName", "").lower()
                    or title.lower() in (r.get("trackName") or "").lower()
                )
            ),
            results[0],
        )

        artwork = best.get("artworkUrl100")
        if not artwork:
            return None
        cover = artwork.replace("100x100bb", "600x600bb")
        logger.info(f"Cover found on iTunes: {cover}")
        return cover

    async def _search_lastfm(self, artist: str, album: str) -> Optional[str]:
        params = {
            "method": "album.getinfo",
            "api_key": self.settings.lastfm_api_key,
            "artist": artist,
            "album": album,
            "format": "json",
        }
        try:
            async with self._client() as client:
                response = await client.get(self.settings.lastfm_api_url, params=params)
                response.raise_for_status()
                images = response.json().get("album", {}).get("image", [])
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Last.fm lookup failed: {e}")
            return None

        if not images:
            return None

        by_size = {img.get("size"): img.get("#text") for img in images}
        cover = by_size.get("extralarge") or by_size.get("large") or images[-1].get("#text")
        if cover:
            logger.info(f"Cover found on Last.fm: {cover}")
        return cover or None

    # -------------------------------------------------------------------------
    # Enrichment
    # -------------------------------------------------------------------------

    async def enrich(self, store: SongStore, song_id: str) -> Optional[str]:
        """
        Look up a cover for a stored song and write it back.
        Runs after the song was committed to the roster.

        Returns:
            The new cover URL, or None if not found or the song is gone
        """
        song = store.get(song_id)
        if song is None:
            return None

        cover = await self.search_cover(song.artist, song.title)
        if not cover or cover == song.cover_ref:
            return None

        try:
            store.update_cover(song_id, cover)
        except NotFoundError:
            logger.info(f"Song {song_id} left the roster before its cover arrived")
            return None
        return cover

    async def refresh_placeholders(self, store: SongStore) -> int:
        """
        Re-run the lookup for every song with a missing or placeholder cover.

        Returns:
            Number of covers updated
        """
        updated = 0
        for song in store.all():
            if not song.has_placeholder_cover:
                continue
            cover = await self.search_cover(song.artist, song.title, song.album or None)
            if cover and cover != song.cover_ref and song.id in store:
                store.update_cover(song.id, cover)
                updated += 1

        logger.info(f"Cover refresh complete: {updated} covers updated")
        return updated
