"""Remote catalog supplier backed by The Movie Database (TMDB) v3 API.

Each endpoint is fetched independently; a failing endpoint contributes no
titles instead of failing the whole pool.  The engine treats an empty result
as a signal to use its static fallback.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Mapping, Sequence
from typing import Any

import httpx

from ..core.config import Settings
from ..core.models import Item
from ..core.shuffle import shuffle_items

logger = logging.getLogger(__name__)

DEFAULT_MOVIE_RUNTIME = 120
DEFAULT_EPISODE_RUNTIME = 45

# Number of entries each source contributes to the mixed pool.
MIX_MOVIES = 7
MIX_TV = 7
MIX_TRENDING = 6

FALLBACK_GENRES: dict[int, str] = {
    28: "Action",
    35: "Comedy",
    18: "Drama",
    27: "Horror",
    878: "Science Fiction",
    53: "Thriller",
    16: "Animation",
    10749: "Romance",
    14: "Fantasy",
    80: "Crime",
}


def _year(date: Any) -> int | None:
    if not isinstance(date, str) or len(date) < 4:
        return None
    try:
        return int(date[:4])
    except ValueError:
        return None


def _with_posters(rows: Sequence[Mapping[str, Any]]) -> list[Mapping[str, Any]]:
    return [row for row in rows if row.get("poster_path")]


def _category(raw: Mapping[str, Any], genres: Mapping[int, str]) -> str:
    genre_ids = raw.get("genre_ids") or []
    if not genre_ids:
        return "Unknown"
    return genres.get(genre_ids[0], "Unknown")


class TmdbCatalog:
    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://api.themoviedb.org/3",
        image_base_url: str = "https://image.tmdb.org/t/p/w500",
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.image_base_url = image_base_url
        self.timeout = timeout
        self._transport = transport
        self._rng = rng
        self._genres: dict[int, str] | None = None

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> TmdbCatalog:
        return cls(
            settings.tmdb_api_key or "",
            base_url=settings.tmdb_base_url,
            image_base_url=settings.tmdb_image_base_url,
            timeout=settings.http_timeout,
            **kwargs,
        )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            params={"api_key": self.api_key},
            timeout=self.timeout,
            transport=self._transport,
        )

    async def _get_results(self, client: httpx.AsyncClient, path: str, **params: Any) -> list[dict[str, Any]]:
        try:
            response = await client.get(path, params=params or None)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError):
            logger.warning("Catalog request failed", extra={"path": path}, exc_info=True)
            return []
        results = payload.get("results") if isinstance(payload, dict) else None
        return [entry for entry in results or [] if isinstance(entry, dict)]

    async def genre_map(self, client: httpx.AsyncClient) -> dict[int, str]:
        if self._genres is not None:
            return self._genres
        try:
            movie, tv = await asyncio.gather(client.get("/genre/movie/list"), client.get("/genre/tv/list"))
            genres: dict[int, str] = {}
            for response in (movie, tv):
                response.raise_for_status()
                for genre in response.json().get("genres", []):
                    genres.setdefault(int(genre["id"]), str(genre["name"]))
        except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError):
            logger.warning("Genre lookup failed; using built-in genres", exc_info=True)
            genres = dict(FALLBACK_GENRES)
        self._genres = genres
        return genres

    def _poster(self, raw: Mapping[str, Any]) -> str:
        path = raw.get("poster_path")
        return f"{self.image_base_url}{path}" if path else ""

    def movie_item(self, raw: Mapping[str, Any], genres: Mapping[int, str]) -> Item:
        return Item(
            id=f"movie_{raw['id']}",
            title=str(raw.get("title") or ""),
            category=_category(raw, genres),
            duration_minutes=int(raw.get("runtime") or DEFAULT_MOVIE_RUNTIME),
            rating=round(float(raw.get("vote_average") or 0.0), 1),
            description=raw.get("overview") or None,
            year=_year(raw.get("release_date")),
            poster_url=self._poster(raw),
        )

    def tv_item(self, raw: Mapping[str, Any], genres: Mapping[int, str]) -> Item:
        runtimes = raw.get("episode_run_time") or []
        return Item(
            id=f"tv_{raw['id']}",
            title=str(raw.get("name") or ""),
            category=_category(raw, genres),
            duration_minutes=int(runtimes[0]) if runtimes else DEFAULT_EPISODE_RUNTIME,
            rating=round(float(raw.get("vote_average") or 0.0), 1),
            description=raw.get("overview") or None,
            year=_year(raw.get("first_air_date")),
            poster_url=self._poster(raw),
        )

    def _mixed_item(self, raw: Mapping[str, Any], genres: Mapping[int, str]) -> Item | None:
        media_type = raw.get("media_type")
        if media_type == "movie":
            return self.movie_item(raw, genres)
        if media_type == "tv":
            return self.tv_item(raw, genres)
        return None

    async def fetch_pool(self, exclude_ids: set[str]) -> list[Item]:
        async with self._client() as client:
            genres = await self.genre_map(client)
            movies, shows, trending = await asyncio.gather(
                self._get_results(client, "/movie/popular", page=1),
                self._get_results(client, "/tv/popular", page=1),
                self._get_results(client, "/trending/all/week"),
            )
        mix: list[Item] = []
        mix.extend(self.movie_item(row, genres) for row in _with_posters(movies)[:MIX_MOVIES])
        mix.extend(self.tv_item(row, genres) for row in _with_posters(shows)[:MIX_TV])
        for row in _with_posters(trending)[:MIX_TRENDING]:
            item = self._mixed_item(row, genres)
            if item is not None:
                mix.append(item)
        pool = [item for item in mix if item.id not in exclude_ids]
        logger.debug("Catalog pool fetched", extra={"fetched": len(mix), "kept": len(pool)})
        return shuffle_items(pool, self._rng)

    async def search(self, query: str) -> list[Item]:
        async with self._client() as client:
            genres = await self.genre_map(client)
            rows = await self._get_results(client, "/search/multi", query=query)
        items: list[Item] = []
        for row in rows:
            if not row.get("poster_path"):
                continue
            item = self._mixed_item(row, genres)
            if item is not None:
                items.append(item)
        return items

