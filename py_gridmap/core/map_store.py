"""
Server-side store of generated maps.

Holds the authoritative copy of each game's map, keyed by game id, so the
server can hand the same map to every client that joins.
"""

from typing import Dict, Iterator, List, Optional

import structlog

from .map_generator import GeneratedMap, MapGenerator

logger = structlog.get_logger()


class MapStore:
    """In-memory map registry keyed by game id."""

    def __init__(self, generator: Optional[MapGenerator] = None):
        self.generator = generator or MapGenerator()
        self._maps: Dict[str, GeneratedMap] = {}

    def put(self, generated: GeneratedMap) -> GeneratedMap:
        if generated.game_id in self._maps:
            logger.info("Replacing stored map", game_id=generated.game_id)
        self._maps[generated.game_id] = generated
        return generated

    def get(self, game_id: str) -> Optional[GeneratedMap]:
        return self._maps.get(game_id)

    def remove(self, game_id: str) -> bool:
        """Drop a stored map. Returns whether one was stored."""
        return self._maps.pop(game_id, None) is not None

    def get_or_generate(
        self,
        game_id: str,
        size: int,
        player_count: int,
        player_ids: Optional[List[str]] = None,
    ) -> GeneratedMap:
        """
        Return the stored map for a game, generating it on first request.

        A stored map generated with a different size, player count or list
        of player ids is regenerated and replaced. Terrain depends only on
        the game id, size and player count, so a new player list changes
        ownership and starting positions only.
        """
        existing = self._maps.get(game_id)
        if (
            existing is not None
            and existing.size == size
            and existing.player_count == player_count
            and existing.player_ids == list(player_ids or [])
        ):
            return existing
        return self.put(self.generator.generate(game_id, size, player_count, player_ids))

    def game_ids(self) -> List[str]:
        return list(self._maps)

    def clear(self) -> None:
        self._maps.clear()

    def __contains__(self, game_id: object) -> bool:
        return game_id in self._maps

    def __len__(self) -> int:
        return len(self._maps)

    def __iter__(self) -> Iterator[GeneratedMap]:
        return iter(list(self._maps.values()))
