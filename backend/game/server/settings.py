"""Stats service configuration via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings

from game.stats.records import PlayerInfo


class StatsSettings(BaseSettings):
    model_config = {"env_prefix": "STATS_"}

    data_dir: str = Field(default="backend/data/stats", min_length=1)
    log_dir: str = Field(default="backend/logs/stats", min_length=1)

    # identity of the player whose lifetime profile this service maintains
    local_player_id: str = Field(default="LOCAL_PLAYER", min_length=1)
    local_player_name: str = Field(default="Player", min_length=1)

    def local_player(self) -> PlayerInfo:
        return PlayerInfo(player_id=self.local_player_id, display_name=self.local_player_name)
