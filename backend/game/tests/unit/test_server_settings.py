import pytest
from pydantic import ValidationError

from game.server.settings import StatsSettings


class TestStatsSettings:
    def test_defaults(self, monkeypatch):
        for name in ("STATS_DATA_DIR", "STATS_LOG_DIR", "STATS_LOCAL_PLAYER_ID", "STATS_LOCAL_PLAYER_NAME"):
            monkeypatch.delenv(name, raising=False)
        settings = StatsSettings()
        assert settings.data_dir == "backend/data/stats"
        assert settings.log_dir == "backend/logs/stats"
        assert settings.local_player_id == "LOCAL_PLAYER"

    def test_data_dir_from_env(self, monkeypatch):
        monkeypatch.setenv("STATS_DATA_DIR", "custom/stats")
        settings = StatsSettings()
        assert settings.data_dir == "custom/stats"

    def test_data_dir_empty_rejected(self):
        with pytest.raises(ValidationError, match="data_dir"):
            StatsSettings(data_dir="")

    def test_log_dir_empty_rejected(self):
        with pytest.raises(ValidationError, match="log_dir"):
            StatsSettings(log_dir="")

    def test_local_player_id_empty_rejected(self):
        with pytest.raises(ValidationError, match="local_player_id"):
            StatsSettings(local_player_id="")

    def test_local_player_identity(self, monkeypatch):
        monkeypatch.setenv("STATS_LOCAL_PLAYER_ID", "LOCAL_abc")
        monkeypatch.setenv("STATS_LOCAL_PLAYER_NAME", "Ada")
        player = StatsSettings().local_player()
        assert player.player_id == "LOCAL_abc"
        assert player.display_name == "Ada"
        assert not player.is_ai
