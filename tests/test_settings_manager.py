import pytest

from loopr.core.config import PlayerConfig
from loopr.services.settings_manager import SettingsManager


def test_defaults(qsettings):
    config = SettingsManager(qsettings).player_config()
    assert config == PlayerConfig()
    assert config.seek_step_options[config.seek_step_index] == 5.0


def test_persisted_preferences(qsettings):
    settings = SettingsManager(qsettings)
    settings.set_seek_step_index(2)
    settings.set_loop_seconds(12.0)
    settings.set_finetune_step(0.1)
    config = settings.player_config()
    assert config.seek_step_index == 2
    assert config.loop_seconds == 12.0
    assert config.finetune_step == 0.1


def test_out_of_range_step_index_falls_back(qsettings):
    settings = SettingsManager(qsettings)
    settings.set_seek_step_index(9)
    assert settings.get_seek_step_index() == 1


def test_invalid_values_fall_back_to_defaults(qsettings):
    settings = SettingsManager(qsettings)
    settings.set_loop_seconds(-5.0)
    assert settings.player_config() == PlayerConfig()


def test_config_validation():
    with pytest.raises(ValueError):
        PlayerConfig(mark_proximity=0)
    with pytest.raises(ValueError):
        PlayerConfig(seek_step_index=3)
