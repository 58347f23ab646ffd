import json

from core.heatman.config_store import load_config, save_config
from core.heatman.settings import HeaterConfig


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(str(tmp_path / "missing.json"))
    assert config == HeaterConfig()
    assert config.master_switch is True
    assert config.force is False
    assert config.target_temp == 28.0
    assert config.co2_target == 500


def test_partial_file_takes_defaults(tmp_path):
    path = tmp_path / "heater_config.json"
    path.write_text(json.dumps({"target_temp": 19.5, "co2_target": None}))

    config = load_config(str(path))

    assert config.target_temp == 19.5
    assert config.co2_target is None
    assert config.master_switch is True


def test_corrupt_file_gives_defaults(tmp_path):
    path = tmp_path / "heater_config.json"
    path.write_text("{not json")
    assert load_config(str(path)) == HeaterConfig()


def test_save_then_load(tmp_path):
    path = tmp_path / "heater_config.json"
    config = HeaterConfig(master_switch=False, force=True, target_temp=21.0, co2_target=800)

    save_config(str(path), config)

    assert load_config(str(path)) == config
    assert [p.name for p in tmp_path.iterdir()] == ["heater_config.json"]
