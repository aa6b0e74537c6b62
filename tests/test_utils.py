import json
import logging

import pytest

from dla_growth import GrowthConfig, GrowthEngine, utils


def test_load_params_json(tmp_path):
    path = tmp_path / "growth.json"
    path.write_text(json.dumps({"diameter": 60, "mask_size": 8, "first_color": [255, 0, 0]}))
    params = utils.load_params(path)
    config = GrowthConfig.from_dict(params)
    assert config.diameter == 60
    assert config.mask_size == 8
    assert config.first_color == (255, 0, 0)
    assert config.second_color == (0, 0, 255)


def test_load_params_toml(tmp_path):
    path = tmp_path / "growth.toml"
    path.write_text('diameter = 80\nfill_percentage = 25.0\nsecond_color = "magenta"\nseed = 4\n')
    config = GrowthConfig.from_dict(utils.load_params(path))
    engine = GrowthEngine(config)
    assert engine.diameter == 80
    assert engine.target == int(0.25 * 3.141592653589793 * 40 * 40)
    assert engine.second_color == (255, 0, 255)
    assert config.seed == 4


def test_load_params_unsupported_suffix(tmp_path):
    path = tmp_path / "growth.yaml"
    path.write_text("diameter: 10\n")
    with pytest.raises(ValueError, match="Unsupported"):
        utils.load_params(path)


def test_config_validation():
    with pytest.raises(TypeError, match="radius"):
        GrowthConfig.from_dict({"radius": 10})
    with pytest.raises(ValueError):
        GrowthConfig(fill_percentage=150)
    with pytest.raises(ValueError):
        GrowthConfig(diameter=1)
    with pytest.raises(ValueError):
        GrowthConfig(first_color=(0, 0, 300))


def test_config_round_trips_through_dict():
    config = GrowthConfig(diameter=64, mask_size=16, seed=1)
    assert GrowthConfig.from_dict(config.to_dict()) == config


def test_setup_logging_does_not_duplicate_handlers():
    logger = utils.setup_logging("DEBUG")
    utils.setup_logging(logging.WARNING)
    assert logger is logging.getLogger("dla_growth")
    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING
    assert logger.propagate is False

