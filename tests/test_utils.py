import json
import logging
from pathlib import Path

import pytest

from config import SimulationConfig
from utils import CONFIG_SECTIONS, load_config, setup_logging

REPO_CONFIG = Path(__file__).resolve().parent.parent / "config.json"


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


def test_load_config_fills_missing_sections(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"simulation_parameters": {"seed": 1}}))
    config = load_config(str(path))
    for section in CONFIG_SECTIONS:
        assert section in config
    assert config["simulation_parameters"] == {"seed": 1}


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.json"))


def test_load_config_bad_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    with pytest.raises(json.JSONDecodeError):
        load_config(str(path))


def test_load_config_requires_object(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2]")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_repository_config_is_valid():
    config = load_config(str(REPO_CONFIG))
    sim_config = SimulationConfig.from_params(config["simulation_parameters"])
    assert sim_config.particle_count == 10000
    assert sim_config.life_range == (100, 200)


def test_setup_logging_with_file(tmp_path, restore_root_logger):
    log_file = tmp_path / "logs" / "run.log"
    setup_logging({"logging": {"level": "debug", "log_file": str(log_file)}})

    assert restore_root_logger.level == logging.DEBUG
    assert len(restore_root_logger.handlers) == 2
    logging.info("hello from the test")
    for handler in restore_root_logger.handlers:
        handler.flush()
    assert "hello from the test" in log_file.read_text()


def test_setup_logging_console_only(restore_root_logger):
    setup_logging({"logging": {"log_file": ""}}, level="warning")
    assert restore_root_logger.level == logging.WARNING
    assert len(restore_root_logger.handlers) == 1
