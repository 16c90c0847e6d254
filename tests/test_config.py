import logging
import os
from spin_core.config import (
    DEFAULT_CONFIG, PRESETS_PATH, SAMPLE_ITEMS_PATH, configure_logging,
    ensure_assets_exist, load_presets_yaml,
)
from spin_core.models import WheelConfig
from spin_core.share import load_items_csv


def test_assets_written_once(tmp_path):
    ensure_assets_exist(str(tmp_path))
    presets = tmp_path / PRESETS_PATH
    assert presets.exists()
    assert (tmp_path / SAMPLE_ITEMS_PATH).exists()
    presets.write_text("Mine:\n  - one\n  - two\n", encoding="utf-8")
    ensure_assets_exist(str(tmp_path))
    assert list(load_presets_yaml(str(presets))) == ["Mine"]


def test_default_presets(tmp_path):
    ensure_assets_exist(str(tmp_path))
    presets = load_presets_yaml(os.path.join(str(tmp_path), PRESETS_PATH))
    assert set(presets) == {"Lunch", "Chores", "Raffle"}
    assert [it.weight for it in presets["Raffle"]] == [10, 30, 60]
    assert presets["Lunch"][0].id == "Lunch-0"
    assert presets["Lunch"][0].weight is None


def test_sample_items_parse(tmp_path):
    ensure_assets_exist(str(tmp_path))
    with open(os.path.join(str(tmp_path), SAMPLE_ITEMS_PATH), encoding="utf-8") as f:
        items = load_items_csv(f)
    assert len(items) == 7
    assert all(it.weight is None for it in items)


def test_default_config_is_valid():
    cfg = WheelConfig(**DEFAULT_CONFIG)
    assert cfg.mode == "simple"
    assert cfg.random_seed is None


def test_configure_logging_reads_env(monkeypatch):
    root = logging.getLogger()
    saved, saved_level = list(root.handlers), root.level
    for h in saved:
        root.removeHandler(h)
    try:
        monkeypatch.setenv("SPIN_CORE_LOG_LEVEL", "debug")
        configure_logging()
        assert root.level == logging.DEBUG
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
        for h in saved:
            root.addHandler(h)
        root.setLevel(saved_level)
