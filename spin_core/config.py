# spin_core/config.py
from __future__ import annotations
import logging
import os
import textwrap
from typing import Dict, List, Optional
import yaml

from .models import Item

# ===== App defaults =====
DEFAULT_CONFIG = {
    "mode": "simple",
    "team_count": 2,
    "select_count": 1,
    "remove_after_spin": False,
    "random_seed": None,   # None -> fresh entropy per session
}

LOG_LEVEL_ENV = "SPIN_CORE_LOG_LEVEL"
ASSETS_DIR = "assets"
PRESETS_PATH = os.path.join(ASSETS_DIR, "presets.yaml")
SAMPLE_ITEMS_PATH = os.path.join(ASSETS_DIR, "sample_items.csv")


def configure_logging(level: Optional[str] = None):
    level_name = (level or os.environ.get(LOG_LEVEL_ENV, "WARNING")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def ensure_assets_exist(base_dir: str = "."):
    os.makedirs(os.path.join(base_dir, ASSETS_DIR), exist_ok=True)
    presets = os.path.join(base_dir, PRESETS_PATH)
    if not os.path.exists(presets):
        with open(presets, "w", encoding="utf-8") as f:
            f.write(DEFAULT_PRESETS_YAML)
    sample = os.path.join(base_dir, SAMPLE_ITEMS_PATH)
    if not os.path.exists(sample):
        with open(sample, "w", encoding="utf-8") as f:
            f.write(DEFAULT_SAMPLE_ITEMS_CSV)


def load_presets_yaml(path: str) -> Dict[str, List[Item]]:
    """Preset name -> items. Each preset is a list of names or {name, weight} maps."""
    with open(path, "r", encoding="utf-8") as f:
        obj = yaml.safe_load(f) or {}
    out: Dict[str, List[Item]] = {}
    for preset, entries in obj.items():
        if not isinstance(entries, list):
            raise ValueError(f"Preset {preset} must be a list of items.")
        items = []
        for i, e in enumerate(entries):
            if isinstance(e, dict):
                items.append(Item(id=f"{preset}-{i}", name=str(e["name"]), weight=e.get("weight")))
            else:
                items.append(Item(id=f"{preset}-{i}", name=str(e)))
        out[preset] = items
    return out


# ===== Default presets (sidebar quick start) =====
DEFAULT_PRESETS_YAML = textwrap.dedent("""\
Lunch:
  - Pizza
  - Sushi
  - Tacos
  - Burgers
  - Salad
Chores:
  - Dishes
  - Laundry
  - Vacuum
  - Trash
Raffle:
  - {name: Gold ticket, weight: 10}
  - {name: Silver ticket, weight: 30}
  - {name: Bronze ticket, weight: 60}
""")

DEFAULT_SAMPLE_ITEMS_CSV = textwrap.dedent("""\
name,weight
Alex,
Blake,
Casey,
Drew,
Emery,
Fin,
Gabe,
""")


# ===== Visual theme (wrapped in <style>) =====
def ui_css() -> str:
    return """
<style>
:root{
  --surface: rgba(18, 22, 31, 0.78);
  --line:#2a3142;
  --text:#eaf1fb;
  --sub:#B7C2D3;
  --accent: hsl(210, 90%, 60%);
  --radius:16px;
}
.card{
  background: var(--surface) !important;
  border:1px solid rgba(255,255,255,.05);
  border-radius:var(--radius);
  padding:18px;
}
.small{color:var(--sub);font-size:12px}
.chip{
  display:inline-block;padding:6px 10px;margin:2px;border:1px solid var(--line);
  border-radius:999px;
}
.winner{font-size:2rem;font-weight:700;color:var(--accent)}
</style>
"""
