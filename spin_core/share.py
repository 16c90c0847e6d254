# FILE: spin_core/share.py
"""
Sharing and export of configurations and results.

Only consumes plain engine output; nothing here feeds back into selection.
"""
from __future__ import annotations
import hashlib
import io
import json
import logging
import time
from typing import Dict, List, Mapping, Optional, Sequence
from urllib.parse import parse_qs, urlencode
import pandas as pd
import yaml

from .constants import APP_NAME, EXPORT_VERSION, HISTORY_LIMIT, MODE_WEIGHTED, MODES
from .models import Constraint, Item, SelectionResult, WheelConfig

logger = logging.getLogger(__name__)

DEFAULT_SHARE_MESSAGE = f"Check out my {APP_NAME} results!"


def _short_id(seed: str, index: int) -> str:
    return f"{hashlib.md5(seed.encode()).hexdigest()[:8]}-{index}"


# -----------------------
# URL query round trip
# -----------------------
def config_to_query(config: WheelConfig) -> str:
    params: Dict[str, str] = {
        "mode": config.mode,
        # ids travel along so team constraints stay attached to their items
        "items": json.dumps([{"id": it.id, "name": it.name, "weight": it.weight} for it in config.items]),
    }
    if config.team_count:
        params["teamCount"] = str(config.team_count)
    if config.select_count:
        params["selectCount"] = str(config.select_count)
    if config.remove_after_spin:
        params["removeAfterSpin"] = "true"
    if config.team_constraints:
        params["teamConstraints"] = json.dumps([
            {"id": c.id, "item1Id": c.item1_id, "item2Id": c.item2_id, "type": c.type}
            for c in config.team_constraints
        ])
    return urlencode(params)


def share_url(base_url: str, config: WheelConfig) -> str:
    return f"{base_url.rstrip('/')}/?{config_to_query(config)}"


def _first(params: Mapping[str, Sequence[str]], key: str) -> Optional[str]:
    vals = params.get(key)
    return vals[0] if vals else None


def config_from_query(query: str) -> Optional[WheelConfig]:
    """
    Parse a shared query string. Returns None when it carries no wheel data or
    the items are unreadable; bad constraint JSON only drops the constraints.
    """
    params = parse_qs(query.lstrip("?"))
    if "mode" not in params and "items" not in params:
        return None

    try:
        raw_items = json.loads(_first(params, "items") or "[]")
        items = [
            Item(
                id=str(e.get("id") or _short_id(str(e.get("name", "")), i)),
                name=str(e.get("name", "")),
                weight=e.get("weight"),
            )
            for i, e in enumerate(raw_items)
        ]
    except (ValueError, TypeError, AttributeError) as e:
        logger.warning("Failed to parse shared items: %s", e)
        return None

    constraints: List[Constraint] = []
    raw_c = _first(params, "teamConstraints")
    if raw_c:
        try:
            constraints = [
                Constraint(
                    id=str(c.get("id") or f"constraint-{i}"),
                    item1_id=str(c["item1Id"]),
                    item2_id=str(c["item2Id"]),
                )
                for i, c in enumerate(json.loads(raw_c))
            ]
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            logger.warning("Failed to parse team constraints: %s", e)
            constraints = []

    mode = _first(params, "mode") or "simple"
    if mode not in MODES:
        mode = "simple"
    try:
        return WheelConfig(
            mode=mode,
            items=items,
            team_count=int(_first(params, "teamCount") or 2),
            select_count=int(_first(params, "selectCount") or 1),
            remove_after_spin=_first(params, "removeAfterSpin") == "true",
            team_constraints=constraints,
        )
    except ValueError as e:
        logger.warning("Failed to parse shared config: %s", e)
        return None


# -----------------------
# Text / CSV / JSON
# -----------------------
def format_result_text(
    result: SelectionResult,
    config: WheelConfig,
    url: str = "",
    message: str = DEFAULT_SHARE_MESSAGE,
) -> str:
    tail = f"\n\nTry it yourself: {url}" if url else ""
    if result.kind == "teams":
        lines = [
            f"Team {i + 1}: {', '.join(m.name for m in team)}"
            for i, team in enumerate(result.teams)
        ]
        text = f"{message}\n\n" + "\n".join(lines)
        constraints = config.active_constraints()
        if constraints:
            text += "\n\nConstraints applied:\n" + "\n".join(
                f"- {config.name_for(c.item1_id)} & {config.name_for(c.item2_id)} kept separate"
                for c in constraints
            )
        if result.violated_constraints:
            text += "\n\nCould not keep apart:\n" + "\n".join(
                f"- {config.name_for(c.item1_id)} & {config.name_for(c.item2_id)}"
                for c in result.violated_constraints
            )
        return text + tail

    names = []
    for it in result.items:
        if config.mode == MODE_WEIGHTED and it.weight:
            names.append(f"{it.name} ({it.weight:g}%)")
        else:
            names.append(it.name)
    prefix = f"#{result.position} " if result.position else ""
    return f"{message}\n\nResult: {prefix}{', '.join(names)}" + tail


def result_to_dataframe(result: SelectionResult) -> pd.DataFrame:
    if result.kind == "teams":
        rows = [
            {"Team": f"Team {i + 1}", "Members": ", ".join(m.name for m in team)}
            for i, team in enumerate(result.teams)
        ]
        return pd.DataFrame(rows, columns=["Team", "Members"])
    stamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(result.timestamp))
    rows = [
        {"Item": it.name, "Weight": it.weight if it.weight is not None else "N/A", "Timestamp": stamp}
        for it in result.items
    ]
    return pd.DataFrame(rows, columns=["Item", "Weight", "Timestamp"])


def result_to_csv_bytes(result: SelectionResult) -> bytes:
    buf = io.StringIO()
    result_to_dataframe(result).to_csv(buf, index=False)
    return buf.getvalue().encode("utf-8")


def export_json_bytes(
    config: WheelConfig,
    result: Optional[SelectionResult],
    history: Sequence[SelectionResult] = (),
) -> bytes:
    data = {
        "timestamp": time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime()),
        "config": config.model_dump(mode="json"),
        "result": result.model_dump(mode="json") if result else None,
        "history": [h.model_dump(mode="json") for h in history],
        "metadata": {"appName": APP_NAME, "version": EXPORT_VERSION, "exportType": "complete"},
    }
    return json.dumps(data, indent=2).encode("utf-8")


def append_history(
    history: Sequence[SelectionResult],
    result: SelectionResult,
    limit: int = HISTORY_LIMIT,
) -> List[SelectionResult]:
    """Newest first, capped at ``limit`` entries."""
    return [result, *history][:limit]


# -----------------------
# Items CSV / config YAML
# -----------------------
def load_items_csv(file_like) -> List[Item]:
    df = pd.read_csv(file_like)
    cols = {c.strip().lower(): c for c in df.columns}
    if "name" not in cols:
        raise ValueError("Missing required column: name")
    names = df[cols["name"]].fillna("").astype(str).str.strip()
    weights = (
        pd.to_numeric(df[cols["weight"]], errors="coerce")
        if "weight" in cols else pd.Series([None] * len(df))
    )
    items: List[Item] = []
    for i, (name, w) in enumerate(zip(names, weights)):
        if not name:
            continue
        weight = None if w is None or pd.isna(w) else float(w)
        items.append(Item(id=_short_id(name.lower(), i), name=name, weight=weight))
    return items


def generate_template_csv_bytes() -> bytes:
    return b"name,weight\n"


def save_config_yaml(path: str, config: WheelConfig):
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config.model_dump(mode="json"), f, sort_keys=False)


def load_config_yaml(path: str) -> WheelConfig:
    with open(path, "r", encoding="utf-8") as f:
        obj = yaml.safe_load(f) or {}
    if not isinstance(obj, dict):
        raise ValueError(f"{path} does not hold a wheel configuration.")
    return WheelConfig(**obj)
