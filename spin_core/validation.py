# FILE: spin_core/validation.py
from __future__ import annotations
from typing import Sequence

from .constants import (
    MAX_RECOMMENDED_TEAMS, MIN_ITEMS, MIN_TEAMS,
    MODE_MULTIPLE, MODE_SIMPLE, MODE_TEAMS, MODE_WEIGHTED,
)
from .models import Item, ValidationStatus, WheelConfig
from .weights import is_percentage_valid, total_percentage, zero_weight_items


def require_team_request(items: Sequence[Item], team_count: int):
    """Raise ValueError unless 2 <= team_count <= len(items)."""
    if team_count < MIN_TEAMS:
        raise ValueError(f"Teams mode requires at least {MIN_TEAMS} teams (got {team_count}).")
    if team_count > len(items):
        raise ValueError(
            f"Teams mode requires at least {team_count} items (one per team). "
            f"You have {len(items)} items for {team_count} teams."
        )


def get_validation_status(config: WheelConfig) -> ValidationStatus:
    """
    Setup-screen checks. Errors block the spin; warnings are advisory.
    """
    status = ValidationStatus()
    items = config.items

    if len(items) < MIN_ITEMS:
        status.errors.append(f"At least {MIN_ITEMS} items are required")

    if any(not it.name.strip() for it in items):
        status.errors.append("All items must have a name")

    names = [it.name.strip().lower() for it in items]
    if len(set(names)) != len(names):
        status.warnings.append("Some items have duplicate names")

    if config.mode == MODE_TEAMS:
        if len(items) < config.team_count:
            status.errors.append(
                f"Teams mode requires at least {config.team_count} items (one per team). "
                f"You have {len(items)} items for {config.team_count} teams."
            )
        if config.team_count < MIN_TEAMS:
            status.errors.append(f"Teams mode requires at least {MIN_TEAMS} teams")
        if config.team_count > MAX_RECOMMENDED_TEAMS:
            status.warnings.append(
                f"Having more than {MAX_RECOMMENDED_TEAMS} teams might be difficult to manage"
            )
        inert = len(config.team_constraints) - len(config.active_constraints())
        if inert > 0:
            status.warnings.append(f"{inert} constraint(s) reference removed items and will be ignored")

    elif config.mode == MODE_WEIGHTED:
        total = total_percentage(items)
        if not is_percentage_valid(total):
            direction = "low" if total < 100 else "high"
            status.errors.append(
                f"Total percentage is too {direction} ({total:.1f}%). Should be close to 100%."
            )
        zeros = zero_weight_items(items)
        if zeros:
            status.warnings.append(
                f"{len(zeros)} item(s) have 0% weight and will never be selected"
            )

    elif config.mode == MODE_MULTIPLE:
        if config.select_count > len(items):
            status.errors.append(
                f"Cannot select {config.select_count} items when only {len(items)} items are available"
            )
        if config.select_count < 1:
            status.errors.append("Must select at least 1 item in multiple mode")
        if config.select_count == len(items):
            status.warnings.append(
                "You're selecting all available items - consider using a different mode"
            )

    elif config.mode == MODE_SIMPLE:
        if config.remove_after_spin and len(items) < 3:
            status.warnings.append("With item removal enabled, you might run out of items quickly")

    return status
