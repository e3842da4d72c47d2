"""Copyright (C) 2025 Pierre Marrec
SPDX-License-Identifier: GPL-3.0-or-later
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from services.simulation_service import SimulationService as SimulationService


def __getattr__(name: str) -> object:
    if name == "SimulationService":
        from services.simulation_service import SimulationService

        return SimulationService
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["SimulationService"]
