"""Drag-and-drop — classification des zones + resolver."""
from .gesture import (
    CANVAS_ZONE,
    PALETTE_ZONE,
    DragGesture,
    DragOutcome,
    DragStatus,
    FocusPanel,
    ZoneCategory,
    ZoneRef,
    classify_zone,
    zone_identifier,
)
from .resolver import resolve_drag

__all__ = [
    "CANVAS_ZONE",
    "PALETTE_ZONE",
    "DragGesture",
    "DragOutcome",
    "DragStatus",
    "FocusPanel",
    "ZoneCategory",
    "ZoneRef",
    "classify_zone",
    "zone_identifier",
    "resolve_drag",
]
