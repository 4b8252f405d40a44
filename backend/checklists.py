"""Pre-ride checklist templates and checklist clean-up."""

from typing import Any, Iterable

from models import ChecklistItem, ChecklistTemplate

DEFAULT_TEMPLATE_ID: str = "ADV"

_TEMPLATES: tuple[tuple[str, str, tuple[str, ...]], ...] = (
    (
        "ADV",
        "ADV mixed (default)",
        (
            "Inspect tires & pressures",
            "Check oil level & fluids",
            "Pack tools, spares, and repair kit",
            "Verify documents (license, registration, insurance)",
            "Download offline maps / GPX to nav device",
            "Share itinerary & emergency contacts",
        ),
    ),
    (
        "ROAD",
        "Road trip",
        (
            "Inspect tires, pressures, and tread wear",
            "Check chain / shaft / belt and lube as needed",
            "Confirm fuel range and next fuel stops",
            "Pack rain gear and extra layers",
            "Verify lodging reservations and arrival windows",
            "Sync nav route to phone / GPS",
        ),
    ),
    (
        "OFFROAD",
        "Off-road day",
        (
            "Set tire pressures for dirt / mixed terrain",
            "Inspect skid plate, crash bars, and handguards",
            "Pack tubes / plugs, pump, and tire irons",
            "Check toolkit, tow strap, and first-aid kit",
            "Confirm water, snacks, and extra fuel if needed",
            "Download offline topo maps / tracks",
        ),
    ),
    (
        "BDR",
        "BDR / backcountry",
        (
            "Review BDR route notes and seasonal closures",
            "Check tire condition and choose appropriate tires",
            "Pack camping kit and cold-weather layers",
            "Plan bail-out options and resupply towns",
            "Share full BDR itinerary and check-in plan",
            "Load BDR section GPX on all nav devices",
        ),
    ),
)


def list_templates() -> list[ChecklistTemplate]:
    """Returns every template with fresh, unchecked items."""
    return [
        ChecklistTemplate(
            id=template_id,
            label=label,
            items=[ChecklistItem(label=item) for item in items],
        )
        for template_id, label, items in _TEMPLATES
    ]


def default_checklist() -> list[ChecklistItem]:
    for template in list_templates():
        if template.id == DEFAULT_TEMPLATE_ID:
            return template.items
    return []


def sanitize_checklist(items: Iterable[dict[str, Any]]) -> list[ChecklistItem]:
    """Trims labels, drops blank items and coerces ``is_done`` to bool.

    Order is preserved; it becomes the saved order of the checklist.
    """
    cleaned: list[ChecklistItem] = []
    for item in items:
        label = item.get("label")
        label = label.strip() if isinstance(label, str) else ""
        if not label:
            continue
        cleaned.append(ChecklistItem(label=label, is_done=bool(item.get("is_done"))))
    return cleaned
