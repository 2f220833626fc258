import uuid
from dataclasses import dataclass, asdict, fields
from typing import Optional

from jsonschema import Draft7Validator

from core.json_payloads import GOAL_ITEMS_SCHEMA

# must be filled before a plan leaves draft
REQUIRED_FIELDS = ("client", "bucket", "line_item", "target")


def new_item_id() -> str:
    return str(uuid.uuid4())


@dataclass
class GoalItem:
    id: str = ""
    client: str = ""
    bucket: str = ""
    line_item: str = ""
    weightage: int = 0
    target: str = ""
    actual: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "GoalItem":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in (data or {}).items() if k in known})

    def to_dict(self) -> dict:
        return asdict(self)

    def missing_fields(self) -> list:
        return [name for name in REQUIRED_FIELDS if not str(getattr(self, name) or "").strip()]

    @property
    def has_actual(self) -> bool:
        return bool(str(self.actual or "").strip())


def schema_errors(items) -> dict:
    """Map of "items[i].field" -> message for every JSON schema violation."""
    errors = {}
    for err in Draft7Validator(GOAL_ITEMS_SCHEMA).iter_errors(items):
        path = list(err.path)
        key = "items"
        if path:
            key += f"[{path[0]}]"
            if len(path) > 1:
                key += f".{path[1]}"
        errors.setdefault(key, err.message)
    return errors


def normalize_items(items) -> list:
    """
    Plain dict copies of ``items`` in order, every item with a unique id.
    Missing or repeated ids get a fresh UUID.
    """
    out, seen = [], set()
    for raw in items or ():
        item = raw if isinstance(raw, GoalItem) else GoalItem.from_dict(raw)
        if not item.id or item.id in seen:
            item.id = new_item_id()
        seen.add(item.id)
        out.append(item.to_dict())
    return out


def required_field_errors(items) -> dict:
    errors = {}
    items = list(items or ())
    if not items:
        errors["items"] = "Add at least one goal item"
    for idx, raw in enumerate(items):
        item = raw if isinstance(raw, GoalItem) else GoalItem.from_dict(raw)
        for name in item.missing_fields():
            errors[f"items[{idx}].{name}"] = "This field is required"
    return errors


def missing_actual_errors(items) -> dict:
    errors = {}
    for idx, raw in enumerate(items or ()):
        item = raw if isinstance(raw, GoalItem) else GoalItem.from_dict(raw)
        if not item.has_actual:
            errors[f"items[{idx}].actual"] = "Actual is required"
    return errors


def merge_actuals(items, submitted) -> list:
    """
    Copy of ``items`` with ``actual`` taken from ``submitted`` by item id.
    Every other field keeps the approved value; unknown ids are ignored.
    """
    actuals = {}
    for raw in submitted or ():
        data = raw.to_dict() if isinstance(raw, GoalItem) else dict(raw)
        if data.get("id"):
            actuals[data["id"]] = data.get("actual")
    merged = []
    for raw in items or ():
        item = dict(raw)
        if item.get("id") in actuals:
            item["actual"] = actuals[item["id"]]
        merged.append(item)
    return merged


def clear_actuals(items) -> list:
    """Copy of ``items`` with every ``actual`` reset."""
    return [{**dict(raw), "actual": None} for raw in items or ()]
