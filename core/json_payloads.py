# core/json_payloads.py

# ----- Goal plan items -----
GOAL_ITEMS_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "id": {"type": "string"},
            "client": {"type": "string"},
            "bucket": {"type": "string"},
            "line_item": {"type": "string"},
            "weightage": {"type": "integer", "minimum": 0, "maximum": 100},
            "target": {"type": "string"},
            "actual": {"type": ["string", "null"]},
        },
        "additionalProperties": False,
    },
}

# ----- Notification -----
NOTIFICATION_TEMPLATES = {
    "GOAL_PLAN_SUBMITTED": {
        "title": "Goal plan awaiting your approval",
        "link": "/performance/goals/{goal_plan_id}/",
        "data": {"goal_plan_id": 0, "employee": "", "month": "YYYY-MM-DD", "is_edit": False},
    },
    "GOAL_PLAN_HR_REVIEW": {
        "title": "Goal plan awaiting HR approval",
        "link": "/performance/goals/{goal_plan_id}/",
        "data": {"goal_plan_id": 0, "employee": "", "month": "YYYY-MM-DD"},
    },
    "GOAL_PLAN_DECIDED": {
        "title": "Your goal plan was reviewed",
        "link": "/performance/goals/{goal_plan_id}/",
        "data": {"goal_plan_id": 0, "decision": "approved", "status": "", "notes": ""},
    },
    "GOAL_SCORING_SUBMITTED": {
        "title": "Goal actuals awaiting your approval",
        "link": "/performance/goals/{goal_plan_id}/",
        "data": {"goal_plan_id": 0, "employee": "", "month": "YYYY-MM-DD"},
    },
    "GOAL_SCORING_DECIDED": {
        "title": "Your goal scoring was reviewed",
        "link": "/performance/goals/{goal_plan_id}/",
        "data": {"goal_plan_id": 0, "decision": "approved", "status": "", "notes": ""},
    },
    "GOAL_REMINDER": {
        "title": "Monthly goal reminder",
        "message": "",
        "link": "/performance/goals/",
        "data": {"month": "YYYY-MM-DD", "kind": "create_plan"},
    },
    "SYSTEM": {
        "title": "System notice",
        "message": "",
        "severity": "info",
    },
}

for _tpl in NOTIFICATION_TEMPLATES.values():
    _tpl["payload_version"] = 1

NOTIFICATION_SCHEMA = {
    "type": "object",
    "properties": {
        "title": {"type": "string"},
        "link": {"type": "string"},
        "message": {"type": "string"},
        "severity": {"type": "string", "enum": ["info", "warning", "critical"]},
        "data": {"type": "object"},
        "payload_version": {"type": "number"}
    },
    "required": ["title"],
    "additionalProperties": True
}
