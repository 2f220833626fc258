import datetime

MONTH = datetime.date(2025, 4, 1)


def goal_item(weightage=50, **fields):
    data = {
        "client": "Acme",
        "bucket": "Revenue",
        "line_item": "Renewals",
        "weightage": weightage,
        "target": "10 renewals",
        "actual": None,
    }
    data.update(fields)
    return data
