# core/validators.py
from jsonschema import Draft7Validator, ValidationError as JSONSchemaError


def validate_json_payload(schema: dict, value, *, path="payload"):
    """
    Raises serializers.ValidationError when the JSON does not match the schema.
    """
    try:
        Draft7Validator(schema).validate(value if value is not None else {})
    except JSONSchemaError as e:
        loc = " → ".join([str(p) for p in e.path]) or path
        msg = f"{loc}: {e.message}"
        from rest_framework import serializers
        raise serializers.ValidationError({path: msg})
    return value
