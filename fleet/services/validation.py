# fleet/services/validation.py
"""
Field checks shared by the entity stores.
The API already validates bodies through pydantic; these run again at the
service boundary so scripts and other callers get the same guarantees.
"""

from fleet.exceptions import ValidationError


def clean_fields(fields: dict, allowed: dict, required=(), nullable=()) -> dict:
    """
    Check `fields` against `allowed` ({name: str | Enum subclass | bool}).

    Strips strings, coerces enum values and rejects unknown keys, missing
    `required` keys, blanks and out-of-enum values. Raises ValidationError
    with one {field, message} entry per offending field.
    """
    errors = []
    cleaned = {}

    for name in fields:
        if name not in allowed:
            errors.append({"field": name, "message": "unknown field"})

    for name in required:
        value = fields.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            errors.append({"field": name, "message": "field required"})

    for name, kind in allowed.items():
        if name not in fields:
            continue
        value = fields[name]
        if value is None:
            if name in nullable:
                cleaned[name] = None
            elif name not in required:
                errors.append({"field": name, "message": "may not be null"})
            continue

        if kind is str:
            if not isinstance(value, str):
                errors.append({"field": name, "message": "must be a string"})
                continue
            value = value.strip()
            if not value and name not in nullable:
                if name not in required:
                    errors.append({"field": name, "message": "may not be blank"})
                continue
            cleaned[name] = value or None
        elif kind is bool:
            if not isinstance(value, bool):
                errors.append({"field": name, "message": "must be a boolean"})
                continue
            cleaned[name] = value
        else:
            try:
                cleaned[name] = kind(value)
            except ValueError:
                choices = ", ".join(m.value for m in kind)
                errors.append({"field": name, "message": f"must be one of: {choices}"})

    if errors:
        raise ValidationError("Invalid field values", details=errors)
    return cleaned
