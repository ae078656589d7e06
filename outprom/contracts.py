import json
from importlib import resources

from jsonschema import Draft7Validator


def load_schema(name: str) -> dict:
    with resources.files("outprom.schemas").joinpath(name).open("r", encoding="utf-8") as f:
        return json.load(f)


def validate(schema: dict, obj) -> list[str]:
    v = Draft7Validator(schema)
    errors = sorted(v.iter_errors(obj), key=lambda e: [str(p) for p in e.absolute_path])
    return [f"{'/'.join(str(p) for p in e.absolute_path) or '<root>'}: {e.message}" for e in errors]
