"""Small numeric and serialization helpers shared by the calculators."""

from dataclasses import fields, is_dataclass


def ratio(numerator: float, denominator: float) -> float:
    """numerator / denominator, or 0.0 when the denominator is empty."""
    if not denominator:
        return 0.0
    return numerator / denominator


def pct(numerator: float, denominator: float) -> float:
    """Percentage on a 0-100 scale, or 0.0 when the denominator is empty."""
    return ratio(numerator, denominator) * 100


def camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def to_camel_dict(record) -> dict:
    """Serialize a stats dataclass with camelCase keys for UI consumers.

    Nested stats dataclasses are serialized recursively; None stays None so
    absent categories come out as explicit nulls.
    """
    out = {}
    for f in fields(record):
        value = getattr(record, f.name)
        if is_dataclass(value):
            value = to_camel_dict(value)
        elif isinstance(value, (frozenset, set)):
            value = sorted(value)
        elif isinstance(value, tuple):
            value = list(value)
        out[camel(f.name)] = value
    return out
