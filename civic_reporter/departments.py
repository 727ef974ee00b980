"""Valid municipal departments for the Civic Issue Reporter."""

DEPARTMENTS: tuple[str, ...] = (
    "MCD",
    "PWD",
    "Traffic",
    "Water Supply",
    "Electricity",
)


def is_valid_department(value: object) -> bool:
    """Return True if ``value`` is exactly one of the known departments."""
    return isinstance(value, str) and value in DEPARTMENTS


def list_departments() -> list[str]:
    """Get all valid departments in their canonical order."""
    return list(DEPARTMENTS)
