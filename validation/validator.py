from typing import Dict, Hashable, Iterable


class Validator:
    """
    Collects field-level validation failures.

    Only the first failure recorded for a field is kept, later checks on the
    same field are ignored. A Validator never raises, callers inspect valid()
    and errors once all checks have run.
    """

    def __init__(self):
        self.errors: Dict[str, str] = {}

    def valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, key: str, message: str) -> None:
        if key not in self.errors:
            self.errors[key] = message

    def check(self, ok: bool, key: str, message: str) -> None:
        if not ok:
            self.add_error(key, message)


def unique(values: Iterable[Hashable]) -> bool:
    """True when no value appears twice. Comparison is exact (case-sensitive)."""
    values = list(values)
    return len(values) == len(set(values))
