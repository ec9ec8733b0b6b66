"""
region_collection.py - Name-indexed pool of template elements.

Members are kept in insertion order. The only mutation is add_member; a name,
once bound, keeps resolving to the same element.
"""
from errors import DuplicateNameError, RegionNotFoundError


class RegionCollection:
    """Ordered, key-unique mapping of element name to element."""

    def __init__(self, label: str = "region"):
        self.label = label
        self._members = {}

    def check_new_name(self, name) -> None:
        """Raise unless name is a valid, not yet bound member name."""
        if not isinstance(name, str) or not name:
            raise ValueError(f"Invalid {self.label} name: {name!r}")
        if name in self._members:
            raise DuplicateNameError(f"Duplicate {self.label} name '{name}'")

    def add_member(self, name: str, element) -> None:
        self.check_new_name(name)
        self._members[name] = element

    def has_member(self, name) -> bool:
        try:
            return name in self._members
        except TypeError:
            # unhashable keys can never be member names
            return False

    def get_member(self, name):
        if not self.has_member(name):
            raise RegionNotFoundError(f"No {self.label} named '{name}'")
        return self._members[name]

    def names(self) -> list:
        return list(self._members)

    def items(self) -> list:
        return list(self._members.items())

    def __contains__(self, name) -> bool:
        return self.has_member(name)

    def __getitem__(self, name):
        return self.get_member(name)

    def __iter__(self):
        return iter(list(self._members.values()))

    def __len__(self) -> int:
        return len(self._members)

    def __repr__(self):
        return f"RegionCollection({self.label!r}, names={self.names()!r})"
