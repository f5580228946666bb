"""
reference.py - Study resources attached to a weekly goal.

A reference is schema-loose: imports carry whatever keys the author wrote
(book, chapters, custom notes...). It is stored as a JSON object and must
come back with every key intact, so it stays a plain mapping with named
accessors for the keys the app understands.
"""


class Reference(dict):
    @property
    def type(self) -> str | None:
        return self.get("type")

    @property
    def title(self) -> str | None:
        return self.get("title")

    @property
    def section(self) -> str | None:
        return self.get("section")

    @property
    def book(self) -> str | None:
        return self.get("book")

    @property
    def chapters(self) -> list:
        return self.get("chapters") or []

    @property
    def url(self) -> str | None:
        return self.get("url")

    @property
    def description(self) -> str | None:
        return self.get("description")

    @property
    def display_title(self) -> str | None:
        """What the roadmap view shows next to the type label."""
        return self.title or self.section or self.book

    @classmethod
    def from_raw(cls, raw) -> "Reference":
        """Wrap a decoded JSON object; non-mappings become an untyped note."""
        if isinstance(raw, dict):
            return cls(raw)
        return cls({"type": "Reference", "title": str(raw)})
