"""
Validation errors raised at the edges of the engine.

The core (board, search, policies) assumes valid input. These errors are
raised by the session and player registry when a caller hands over something
the core cannot act on; the interactive layer catches them and re-prompts.
"""


class InvalidKey(ValueError):
    """A move source proposed a key that is not an unmarked square."""

    def __init__(self, key: object, unmarked: tuple = ()):
        self.key = key
        self.unmarked = tuple(unmarked)
        super().__init__(f"Square {key!r} is not available; choose one of {list(self.unmarked)}")


class InvalidMarker(ValueError):
    pass


class DuplicateMarker(ValueError):
    pass


class InvalidName(ValueError):
    pass


class DuplicateName(ValueError):
    pass
