from .exceptions import NotationNotFound
from .notations.base import Notation
from .notations.english import EnglishNotation
from .notations.german import GermanNotation

_NOTATIONS: list[type[Notation]] = [
    EnglishNotation,
    GermanNotation,
]


def get_notation(name: str) -> Notation:
    """Return an instantiated notation for the given name.

    Names are case-insensitive; ``czech`` is a synonym of ``german``.

    Raises NotationNotFound if no notation matches.
    """
    for cls in _NOTATIONS:
        if cls.can_handle(name):
            return cls()
    raise NotationNotFound(name)
