"""
Naming utilities for safe code generation.

Handles case conversions and keyword conflicts for identifiers
emitted into target-language source code.
"""

import re
from typing import Iterable, List, Optional, Set
from enum import Enum


class NamingCase(Enum):
    """Different naming case styles."""

    SNAKE_CASE = "snake"  # user_name
    CAMEL_CASE = "camel"  # userName
    PASCAL_CASE = "pascal"  # UserName
    KEBAB_CASE = "kebab"  # user-name
    SCREAMING_SNAKE = "screaming_snake"  # USER_NAME


# Word boundaries: explicit separators, a lowercase/digit followed by an
# uppercase letter, and the last capital of an acronym run ("HTTPServer").
_SEPARATORS = re.compile(r"[_\-\s]+")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CASE_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")


def split_words(name: str) -> List[str]:
    """
    Split an identifier into its words.

    Characters other than the separators are kept as they are, so the
    conversion is total over arbitrary input.
    """
    spaced = _ACRONYM_BOUNDARY.sub(r"\1 \2", name)
    spaced = _CASE_BOUNDARY.sub(r"\1 \2", spaced)
    return [word for word in _SEPARATORS.split(spaced) if word]


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


class NameSanitizer:
    """Handles case conversion and reserved-word escaping."""

    def __init__(
        self,
        reserved_words: Optional[Iterable[str]] = None,
        escape_prefix: str = "_",
    ):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words
            escape_prefix: Prefix added to names that collide with a reserved word
        """
        self.reserved_words: Set[str] = frozenset(reserved_words or ())
        self.escape_prefix = escape_prefix

    def sanitize_name(
        self, name: str, target_case: NamingCase = NamingCase.SNAKE_CASE
    ) -> str:
        """
        Convert a name to the target case and escape reserved words.

        Args:
            name: Original name to sanitize
            target_case: Desired case style

        Returns:
            Name safe for use in the target language
        """
        return self.fixup_keyword(self.convert_case(name, target_case))

    def convert_case(self, name: str, target_case: NamingCase) -> str:
        """
        Convert name to target case style without keyword escaping.

        Names without any word characters (``_``) are returned unchanged.
        """
        if not split_words(name):
            return name
        if target_case == NamingCase.SNAKE_CASE:
            return self._to_snake_case(name)
        elif target_case == NamingCase.CAMEL_CASE:
            return self._to_camel_case(name)
        elif target_case == NamingCase.PASCAL_CASE:
            return self._to_pascal_case(name)
        elif target_case == NamingCase.KEBAB_CASE:
            return self._to_kebab_case(name)
        elif target_case == NamingCase.SCREAMING_SNAKE:
            return self._to_snake_case(name).upper()
        else:
            return name

    def fixup_keyword(self, name: str) -> str:
        """Escape a name that collides with a reserved word."""
        if name in self.reserved_words:
            return f"{self.escape_prefix}{name}"
        return name

    def is_reserved(self, name: str) -> bool:
        """Check whether a name is a reserved word."""
        return name in self.reserved_words

    def _to_snake_case(self, name: str) -> str:
        """Convert to snake_case."""
        return "_".join(word.lower() for word in split_words(name))

    def _to_camel_case(self, name: str) -> str:
        """Convert to camelCase."""
        words = split_words(name)
        # First word lowercase, rest title case
        return words[0].lower() + "".join(_capitalize(word) for word in words[1:])

    def _to_pascal_case(self, name: str) -> str:
        """Convert to PascalCase."""
        return "".join(_capitalize(word) for word in split_words(name))

    def _to_kebab_case(self, name: str) -> str:
        """Convert to kebab-case."""
        return "-".join(word.lower() for word in split_words(name))
