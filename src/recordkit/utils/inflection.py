"""String inflection helpers.

The rule table is a configuration value: an ``Inflector`` is built from an
``InflectionRules`` instance and never changes afterwards. Rules are matched
from the most recently added to the oldest, so extra rules override the
defaults they follow.
"""

import re
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from pydantic import Field

from recordkit.models.base import FrozenModel


Rule = Tuple[str, str]


class InflectionRules(FrozenModel):
    """Ordered inflection rules (regex pattern, replacement)."""

    plurals: List[Rule] = Field(default_factory=list, description="Plural rules")
    singulars: List[Rule] = Field(default_factory=list, description="Singular rules")
    irregulars: List[Rule] = Field(
        default_factory=list, description="Irregular (singular, plural) pairs"
    )
    uncountables: List[str] = Field(
        default_factory=list, description="Words with no plural form"
    )

    def extended(
        self,
        plurals: Iterable[Rule] = (),
        singulars: Iterable[Rule] = (),
        irregulars: Optional[Mapping[str, str]] = None,
        uncountables: Iterable[str] = (),
    ) -> "InflectionRules":
        """Return a copy with extra rules appended after the existing ones."""
        return InflectionRules(
            plurals=[*self.plurals, *plurals],
            singulars=[*self.singulars, *singulars],
            irregulars=[*self.irregulars, *(irregulars or {}).items()],
            uncountables=[*self.uncountables, *uncountables],
        )


DEFAULT_RULES = InflectionRules(
    plurals=[
        (r"$", "s"),
        (r"s$", "s"),
        (r"^(ax|test)is$", r"\1es"),
        (r"(octop|vir)us$", r"\1i"),
        (r"(octop|vir)i$", r"\1i"),
        (r"(alias|status)$", r"\1es"),
        (r"(bu)s$", r"\1ses"),
        (r"(buffal|tomat)o$", r"\1oes"),
        (r"([ti])um$", r"\1a"),
        (r"([ti])a$", r"\1a"),
        (r"sis$", "ses"),
        (r"(?:([^f])fe|([lr])f)$", r"\1\2ves"),
        (r"(hive)$", r"\1s"),
        (r"([^aeiouy]|qu)y$", r"\1ies"),
        (r"(x|ch|ss|sh)$", r"\1es"),
        (r"(matr|vert|ind)(?:ix|ex)$", r"\1ices"),
        (r"^(m|l)ouse$", r"\1ice"),
        (r"^(m|l)ice$", r"\1ice"),
        (r"^(ox)$", r"\1en"),
        (r"^(oxen)$", r"\1"),
        (r"(quiz)$", r"\1zes"),
    ],
    singulars=[
        (r"s$", ""),
        (r"(ss)$", r"\1"),
        (r"(n)ews$", r"\1ews"),
        (r"([ti])a$", r"\1um"),
        (r"((a)naly|(b)a|(d)iagno|(p)arenthe|(p)rogno|(s)ynop|(t)he)(sis|ses)$", r"\1sis"),
        (r"(^analy)(sis|ses)$", r"\1sis"),
        (r"([^f])ves$", r"\1fe"),
        (r"(hive)s$", r"\1"),
        (r"(tive)s$", r"\1"),
        (r"([lr])ves$", r"\1f"),
        (r"([^aeiouy]|qu)ies$", r"\1y"),
        (r"(s)eries$", r"\1eries"),
        (r"(m)ovies$", r"\1ovie"),
        (r"(x|ch|ss|sh)es$", r"\1"),
        (r"^(m|l)ice$", r"\1ouse"),
        (r"(bus)(es)?$", r"\1"),
        (r"(o)es$", r"\1"),
        (r"(shoe)s$", r"\1"),
        (r"(cris|test)(is|es)$", r"\1is"),
        (r"^(a)x[ie]s$", r"\1xis"),
        (r"(octop|vir)(us|i)$", r"\1us"),
        (r"(alias|status)(es)?$", r"\1"),
        (r"^(ox)en", r"\1"),
        (r"(vert|ind)ices$", r"\1ex"),
        (r"(matr)ices$", r"\1ix"),
        (r"(quiz)zes$", r"\1"),
        (r"(database)s$", r"\1"),
    ],
    irregulars=[
        ("person", "people"),
        ("man", "men"),
        ("child", "children"),
        ("sex", "sexes"),
        ("move", "moves"),
        ("zombie", "zombies"),
    ],
    uncountables=[
        "equipment",
        "information",
        "rice",
        "money",
        "species",
        "series",
        "fish",
        "sheep",
        "jeans",
        "police",
    ],
)


class Inflector:
    """Applies an ``InflectionRules`` table to words."""

    def __init__(self, rules: Optional[InflectionRules] = None):
        self.rules = rules if rules is not None else DEFAULT_RULES
        # Newest rule first
        self._plurals = [
            (re.compile(pattern, re.IGNORECASE), replacement)
            for pattern, replacement in reversed(self.rules.plurals)
        ]
        self._singulars = [
            (re.compile(pattern, re.IGNORECASE), replacement)
            for pattern, replacement in reversed(self.rules.singulars)
        ]
        self._to_plural: Dict[str, str] = {}
        self._to_singular: Dict[str, str] = {}
        for singular, plural in self.rules.irregulars:
            self._to_plural[singular.lower()] = plural
            self._to_singular[plural.lower()] = singular
        self._uncountables = {word.lower() for word in self.rules.uncountables}

    def with_rules(
        self,
        plurals: Iterable[Rule] = (),
        singulars: Iterable[Rule] = (),
        irregulars: Optional[Mapping[str, str]] = None,
        uncountables: Iterable[str] = (),
    ) -> "Inflector":
        """Return a new inflector whose rules extend this one's."""
        return Inflector(
            self.rules.extended(plurals, singulars, irregulars, uncountables)
        )

    def pluralize(self, word: str) -> str:
        return self._inflect(word, self._to_plural, self._plurals)

    def singularize(self, word: str) -> str:
        return self._inflect(word, self._to_singular, self._singulars)

    def _inflect(self, word: str, irregular: Dict[str, str], rules) -> str:
        if not word:
            return word

        # Only the last segment of compound names is inflected
        head, _, last = word.rpartition("_")
        prefix = f"{head}_" if head else ""
        lowered = last.lower()

        if lowered in self._uncountables:
            return word

        if lowered in irregular:
            replacement = irregular[lowered]
            if last[:1].isupper():
                replacement = replacement[:1].upper() + replacement[1:]
            return prefix + replacement

        for pattern, replacement in rules:
            if pattern.search(last):
                return prefix + pattern.sub(replacement, last, count=1)
        return word

    def underscore(self, word: str) -> str:
        """Convert ``BlogPost`` or ``blog-post`` into ``blog_post``."""
        word = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", word)
        word = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", word)
        return word.replace("-", "_").replace(" ", "_").lower()

    def camelize(self, word: str) -> str:
        """Convert ``blog_post`` into ``BlogPost``."""
        return "".join(part[:1].upper() + part[1:] for part in word.split("_") if part)

    def humanize(self, word: str) -> str:
        """Make an attribute name readable: ``author_id`` becomes ``Author``."""
        word = self.underscore(word)
        if word.endswith("_id"):
            word = word[: -len("_id")]
        word = word.replace("_", " ").strip()
        return word[:1].upper() + word[1:]

    def titleize(self, word: str) -> str:
        """Capitalize every word: ``first_name`` becomes ``First Name``."""
        return " ".join(part.capitalize() for part in self.humanize(word).split(" "))

    def tableize(self, class_name: str) -> str:
        return self.pluralize(self.underscore(class_name))

    def foreign_key(self, class_name: str) -> str:
        """Foreign key column name for a model type: ``BlogPost`` -> ``blog_post_id``."""
        return f"{self.singularize(self.underscore(class_name))}_id"


_default_inflector = Inflector()


def pluralize(word: str) -> str:
    return _default_inflector.pluralize(word)


def singularize(word: str) -> str:
    return _default_inflector.singularize(word)


def humanize(word: str) -> str:
    return _default_inflector.humanize(word)


def titleize(word: str) -> str:
    return _default_inflector.titleize(word)
