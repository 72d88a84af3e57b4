"""USDA-style soil texture classification from sand/silt/clay percentages.

The classifier is an ordered cascade of threshold rules over linear
combinations of silt and clay. Rule regions overlap at their edges, so the
first matching rule wins and the order of ``TEXTURE_RULES`` is part of the
observable behaviour: e.g. (sand=20, silt=40, clay=40) satisfies both the
Silty Clay and the Clay rules and must come out as Silty Clay.

Inputs that no rule claims fall back to Loam. This is a coarse
approximation of the texture triangle, not a point-in-polygon test.
"""

from collections.abc import Callable
from enum import Enum
from typing import NamedTuple

# Raw totals within this many percentage points of 100 are used as-is
NORMALIZATION_TOLERANCE = 5.0


class TextureLabel(str, Enum):
    """Soil texture classes produced by the classifier."""

    SAND = "Sand"
    LOAMY_SAND = "Loamy Sand"
    SANDY_LOAM = "Sandy Loam"
    SILT_LOAM = "Silt Loam"
    LOAM = "Loam"
    SANDY_CLAY_LOAM = "Sandy Clay Loam"
    SILTY_CLAY_LOAM = "Silty Clay Loam"
    CLAY_LOAM = "Clay Loam"
    SANDY_CLAY = "Sandy Clay"
    SILTY_CLAY = "Silty Clay"
    CLAY = "Clay"
    UNCLASSIFIED = "Unclassified"

    def __str__(self) -> str:
        return self.value


class TextureRule(NamedTuple):
    """One step of the cascade: a predicate over (sand, silt, clay)."""

    label: TextureLabel
    predicate: Callable[[float, float, float], bool]

    def matches(self, sand: float, silt: float, clay: float) -> bool:
        return self.predicate(sand, silt, clay)


# Evaluated top to bottom; do not reorder.
TEXTURE_RULES: tuple[TextureRule, ...] = (
    TextureRule(
        TextureLabel.SAND,
        lambda sand, silt, clay: silt + 1.5 * clay < 15,
    ),
    TextureRule(
        TextureLabel.LOAMY_SAND,
        lambda sand, silt, clay: silt + 1.5 * clay >= 15 and silt + 2 * clay < 30,
    ),
    TextureRule(
        TextureLabel.SANDY_LOAM,
        lambda sand, silt, clay: (
            7 <= clay < 20 and sand > 52 and silt + 2 * clay >= 30
        ),
    ),
    TextureRule(
        TextureLabel.SILT_LOAM,
        lambda sand, silt, clay: clay < 7 and silt >= 50 and silt + 2 * clay >= 30,
    ),
    TextureRule(
        TextureLabel.LOAM,
        lambda sand, silt, clay: 7 <= clay < 27 and 28 <= silt < 50 and sand <= 52,
    ),
    TextureRule(
        TextureLabel.SANDY_CLAY_LOAM,
        lambda sand, silt, clay: 20 <= clay < 35 and silt < 28 and sand > 45,
    ),
    TextureRule(
        TextureLabel.SILTY_CLAY_LOAM,
        lambda sand, silt, clay: 27 <= clay < 40 and sand <= 20,
    ),
    TextureRule(
        TextureLabel.CLAY_LOAM,
        lambda sand, silt, clay: 27 <= clay < 40 and 20 < sand <= 45,
    ),
    TextureRule(
        TextureLabel.SANDY_CLAY,
        lambda sand, silt, clay: clay >= 35 and sand > 45,
    ),
    TextureRule(
        TextureLabel.SILTY_CLAY,
        lambda sand, silt, clay: clay >= 40 and silt >= 40,
    ),
    TextureRule(
        TextureLabel.CLAY,
        lambda sand, silt, clay: clay >= 40 and sand <= 45 and silt < 40,
    ),
)

FALLBACK_LABEL = TextureLabel.LOAM


def normalize_composition(
    sand: float, silt: float, clay: float
) -> tuple[float, float, float] | None:
    """Rescale fractions to sum to 100 when the raw total is too far off.

    Args:
        sand: Sand percentage
        silt: Silt percentage
        clay: Clay percentage

    Returns:
        ``(sand, silt, clay)``, rescaled only when ``|100 - total|`` exceeds
        ``NORMALIZATION_TOLERANCE``; ``None`` when all three are zero and the
        sample cannot be classified.
    """
    total = sand + silt + clay
    if total == 0:
        return None

    if abs(100 - total) > NORMALIZATION_TOLERANCE:
        return (sand / total * 100, silt / total * 100, clay / total * 100)

    return (sand, silt, clay)


def classify_normalized(sand: float, silt: float, clay: float) -> TextureLabel:
    """Run the rule cascade on percentages without normalizing them first."""
    for rule in TEXTURE_RULES:
        if rule.matches(sand, silt, clay):
            return rule.label
    return FALLBACK_LABEL


def classify_soil_texture(sand: float, silt: float, clay: float) -> TextureLabel:
    """Classify a sand/silt/clay measurement into a texture label.

    Values are not range-checked; negative or oversized inputs go through
    the same arithmetic as any other.

    Args:
        sand: Sand percentage (nominally 0-100)
        silt: Silt percentage (nominally 0-100)
        clay: Clay percentage (nominally 0-100)

    Returns:
        The first matching ``TextureLabel``, ``TextureLabel.LOAM`` when no
        rule matches, or ``TextureLabel.UNCLASSIFIED`` for an all-zero input.
    """
    normalized = normalize_composition(sand, silt, clay)
    if normalized is None:
        return TextureLabel.UNCLASSIFIED
    return classify_normalized(*normalized)
