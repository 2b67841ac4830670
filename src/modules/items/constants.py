"""Catalog constants shared by carts, orders and the history archive."""

from django.db import models


class Variant(models.TextChoices):
    """Mutually exclusive sub-SKUs of an item, each with its own stock."""

    REGULAR = "REGULAR", "Regular"
    EGGLESS = "EGGLESS", "Eggless"


# Client spellings accepted for each variant ("EGG" is the storefront's
# historical name for the regular recipe).
VARIANT_ALIASES: dict[str, str] = {
    "REGULAR": Variant.REGULAR,
    "EGG": Variant.REGULAR,
    "EGGLESS": Variant.EGGLESS,
}


def normalize_variant(value: str | None) -> str | None:
    """Map a client-supplied variant tag onto ``Variant``.

    ``None`` and blank strings stay ``None`` (the regular recipe).

    Raises:
        ValueError: the tag is not a known variant.
    """
    if value is None or not value.strip():
        return None
    try:
        return VARIANT_ALIASES[value.strip().upper()]
    except KeyError:
        raise ValueError(f"Unknown variant '{value}'.") from None


def is_eggless(variant: str | None) -> bool:
    return variant == Variant.EGGLESS
