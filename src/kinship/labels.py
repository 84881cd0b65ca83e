"""Wording for relationship labels."""

ORDINALS = {
    1: "First",
    2: "Second",
    3: "Third",
    4: "Fourth",
    5: "Fifth",
    6: "Sixth",
    7: "Seventh",
    8: "Eighth",
}

BY_MARRIAGE = " (by Marriage)"


def ordinal(n: int) -> str:
    return ORDINALS.get(n, f"{n}th")


def removed_text(removed: int) -> str:
    """'' for same generation, then Once/Twice/Nx Removed."""
    if removed == 0:
        return ""
    if removed == 1:
        return "Once Removed"
    if removed == 2:
        return "Twice Removed"
    return f"{removed}x Removed"


def great_prefix(greats: int) -> str:
    return "Great-" if greats == 1 else f"{greats}x Great-"


def grand_prefix(grands: int) -> str:
    return "Grand-" if grands == 1 else f"{grands}x Grand-"


def gendered(is_female: bool, female: str, male: str) -> str:
    # Anything but an explicit female gender reads as male
    return female if is_female else male


def cousin_label(g1: int, g2: int) -> str:
    """'Second Cousin Once Removed' style label for two generation distances."""
    label = f"{ordinal(min(g1, g2) - 1)} Cousin"
    removed = removed_text(abs(g1 - g2))
    return f"{label} {removed}" if removed else label
