"""Response key normalization.

Hosts report keys in different vocabularies: DOM ``KeyboardEvent.code``
values (``"Space"``, ``"KeyA"``, ``"ArrowLeft"``), ``KeyboardEvent.key``
values (``" "``, ``"a"``), or toolkit names (``"space"``, ``"return"``).
``normalize_key`` maps all of them onto one canonical token so that a
configured key matches however the host spells the press.
"""

from __future__ import annotations

import re

KEY_ALIASES: dict[str, str] = {
    " ": "space",
    "space": "space",
    "spacebar": "space",
    "enter": "enter",
    "return": "enter",
    "numpadenter": "enter",
    "esc": "escape",
    "escape": "escape",
    "arrowleft": "left",
    "left": "left",
    "arrowright": "right",
    "right": "right",
    "arrowup": "up",
    "up": "up",
    "arrowdown": "down",
    "down": "down",
}
"""Canonical token for each known spelling (lower-cased) of a key."""

_DOM_CODE = re.compile(r"^(?:key|digit|numpad)([a-z0-9])$")


def normalize_key(code: str) -> str:
    """Map a host key name onto its canonical token.

    Parameters
    ----------
    code : str
        Key name or code as reported by the host.

    Returns
    -------
    str
        Canonical token. Unknown names are returned case-folded.

    Examples
    --------
    >>> normalize_key(" ")
    'space'
    >>> normalize_key("Space")
    'space'
    >>> normalize_key("KeyF")
    'f'
    >>> normalize_key("Digit1")
    '1'
    >>> normalize_key("Return")
    'enter'
    """
    if code == " ":
        return KEY_ALIASES[" "]

    folded = code.strip().casefold()
    if folded in KEY_ALIASES:
        return KEY_ALIASES[folded]

    match = _DOM_CODE.match(folded)
    if match is not None:
        return match.group(1)

    return folded


def keys_match(configured: str, pressed: str) -> bool:
    """Check whether a pressed key satisfies the configured response key.

    Parameters
    ----------
    configured : str
        Configured response key.
    pressed : str
        Key reported by the host.

    Returns
    -------
    bool
        True if both normalize to the same token.

    Examples
    --------
    >>> keys_match("Space", " ")
    True
    >>> keys_match("f", "KeyF")
    True
    >>> keys_match("Space", "Enter")
    False
    """
    return normalize_key(configured) == normalize_key(pressed)
