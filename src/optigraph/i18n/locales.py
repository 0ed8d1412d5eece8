"""Conversion between URL locale tags and graph backend locale tags.

URL form uses hyphens (``fr-CA``, ``zh-Hans-HK``); the backend form uses
underscores with the language lowercased, the script left as given and the
region uppercased (``fr_CA``, ``zh_Hans_HK``).

The two functions are independent transforms rather than inverses:
``to_url_locale`` never changes case, so ``FR-ca`` becomes ``fr_CA`` and then
``fr-CA``, not ``FR-ca``.
"""

from __future__ import annotations

import re

_LANGUAGE_CODE = re.compile(r"^[a-z]{2}(-[a-z]{2,3})?$", re.IGNORECASE)


def to_backend_locale(url_locale: str) -> str:
    """``fr-ca`` -> ``fr_CA``, ``zh-Hans-HK`` -> ``zh_Hans_HK``, ``EN`` -> ``en``."""

    parts = url_locale.replace("-", "_").split("_")
    if len(parts) == 2:
        return f"{parts[0].lower()}_{parts[1].upper()}"
    if len(parts) == 3:
        return f"{parts[0].lower()}_{parts[1]}_{parts[2].upper()}"
    # Single segment, or a shape with no defined casing: lowercase throughout.
    return "_".join(parts).lower()


def to_url_locale(backend_locale: str) -> str:
    """``nb_NO`` -> ``nb-NO``. Case is left untouched."""

    return backend_locale.replace("_", "-")


def is_valid_language_code(code: str) -> bool:
    """Accept ``en`` or ``en-US`` style codes (two-letter language, optional 2-3 letter region)."""

    return bool(_LANGUAGE_CODE.match(code))
