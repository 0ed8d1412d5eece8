from __future__ import annotations

import pytest

from optigraph.i18n import is_valid_language_code, to_backend_locale, to_url_locale


@pytest.mark.parametrize(
    ("url_locale", "expected"),
    [
        ("fr-ca", "fr_CA"),
        ("pt-br", "pt_BR"),
        ("zh-Hans-HK", "zh_Hans_HK"),
        ("ZH-hant-tw", "zh_hant_TW"),
        ("EN", "en"),
        ("nl_be", "nl_BE"),
    ],
)
def test_to_backend_locale(url_locale: str, expected: str):
    assert to_backend_locale(url_locale) == expected


def test_to_url_locale_only_swaps_separators():
    assert to_url_locale("nb_NO") == "nb-NO"
    assert to_url_locale("zh_Hans_HK") == "zh-Hans-HK"
    assert to_url_locale("Fr_cA") == "Fr-cA"


def test_round_trip_holds_for_canonical_casing():
    assert to_url_locale(to_backend_locale("fr-CA")) == "fr-CA"


def test_round_trip_does_not_preserve_unexpected_casing():
    assert to_url_locale(to_backend_locale("FR-ca")) == "fr-CA"
    assert to_url_locale(to_backend_locale("FR-ca")) != "FR-ca"


def test_more_than_three_segments_are_lowercased():
    assert to_backend_locale("a-B-c-D") == "a_b_c_d"


def test_language_code_validation():
    assert is_valid_language_code("en")
    assert is_valid_language_code("fr-CA")
    assert is_valid_language_code("es-419") is False
    assert is_valid_language_code("zh-Hans-HK") is False
    assert is_valid_language_code("english") is False
