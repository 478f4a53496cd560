"""Tests for render option normalization."""

import pytest

from pdf_service.models import PageMargins, RenderOptions
from pdf_service.services.options import normalize_options, parse_bool, parse_timeout_ms


def test_defaults_when_no_params():
    options = normalize_options({})
    assert options == RenderOptions()
    assert options.format == "Letter"
    assert options.orientation == "portrait"
    assert options.scale == 1.0
    assert options.margin == PageMargins(top="0.5in", right="0.5in", bottom="0.5in", left="0.5in")
    assert options.print_background is True
    assert options.display_header_footer is False
    assert options.prefer_css_page_size is False
    assert options.tagged is True
    assert options.outline is False
    assert options.timeout_ms == 30000
    assert options.disposition == "attachment"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("5", 2.0),
        ("0", 0.1),
        ("-1", 0.1),
        ("abc", 1.0),
        ("", 1.0),
        ("nan", 1.0),
        ("inf", 1.0),
        ("0.75", 0.75),
        ("2", 2.0),
    ],
)
def test_scale_is_parsed_and_clamped(raw, expected):
    assert normalize_options({"scale": raw}).scale == pytest.approx(expected)


class TestMargins:
    def test_uniform_margin_applies_to_all_sides(self):
        options = normalize_options({"margin": "1in"})
        assert options.margin.top == "1in"
        assert options.margin.left == "1in"

    def test_per_side_overrides(self):
        options = normalize_options({"margin": "1in", "marginTop": "2cm", "marginLeft": "0"})
        assert options.margin == PageMargins(top="2cm", right="1in", bottom="1in", left="0")

    def test_empty_values_fall_back(self):
        options = normalize_options({"margin": "", "marginBottom": ""})
        assert options.margin.bottom == "0.5in"


class TestBooleans:
    @pytest.mark.parametrize("token", ["true", "TRUE", "1", "yes", "Yes"])
    def test_true_tokens(self, token):
        assert parse_bool(token, False) is True

    @pytest.mark.parametrize("token", ["false", "0", "no", "on", ""])
    def test_other_tokens_are_false(self, token):
        assert parse_bool(token, True) is False

    def test_absent_uses_default(self):
        assert parse_bool(None, True) is True
        assert parse_bool(None, False) is False

    def test_explicit_false_overrides_true_default(self):
        options = normalize_options({"printBackground": "false", "tagged": "no"})
        assert options.print_background is False
        assert options.tagged is False

    def test_flags_mapped_from_camel_case(self):
        options = normalize_options(
            {"displayHeaderFooter": "1", "preferCSSPageSize": "yes", "outline": "true"}
        )
        assert options.display_header_footer
        assert options.prefer_css_page_size
        assert options.outline


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, 30000),
        ("", 30000),
        ("abc", 30000),
        ("0", 30000),
        ("45000", 45000),
        ("1500ms", 1500),
        ("-5", 0),
        ("12.9", 12),
    ],
)
def test_timeout_ms(raw, expected):
    assert parse_timeout_ms(raw) == expected


class TestEnumerations:
    def test_inline_disposition(self):
        assert normalize_options({"disposition": "inline"}).disposition == "inline"

    @pytest.mark.parametrize("value", ["INLINE", "download", ""])
    def test_other_dispositions_are_attachment(self, value):
        assert normalize_options({"disposition": value}).disposition == "attachment"

    @pytest.mark.parametrize("value", ["landscape", "LANDSCAPE", "Landscape"])
    def test_landscape(self, value):
        options = normalize_options({"orientation": value})
        assert options.orientation == "landscape"
        assert options.landscape

    def test_unknown_orientation_is_portrait(self):
        assert normalize_options({"orientation": "sideways"}).orientation == "portrait"

    def test_format_passthrough(self):
        assert normalize_options({"format": "A4"}).format == "A4"
        assert normalize_options({"format": ""}).format == "Letter"


def test_options_are_immutable():
    options = normalize_options({})
    with pytest.raises(Exception):
        options.scale = 1.5
