"""Tests for Amazon link building, share links and placeholder images."""
from urllib.parse import parse_qs, urlparse

import pytest

from src.integrations.amazon.links import extract_asin, product_url, reviews_url, share_links
from src.services.image_service import ERROR_LABEL, PLACEHOLDER_LABEL, generate_placeholder_svg


class TestExtractAsin:
    def test_bare_asin(self):
        assert extract_asin("b08n5wrwnw") == "B08N5WRWNW"

    def test_dp_url(self):
        assert extract_asin("https://www.amazon.com/dp/B08N5WRWNW") == "B08N5WRWNW"

    def test_gp_product_url(self):
        assert extract_asin("https://www.amazon.com/gp/product/B08N5WRWNW") == "B08N5WRWNW"

    def test_complex_url(self):
        assert extract_asin("https://www.amazon.com/Some-Product/dp/B08N5WRWNW/ref=sr_1_1") == "B08N5WRWNW"

    @pytest.mark.parametrize("value", ["", "  ", "B08N5", "https://www.amazon.com/s?k=mop"])
    def test_no_asin(self, value):
        assert extract_asin(value) is None


class TestProductLinks:
    def test_product_url_carries_tag(self):
        url = product_url("B08N5WRWNW", "store-20")
        assert url == "https://www.amazon.com/dp/B08N5WRWNW?tag=store-20"

    def test_tag_is_encoded(self):
        url = product_url("B08N5WRWNW", "a&b=c")
        assert parse_qs(urlparse(url).query) == {"tag": ["a&b=c"]}

    def test_reviews_url(self):
        assert reviews_url("B08N5WRWNW") == "https://www.amazon.com/product-reviews/B08N5WRWNW"

    @pytest.mark.parametrize("asin", ["", "bad"])
    def test_no_malformed_links(self, asin):
        assert product_url(asin, "store-20") is None
        assert reviews_url(asin) is None


class TestShareLinks:
    def test_networks(self):
        links = share_links("https://shop.example.com/", "Clean & Fresh")
        assert set(links) == {"facebook", "twitter", "whatsapp", "linkedin"}
        assert "u=https%3A%2F%2Fshop.example.com%2F" in links["facebook"]
        assert "text=Clean%20%26%20Fresh" in links["twitter"]


class TestPlaceholderSvg:
    def test_svg_contains_initials_and_label(self):
        svg = generate_placeholder_svg(PLACEHOLDER_LABEL).decode()
        assert svg.startswith("<svg")
        assert ">PI<" in svg
        assert PLACEHOLDER_LABEL in svg

    def test_muted_error_image(self):
        svg = generate_placeholder_svg(ERROR_LABEL, muted=True).decode()
        assert 'fill="#9ca3af"' in svg

    def test_label_is_escaped(self):
        svg = generate_placeholder_svg("<script>").decode()
        assert "<script>" not in svg

    def test_colour_is_deterministic(self):
        assert generate_placeholder_svg("Mop") == generate_placeholder_svg("Mop")
