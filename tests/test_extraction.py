import pytest

from schemas.analysis import AnalysisRequest
from services.extraction import (
    UNKNOWN_SOURCE,
    derive_source_identity,
    extract_images,
    extract_title,
    political_category,
    reliability_label,
    source_identity_from_url,
)


@pytest.mark.parametrize(
    "score,label",
    [
        (1.0, "Very Reliable"),
        (0.9, "Very Reliable"),
        (0.89, "Reliable"),
        (0.75, "Reliable"),
        (0.74, "Mostly Reliable"),
        (0.6, "Mostly Reliable"),
        (0.59, "Mixed Reliability"),
        (0.4, "Mixed Reliability"),
        (0.39, "Somewhat Unreliable"),
        (0.25, "Somewhat Unreliable"),
        (0.24, "Unreliable"),
        (0.0, "Unreliable"),
    ],
)
def test_reliability_label_tiers(score, label):
    assert reliability_label(score) == label


@pytest.mark.parametrize(
    "score,category",
    [(0, "Far Left"), (20, "Far Left"), (21, "Center-Left"), (40, "Center-Left"),
     (50, "Centrist"), (61, "Center-Right"), (80, "Center-Right"), (81, "Far Right"), (100, "Far Right")],
)
def test_political_category_bands(score, category):
    assert political_category(score) == category


def test_source_identity_from_request_url():
    request = AnalysisRequest(content="", isHtml=True, isUrl=True, url="https://www.Example-News.com/a")
    identity = derive_source_identity(request)
    assert identity.domain == "www.example-news.com"
    assert identity.name == "Example News"


def test_source_identity_without_www():
    identity = source_identity_from_url("https://bbc.co.uk/news/world")
    assert identity.domain == "bbc.co.uk"
    assert identity.name == "Bbc"


def test_source_identity_from_og_url(article_html):
    request = AnalysisRequest(content=article_html, isHtml=True)
    identity = derive_source_identity(request, article_html)
    assert identity.domain == "www.daily-herald.co.uk"
    assert identity.name == "Daily Herald"


def test_source_identity_falls_back_to_unknown():
    request = AnalysisRequest(content="<p>No meta here</p>", isHtml=True)
    assert derive_source_identity(request, request.content) == UNKNOWN_SOURCE
    assert UNKNOWN_SOURCE.domain == "unknown-source.com"
    assert UNKNOWN_SOURCE.name == "Unknown Source"


def test_source_identity_ignores_unparseable_og_url():
    html = '<meta property="og:url" content="not a url">'
    request = AnalysisRequest(content=html, isHtml=True)
    assert derive_source_identity(request, html) == UNKNOWN_SOURCE


class TestExtractTitle:
    def test_title_tag(self):
        assert extract_title("<html><title>Foo Bar</title></html>", True) == "Foo Bar"

    def test_h1_when_no_title(self):
        assert extract_title('<h1 class="headline"> Big News </h1>', True) == "Big News"

    def test_og_title(self):
        html = '<meta property="og:title" content="Meta Headline">'
        assert extract_title(html, True) == "Meta Headline"

    def test_first_line_of_text(self):
        assert extract_title("Short headline\nBody text follows.", False) == "Short headline"

    def test_long_first_line_is_untitled(self):
        assert extract_title("x" * 150, False) == "Untitled Article"

    def test_empty_first_line_is_untitled(self):
        assert extract_title("\nBody", False) == "Untitled Article"

    def test_html_tags_ignored_for_plain_text(self):
        assert extract_title("<title>Foo</title>" + "y" * 200, False) == "Untitled Article"


class TestExtractImages:
    def test_multiple_images_in_order(self):
        markdown = "![a](http://x/1.png) text ![b](http://x/2.png)"
        assert extract_images(markdown) == ["http://x/1.png", "http://x/2.png"]

    def test_newlines_collapsed(self):
        markdown = "# Title\n\n![cap\n](http://x/1.png)\n\nMore"
        assert extract_images(markdown) == ["http://x/1.png"]

    def test_title_attribute_dropped(self):
        assert extract_images('![a](http://x/1.png "Caption")') == ["http://x/1.png"]

    def test_parentheses_inside_url_kept(self):
        url = "https://upload.wikimedia.org/wikipedia/commons/a/a1/Foo_(bar).jpg"
        assert extract_images(f"![cap]({url}) and ![b](http://x/2.png)") == [url, "http://x/2.png"]

    def test_plain_links_are_not_images(self):
        assert extract_images("[link](http://x/page)") == []
