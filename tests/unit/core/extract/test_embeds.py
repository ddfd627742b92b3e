"""Unit tests for core/extract/embeds.py"""

import pytest

from pagemigrate.core.extract.embeds import preprocess_embeds


PLACEHOLDER = '<p class="VIDEO_EMBED_PLACEHOLDER">VIDEO_EMBED:::{}</p>'


@pytest.mark.parametrize("html,url", [
    ('<div class="video-embed"><iframe src="https://youtube.com/embed/x" allowfullscreen></iframe></div>',
     "https://youtube.com/embed/x"),
    ('<div class="video-embed">\n  <video controls>\n    <source src="/media/a.mp4" type="video/mp4">\n  </video>\n</div>',
     "/media/a.mp4"),
    ('<div class="video-embed"><video src="/media/b.webm" controls></video></div>',
     "/media/b.webm"),
])
def test_embed_shapes_rewritten(html, url):
    """iframe, video-source and video-src embeds all become placeholders."""
    assert preprocess_embeds(html) == PLACEHOLDER.format(url)


def test_surrounding_markup_preserved():
    """Markup around an embed is kept."""
    html = '<p>before</p><div class="video-embed"><iframe src="u"></iframe></div><p>after</p>'
    assert preprocess_embeds(html) == "<p>before</p>" + PLACEHOLDER.format("u") + "<p>after</p>"


def test_multiple_embeds():
    """Every embed in the body is rewritten."""
    html = ('<div class="video-embed"><iframe src="one"></iframe></div>'
            '<div class="video-embed"><video src="two"></video></div>')
    assert preprocess_embeds(html) == PLACEHOLDER.format("one") + PLACEHOLDER.format("two")


def test_unrecognized_markup_untouched():
    """Embeds without a recognized player are left alone."""
    html = '<div class="video-embed"><object data="x"></object></div><p>text</p>'
    assert preprocess_embeds(html) == html
