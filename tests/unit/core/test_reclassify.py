"""Unit tests for core/reclassify.py"""

import pytest

from pagemigrate.core.models import (
    BlockNode, InlineSpan, code_block, divider, heading, paragraph, terminal, video,
)
from pagemigrate.core.reclassify import match_paragraph, reclassify


# --- helpers ---

def _widget(html: str, **props) -> BlockNode:
    """Paragraph carrying raw widget markup, as the structural parser emits it."""
    return BlockNode(type="paragraph", props=props, content=[InlineSpan(text=html)])


def _types(blocks: list[BlockNode]) -> list[str]:
    return [b.type for b in blocks]


# --- spurious header elision ---

@pytest.mark.parametrize("label", ["JavaScript", "JavaScript 12", "Python 3", "12"])
def test_header_before_code_is_dropped(label):
    """A one-word or word-plus-number paragraph before code is dropped."""
    out = reclassify([paragraph(label), code_block("x")])
    assert out == [code_block("x")]


def test_two_headers_before_code_are_dropped():
    """Two stacked header leftovers before code are both dropped."""
    out = reclassify([paragraph("JavaScript"), paragraph("12"), code_block("x")])
    assert out == [code_block("x")]


def test_header_before_terminal_is_dropped():
    """Header leftovers before a terminal block are dropped too."""
    out = reclassify([paragraph("bash"), terminal("t", "ls")])
    assert out == [terminal("t", "ls")]


def test_word_not_followed_by_code_is_kept():
    """Short paragraphs not followed by code are kept."""
    blocks = [paragraph("Hello"), paragraph("World")]
    assert reclassify(blocks) == blocks


def test_single_word_terminal_label_is_treated_as_header():
    """A bare 'Terminal' caption is elided before the label merge can see it."""
    assert reclassify([paragraph("Terminal"), code_block("ls")]) == [code_block("ls")]


# --- headings ---

def test_heading_gets_spacer_and_color():
    """Headings get a leading spacer and a mapped background color."""
    out = reclassify([heading("Setup", level=2)], {2: "#ffeb3b"})
    assert out == [paragraph(), heading("Setup", level=2, backgroundColor="yellow")]


def test_heading_without_color():
    """Headings without a scanned color get no backgroundColor."""
    out = reclassify([heading("Setup", level=1)], {2: "red"})
    assert out == [paragraph(), heading("Setup", level=1)]


def test_heading_spacer_not_doubled():
    """No spacer is added when an empty paragraph already precedes the heading."""
    blocks = [paragraph(), heading("A")]
    assert reclassify(blocks) == blocks


def test_reclassify_is_stable_on_its_output():
    """Reclassifying reclassified output changes nothing."""
    first = reclassify([paragraph("intro"), heading("A", level=2), heading("B", level=3)], {2: "blue"})
    assert reclassify(first) == first


# --- code blocks ---

@pytest.mark.parametrize("language,title", [("bash", "Terminal"), ("PowerShell", "powershell")])
def test_shell_code_becomes_terminal(language, title):
    """bash and powershell code blocks become terminals."""
    assert reclassify([code_block("ls", language)]) == [terminal(title, "ls")]


def test_other_code_passes_through():
    """Code blocks in other languages are unchanged."""
    assert reclassify([code_block("print(1)", "python")]) == [code_block("print(1)", "python")]


def test_terminal_label_merges_with_next_code_block():
    """A shell caption paragraph and the next code block merge into a terminal."""
    out = reclassify([paragraph("Windows powershell"), code_block("dir"), paragraph("after")])
    assert out == [terminal("Windows powershell", "dir"), paragraph("after")]


def test_terminal_label_without_code_is_kept():
    """A shell caption with no code block after it stays a paragraph."""
    blocks = [paragraph("Open a terminal window"), paragraph("then type")]
    assert reclassify(blocks) == blocks


# --- pass-through and recursion ---

def test_children_are_reclassified():
    """Non-paragraph blocks pass through with their children reclassified."""
    item = BlockNode(type="bulletListItem", content=[InlineSpan(text="a")],
                     children=[_widget('<div class="callout"><span class="callout-emoji">🔥</span> <span>Hot</span></div>')])
    [out] = reclassify([item])
    assert out.type == "bulletListItem"
    assert _types(out.children) == ["callout"]


def test_inputs_are_not_mutated():
    """reclassify leaves its input blocks unchanged."""
    blocks = [
        heading("A", level=2),
        paragraph("Windows powershell"),
        code_block("dir"),
        _widget('<div class="alert" data-type="error"><span>Bad</span></div>'),
        BlockNode(type="quote", content=[InlineSpan(text="q")], children=[paragraph(className="divider")]),
    ]
    before = [b.model_dump() for b in blocks]
    reclassify(blocks, {2: "red"})
    assert [b.model_dump() for b in blocks] == before


def test_paragraph_without_span_list_passes_through():
    """A paragraph without span content is emitted unchanged."""
    block = BlockNode(type="paragraph", content=None)
    assert reclassify([block]) == [block]


# --- block-level markers ---

def test_video_marker():
    """A VIDEO_EMBED marker paragraph becomes a video block."""
    assert match_paragraph(_widget("VIDEO_EMBED:::https://youtu.be/x")) == video("https://youtu.be/x")


def test_video_marker_without_url_is_not_a_video():
    """A marker with a blank URL is not a video."""
    assert match_paragraph(_widget("VIDEO_EMBED:::  ")) is None


def test_empty_divider_paragraph():
    """Only an empty divider-class paragraph becomes a divider."""
    assert match_paragraph(paragraph(className="divider")) == divider()
    assert match_paragraph(paragraph("text", className="divider")) is None


# --- widget markup ---

def test_terminal_block():
    """terminal-block markup gives a terminal with decoded code."""
    html = ('<div class="terminal-block"><div class="terminal-header"><span class="terminal-title">setup.sh</span>'
            '</div><pre><code>echo &lt;hi&gt; &amp;&amp; ls</code></pre></div>')
    assert match_paragraph(_widget(html)) == terminal("setup.sh", "echo <hi> && ls")


def test_terminal_block_without_title():
    """A missing terminal title becomes ''."""
    html = '<div class="terminal-block"><pre><code>ls</code></pre></div>'
    assert match_paragraph(_widget(html)) == terminal("", "ls")


def test_code_block_with_language():
    """code-block markup takes its language from a language- class."""
    html = '<div class="code-block"><pre><code class="hljs language-python">x = 1</code></pre></div>'
    assert match_paragraph(_widget(html)) == code_block("x = 1", "python")


def test_code_block_defaults_to_javascript():
    """code-block markup without a language class is javascript."""
    html = '<div class="code-block"><pre><code>let a;</code></pre></div>'
    assert match_paragraph(_widget(html)) == code_block("let a;", "javascript")


def test_code_block_with_shell_language_label():
    """A code-lang label of terminal or powershell makes a terminal."""
    html = ('<div class="code-block"><div class="code-header"><span class="code-lang">PowerShell</span></div>'
            '<pre><code>dir</code></pre></div>')
    assert match_paragraph(_widget(html)) == terminal("PowerShell", "dir")


def test_code_block_after_terminal_caption():
    """A shell keyword before the code block makes a terminal titled by it."""
    html = '<p>Terminal</p><div class="code-block"><pre><code>ls</code></pre></div>'
    assert match_paragraph(_widget(html)) == terminal("Terminal", "ls")


def test_shell_keyword_inside_code_is_ignored():
    """Shell keywords after the code-block marker do not make a terminal."""
    html = '<div class="code-block"><pre><code>open Terminal</code></pre></div>'
    assert match_paragraph(_widget(html)) == code_block("open Terminal", "javascript")


def test_callout():
    """callout markup gives its emoji and the first text span."""
    html = '<div class="callout"><span class="callout-emoji">🔥</span>\n<span>Save <b>often</b></span></div>'
    out = match_paragraph(_widget(html))
    assert out.type == "callout"
    assert out.props == {"emoji": "🔥"}
    assert out.text() == "Save <b>often</b>"


def test_callout_default_emoji():
    """An empty callout emoji falls back to the default."""
    out = match_paragraph(_widget('<div class="callout"><span class="callout-emoji"></span></div>'))
    assert out.props == {"emoji": "💡"}
    assert out.content == []


@pytest.mark.parametrize("attrs,emoji", [
    ('data-type="warning"', "⚠️"),
    ('data-type="error"', "🚨"),
    ('data-type="success"', "✅"),
    ('data-type="note"', "📌"),
    ('data-type="danger"', "💡"),
    ("", "💡"),
])
def test_alert_emoji(attrs, emoji):
    """Alert types map to emojis; unknown or missing types use the default."""
    html = f'<div class="alert alert-x" {attrs}><span>Careful</span></div>'
    out = match_paragraph(_widget(html))
    assert out.props == {"emoji": emoji}
    assert out.text() == "Careful"


def test_file_tree():
    """file-tree markup gives a terminal titled by data-title."""
    html = '<div class="file-tree" data-title="src"><pre>app/\n  main.py &amp; utils.py</pre></div>'
    assert match_paragraph(_widget(html)) == terminal("src", "app/\n  main.py & utils.py")


def test_file_tree_default_title():
    """A file tree without data-title is titled 'File Structure'."""
    html = '<div class="file-tree"><pre>a</pre></div>'
    assert match_paragraph(_widget(html)).props["title"] == "File Structure"


def test_diff_block_prefers_encoded_content():
    """The base64 data-content payload wins over the <pre> text."""
    html = '<div class="diff-block" data-content="LSBhCisgYg=="><pre>stale</pre></div>'
    assert match_paragraph(_widget(html)) == code_block("- a\n+ b", "diff")


def test_diff_block_without_pre():
    """A diff block needs only its encoded payload."""
    html = '<div class="diff-block" data-content="eCA8IHk="></div>'
    assert match_paragraph(_widget(html)) == code_block("x < y", "diff")


def test_diff_block_bad_payload_falls_back_to_pre():
    """Undecodable payloads fall back to the <pre> text."""
    html = '<div class="diff-block" data-content="not base64!"><pre>x &lt; y</pre></div>'
    assert match_paragraph(_widget(html)) == code_block("x < y", "diff")


def test_matcher_priority_within_span():
    """A span containing several markers is decided by the earliest matcher."""
    html = ('<div class="callout"><span class="callout-emoji">🔥</span></div>'
            '<div class="terminal-block"><pre><code>ls</code></pre></div>')
    assert match_paragraph(_widget(html)).type == "terminal"


def test_first_matching_span_wins():
    """The first span any matcher accepts decides the result."""
    block = BlockNode(type="paragraph", content=[
        InlineSpan(text="plain"),
        InlineSpan(text='<div class="file-tree"><pre>a</pre></div>'),
        InlineSpan(text='<div class="callout"><span class="callout-emoji">🔥</span></div>'),
    ])
    assert match_paragraph(block).type == "terminal"


def test_non_text_spans_are_ignored():
    """Only text spans are checked for widget markup."""
    block = BlockNode(type="paragraph", content=[
        InlineSpan(type="link", text='<div class="callout"></div>'),
    ])
    assert match_paragraph(block) is None


def test_unmatched_widget_passes_through():
    """Unknown widget markup is left as a paragraph."""
    block = _widget('<div class="mystery"><span>?</span></div>', className="mystery")
    assert reclassify([block]) == [block]


def test_no_markers_left_in_output():
    """Marker paragraphs never survive reclassification."""
    blocks = [
        _widget("VIDEO_EMBED:::u"),
        paragraph(className="divider"),
        _widget('<div class="alert"><span>a</span></div>'),
    ]
    out = reclassify(blocks)
    assert _types(out) == ["video", "divider", "callout"]
    assert all("VIDEO_EMBED:::" not in b.text() for b in out)


def test_bash_code_block_example():
    """A bash code block becomes a terminal titled 'Terminal'."""
    assert reclassify([code_block("ls -la", "bash")]) == [terminal("Terminal", "ls -la")]
