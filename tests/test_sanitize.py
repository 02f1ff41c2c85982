import pytest

from content_safety.sanitizer import (
    DEFAULT_POLICY,
    STRICT_POLICY,
    Policy,
    core,
    sanitize,
    sanitize_with_report,
)
from content_safety.sanitizer.nodes import Element
from content_safety.sanitizer.parser import parse

EXECUTABLE_PAYLOADS = [
    "<script>alert(1)</script>",
    "<SCRIPT SRC=//evil.example/x.js></SCRIPT>",
    "<script/>alert(2)",
    '<iframe src="https://evil.example"></iframe>',
    '<object data="evil.swf"><param name="a" value="b"></object>',
    '<embed src="evil.swf">',
    "<img src=x onerror=alert(1)>",
    "<svg onload=alert(1)><circle r=5 /></svg>",
    '<a href="#" onmouseover="steal()">hover</a>',
    '<div onpointerover="x()" onanimationstart="y()">t</div>',
    "<body onload=alert(1)>page</body>",
    '<form action="/steal"><input name="pw"><button>Go</button></form>',
    '<p style="background:url(javascript:alert(1))">styled</p>',
    '<link rel="stylesheet" href="evil.css"><meta http-equiv="refresh" content="0">',
    "<p>&lt;script&gt;alert(1)&lt;/script&gt;</p>",
]

IDEMPOTENCE_CORPUS = [
    "plain text & more",
    "<p><b>bold <i>both</i></b> plain</p>",
    "<div onclick='x()'><script>a</script><p class=\"k\" style=\"c\">t</p><iframe></iframe></div>",
    '<svg viewBox="0 0 10 10" xmlns="http://www.w3.org/2000/svg">'
    '<clipPath id="c"><rect width="10" height="10"/></clipPath>'
    '<path d="M0 0L10 10" stroke="black"/></svg>',
    "<p>unterminated <b",
    '<a href="x>broken',
    "<ul><li>one<li>two</ul>",
    "<custom><p>x</p></custom><!-- c -->",
    "1 < 2 &amp; 3 > 2",
    "<p>&lt;script&gt;alert(1)&lt;/script&gt;</p>",
    "<table><tr><td>a<td>b</table>",
    "<p title='say \"hi\"'>it's</p>",
    "<p>a<p>b</p></p>",
    "<style>x > y</style><noscript><b>n</b></noscript>",
    '<img src="data:image/png;base64,AAAA"><a href="javascript:x">j</a>',
]


def _walk(nodes):
    for node in nodes:
        if isinstance(node, Element):
            yield node
            yield from _walk(node.children)


def test_unknown_wrapper_is_unwrapped():
    assert sanitize("<custom><p>hello</p></custom>") == "<p>hello</p>"


def test_forbidden_subtree_is_fully_dropped():
    assert sanitize("<script>alert(1)</script>safe") == "safe"


def test_event_handler_stripped_but_element_kept():
    assert sanitize('<div onclick="evil()">text</div>') == "<div>text</div>"


def test_data_attributes_stripped_by_default():
    assert sanitize('<div data-x="1">t</div>') == "<div>t</div>"


@pytest.mark.parametrize("value", [None, ""])
def test_null_and_empty_input(value):
    assert sanitize(value) == ""


def test_policy_defaults_to_documented_allow_list():
    assert sanitize(None, DEFAULT_POLICY) == ""
    assert sanitize("<u>x</u>") == "<u>x</u>"


@pytest.mark.parametrize("payload", EXECUTABLE_PAYLOADS)
def test_no_executable_content_survives(payload):
    out = sanitize(payload).lower()
    for marker in ("<script", "<iframe", "<object", "<embed", "<form", "<input", "<link", "<meta"):
        assert marker not in out
    for marker in ("onerror", "onload", "onmouseover", "onpointerover", "onanimationstart", "style="):
        assert marker not in out
    assert "alert(1)</script" not in out


@pytest.mark.parametrize("payload", EXECUTABLE_PAYLOADS + IDEMPOTENCE_CORPUS)
def test_output_is_closed_under_allow_list(payload):
    fragment = parse(sanitize(payload))
    for element in _walk(fragment.children):
        assert DEFAULT_POLICY.allowed_tag_name(element.tag) is not None
        for name, _value in element.attributes:
            assert DEFAULT_POLICY.allowed_attribute_name(name) is not None


@pytest.mark.parametrize("payload", IDEMPOTENCE_CORPUS)
def test_sanitize_is_idempotent(payload):
    once = sanitize(payload)
    assert sanitize(once) == once


def test_sanitize_is_deterministic_across_policy_construction_order():
    first = Policy(["p", "b", "a"], ["href", "class"], forbidden_tags=["script"])
    second = Policy({"a", "b", "p"}, ("class", "href"), forbidden_tags={"script"})
    markup = '<p class="x"><a href="/y" class="z">l</a><b>b</b><script>s</script></p>'
    assert first == second
    assert sanitize(markup, first) == sanitize(markup, second)
    assert sanitize(markup, first) == sanitize(markup, first)


def test_svg_markup_keeps_camel_case_names():
    markup = (
        '<SVG VIEWBOX="0 0 10 10" xmlns:xlink="http://www.w3.org/1999/xlink">'
        '<clippath id="c"><rect x="0" y="0" width="10" height="10"/></clippath>'
        '<use xlink:href="#icon"/><path d="M0 0" fill="none" stroke-width="2"/>'
        "</SVG>"
    )
    assert sanitize(markup) == (
        '<svg viewBox="0 0 10 10" xmlns:xlink="http://www.w3.org/1999/xlink">'
        '<clipPath id="c"><rect x="0" y="0" width="10" height="10"></rect></clipPath>'
        '<use xlink:href="#icon"></use><path d="M0 0" fill="none" stroke-width="2"></path>'
        "</svg>"
    )


def test_text_and_attribute_values_are_escaped():
    markup = '<a href="/x?a=1&amp;b=2" title=\'say "hi"\'>Tom &amp; Jerry &lt;3</a>'
    assert sanitize(markup) == (
        '<a href="/x?a=1&amp;b=2" title="say &quot;hi&quot;">Tom &amp; Jerry &lt;3</a>'
    )


def test_void_and_unclosed_elements_serialize_balanced():
    assert sanitize("<p>a<br>b<hr/>c") == "<p>a<br>b<hr>c</p>"
    assert sanitize("<p><b>bold") == "<p><b>bold</b></p>"
    assert sanitize('<img src="a.png" alt="A"></img>') == '<img src="a.png" alt="A">'


def test_malformed_markup_degrades_to_text():
    # an unterminated tag is kept as text or dropped, never emitted as a tag
    out = sanitize("<p>hi <b")
    assert out in ("<p>hi &lt;b</p>", "<p>hi </p>")
    assert sanitize(out) == out
    assert sanitize("1 < 2 and 3 > 2") == "1 &lt; 2 and 3 &gt; 2"
    assert sanitize("text</div>more") == "textmore"
    assert sanitize("<b><i>x</b>y</i>") == "<b><i>x</i></b>y"


def test_comments_are_dropped():
    assert sanitize("<p>a<!-- hidden -->b</p>") == "<p>ab</p>"
    assert sanitize("<!DOCTYPE html><p>x</p>") == "<p>x</p>"


def test_forbidden_inside_unwrapped_element_is_still_dropped():
    markup = "<section><script>x</script><b>y</b><textarea>z</textarea></section>"
    assert sanitize(markup) == "<b>y</b>"


def test_forbidden_wins_over_allowed():
    policy = Policy(
        allowed_tags={"p", "script"},
        allowed_attributes={"class", "style"},
        forbidden_tags={"SCRIPT"},
        forbidden_attributes={"style"},
    )
    markup = '<p class="a" style="color:red">x<script>y</script></p>'
    assert sanitize(markup, policy) == '<p class="a">x</p>'


def test_event_handler_prefix_cannot_be_allowed_back():
    policy = DEFAULT_POLICY.extend(allowed_attributes=["onclick", "onwhatever"])
    assert sanitize('<b onclick="x" onwhatever="y">t</b>', policy) == "<b>t</b>"


def test_data_attributes_when_enabled_still_need_allow_listing():
    policy = DEFAULT_POLICY.extend(
        allowed_attributes=["data-x"], allow_data_attributes=True
    )
    assert sanitize('<div data-x="1" data-y="2">t</div>', policy) == '<div data-x="1">t</div>'


def test_default_policy_strips_script_urls():
    markup = (
        '<a href="javascript:alert(document.cookie)">a</a>'
        '<a href="VBScript:msgbox(1)">b</a>'
        '<a href="data:text/html,<script>alert(1)</script>">c</a>'
        '<svg><use xlink:href="javascript:alert(1)"></use></svg>'
    )
    out = sanitize(markup)
    assert "script:" not in out.lower()
    assert "data:" not in out
    assert out == "<a>a</a><a>b</a><a>c</a><svg><use></use></svg>"


def test_default_policy_keeps_safe_urls():
    markup = (
        '<a href="https://example.com">a</a>'
        '<a href="tel:+15550100">b</a>'
        '<a href="ftp://files.example.com/x">c</a>'
        '<a href="../relative?q=a:b#top">d</a>'
        '<img src="data:image/png;base64,AAAA" alt="qr">'
    )
    assert sanitize(markup) == markup


def test_strict_policy_rejects_unsafe_url_schemes():
    markup = (
        '<a href="javascript:alert(1)">a</a>'
        '<a href=" JaVa&#x09;Script:alert(1)">b</a>'
        '<img src="data:image/png;base64,AAAA" alt="qr">'
        '<a href="https://example.com/a:b">c</a>'
        '<a href="/relative/path:x">d</a>'
        '<a href="mailto:studio@example.com">e</a>'
        '<a href="#top">f</a>'
    )
    assert sanitize(markup, STRICT_POLICY) == (
        "<a>a</a>"
        "<a>b</a>"
        '<img alt="qr">'
        '<a href="https://example.com/a:b">c</a>'
        '<a href="/relative/path:x">d</a>'
        '<a href="mailto:studio@example.com">e</a>'
        '<a href="#top">f</a>'
    )


def test_depth_limit_flattens_deep_structure():
    policy = DEFAULT_POLICY.extend(max_depth=3)
    markup = "<div><div><div><div><div>deep</div></div></div></div></div>"
    out, report = sanitize_with_report(markup, policy)
    assert out == "<div><div><div>deep</div></div></div>"
    assert report.truncated_tags == 2


def test_adversarial_nesting_does_not_raise():
    markup = "<div>" * 5000 + "x" + "</div>" * 5000
    out = sanitize(markup)
    assert out.count("<div>") == DEFAULT_POLICY.max_depth
    assert "x" in out
    assert sanitize(out) == out


def test_report_counts_removed_content():
    markup = (
        '<custom><p onclick="x" class="a">hi</p></custom>'
        "<!--c--><script>s</script>"
    )
    out, report = sanitize_with_report(markup)
    assert out == '<p class="a">hi</p>'
    assert report.dropped_subtrees == 1
    assert report.unwrapped_tags == 1
    assert report.stripped_attributes == 1
    assert report.dropped_comments == 1
    assert report.truncated_tags == 0
    assert report.modified is True


def test_report_untouched_for_clean_input():
    out, report = sanitize_with_report("<p>fine</p>")
    assert out == "<p>fine</p>"
    assert report.modified is False


def test_non_string_input_is_coerced():
    assert sanitize(b"<b>x</b><script>y</script>") == "<b>x</b>"
    assert sanitize(42) == "42"


def test_internal_failure_fails_closed(monkeypatch):
    def boom(*_args, **_kwargs):
        raise RuntimeError("parser exploded")

    monkeypatch.setattr(core, "parse", boom)
    assert sanitize("<p>anything</p>") == ""


def test_raw_text_tags_are_never_emitted_even_when_allowed():
    policy = DEFAULT_POLICY.extend(allowed_tags=["style", "xmp", "noscript"])
    assert policy.allowed_tag_name("style") is None

    once = sanitize("<style>a > b { }</style>", policy)
    assert once == "a &gt; b { }"
    assert sanitize(once, policy) == once


def test_forbidden_elements_past_depth_limit_are_dropped_whole():
    policy = DEFAULT_POLICY.extend(max_depth=1)
    markup = (
        "<div><object><p>secret</p></object>"
        "<span><button>Go</button>kept</span><!--c--></div>"
    )
    out, report = sanitize_with_report(markup, policy)
    assert out == "<div>kept</div>"
    assert report.dropped_subtrees == 2
    assert report.truncated_tags == 1
    assert report.dropped_comments == 1
