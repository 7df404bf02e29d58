from locatorsynth.dom_extractor import extract_attributes, extract_display_name, extract_html_snapshot
from locatorsynth.soup_tree import SoupTree


def test_attributes_follow_fixed_order_and_skip_others() -> None:
    tree = SoupTree(
        '<a href="/cart" data-track="x" class="nav link" id="cart" aria-label="Cart" role="link">Cart</a>'
    )
    attrs = extract_attributes(tree, tree.select_one("a"))
    assert list(attrs) == ["id", "class", "aria-label", "role", "href"]
    assert attrs["class"] == "nav link"
    assert "data-track" not in attrs


def test_empty_attribute_value_is_kept() -> None:
    tree = SoupTree('<input value="" type="text">')
    assert extract_attributes(tree, tree.select_one("input")) == {"type": "text", "value": ""}


def test_display_name_prefers_name_then_aria_then_testid() -> None:
    tree = SoupTree(
        '<input name="email" aria-label="Email">'
        '<button aria-label="Close" data-testid="close-btn">x</button>'
        '<div data-testid="card">Card body</div>'
    )
    assert extract_display_name(tree, tree.select_one("input")) == "email"
    assert extract_display_name(tree, tree.select_one("button")) == "Close"
    assert extract_display_name(tree, tree.select_one("div")) == "card"


def test_display_name_truncates_long_text() -> None:
    text = "a" * 60
    tree = SoupTree(f"<p>{text}</p>")
    assert extract_display_name(tree, tree.select_one("p")) == "a" * 50 + "..."


def test_display_name_falls_back_to_title_then_tag() -> None:
    tree = SoupTree('<img title="Logo"><hr>')
    assert extract_display_name(tree, tree.select_one("img")) == "Logo"
    assert extract_display_name(tree, tree.select_one("hr")) == "hr"


def test_html_snapshot_is_outer_markup() -> None:
    tree = SoupTree('<div><span class="x">hi</span></div>')
    assert extract_html_snapshot(tree, tree.select_one("span")) == '<span class="x">hi</span>'
