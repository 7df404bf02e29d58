from locatorsynth.semantic_context import ancestor_qualifier, relative_label_qualifier, resolve_context
from locatorsynth.soup_tree import SoupTree


def test_form_landmark_and_preceding_label() -> None:
    tree = SoupTree('<form><label>PIN Code</label><input name="pincode"></form>')
    context = resolve_context(tree, tree.select_one("input"))

    assert context is not None
    assert context.ancestor == "locator('form')"
    assert context.label == "getByLabel('PIN Code')"
    assert context.expression == "getByLabel('PIN Code')"
    assert context.prefix == "locator('form')."


def test_testid_ancestor_outranks_landmark_tag() -> None:
    tree = SoupTree('<section data-testid="login-card"><div><button>Go</button></div></section>')
    assert ancestor_qualifier(tree, tree.select_one("button")) == "getByTestId('login-card')"


def test_aria_labelled_ancestor_becomes_region() -> None:
    tree = SoupTree('<div aria-label="Filters"><input type="checkbox"></div>')
    assert ancestor_qualifier(tree, tree.select_one("input")) == "getByRole('region', { name: 'Filters' })"


def test_ancestor_search_is_depth_limited() -> None:
    tree = SoupTree("<main><div><div><div><div><span>x</span></div></div></div></div></main>")
    node = tree.select_one("span")
    assert ancestor_qualifier(tree, node) is None
    assert ancestor_qualifier(tree, node, depth=5) == "locator('main')"


def test_label_must_be_immediately_preceding_sibling() -> None:
    tree = SoupTree("<div><label>Name</label><span></span><input></div>")
    assert relative_label_qualifier(tree, tree.select_one("input")) is None


def test_label_probe_only_applies_to_form_controls() -> None:
    tree = SoupTree("<div><label>Caption</label><img src='a.png'></div>")
    assert relative_label_qualifier(tree, tree.select_one("img")) is None


def test_empty_label_is_ignored() -> None:
    tree = SoupTree("<div><label>   </label><textarea></textarea></div>")
    assert relative_label_qualifier(tree, tree.select_one("textarea")) is None


def test_label_text_quotes_are_escaped() -> None:
    tree = SoupTree("<div><label>Driver's licence</label><input></div>")
    assert relative_label_qualifier(tree, tree.select_one("input")) == "getByLabel('Driver\\'s licence')"


def test_no_context_returns_none() -> None:
    tree = SoupTree("<div><p>plain</p></div>")
    assert resolve_context(tree, tree.select_one("p")) is None
