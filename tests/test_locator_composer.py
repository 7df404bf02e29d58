from locatorsynth.locator_composer import DYNAMIC_WAITER_COMMENT, LocatorComposer
from locatorsynth.semantic_context import resolve_context
from locatorsynth.settings import EngineSettings
from locatorsynth.soup_tree import SoupTree


def _compose(markup: str, selector: str, is_dynamic: bool = False):
    tree = SoupTree(markup)
    node = tree.select_one(selector)
    composer = LocatorComposer(tree)
    return composer.compose(node, resolve_context(tree, node), is_dynamic)


def test_associated_label_is_top_playwright_candidate() -> None:
    composed = _compose(
        '<div><label>PIN Code</label><input name="pincode" placeholder="PIN Code"></div>',
        "input",
    )

    top = max(composed.candidates_a, key=lambda item: item.score)
    assert top.kind == "label"
    assert top.score == 85
    assert all(item.kind != "placeholder" for item in composed.candidates_a)
    assert composed.grammar_a == (
        "page.getByLabel('PIN Code').or(page.locator('input[name=\"pincode\"]'))"
    )


def test_selenium_prefers_unique_name_with_css_fallback() -> None:
    composed = _compose(
        '<div><label>PIN Code</label><input name="pincode" placeholder="PIN Code"></div>',
        "input",
    )
    assert composed.grammar_b == (
        "WebElement element;\n"
        "try {\n"
        '    element = driver.findElement(By.name("pincode"));\n'
        "} catch (NoSuchElementException e) {\n"
        '    element = driver.findElement(By.cssSelector("input[name=\\"pincode\\"]"));\n'
        "}"
    )


def test_placeholder_used_without_label() -> None:
    composed = _compose('<input placeholder="Search products"><input>', "input")
    kinds = [item.kind for item in composed.candidates_a]
    assert "placeholder" in kinds
    assert composed.grammar_a.startswith("page.getByPlaceholder('Search products')")


def test_digit_run_id_is_outranked_by_stable_candidates() -> None:
    composed = _compose(
        '<ul><li id="item-384920" data-testid="fruit-apple">Apple</li><li>Kale</li></ul>',
        "#item-384920",
    )

    by_id = [item for item in composed.candidates_b if item.kind == "id"]
    assert by_id and by_id[0].score == 10
    assert composed.candidates_a[0].text == "getByTestId('fruit-apple')"
    assert composed.grammar_a.startswith("page.getByTestId('fruit-apple')")
    assert "By.cssSelector" in composed.grammar_b.split("catch")[0]


def test_role_and_text_candidates_for_button() -> None:
    composed = _compose('<div><button class="cta">Buy</button></div>', "button")
    assert composed.grammar_a == (
        "page.getByRole('button', { name: 'Buy' }).or(page.getByText('Buy')).or(page.locator('.cta'))"
    )
    assert composed.grammar_b == 'driver.findElement(By.cssSelector(".cta"))'


def test_landmark_ancestor_prefixes_every_candidate() -> None:
    composed = _compose('<form><button type="submit">Send</button></form>', "button")
    assert all(item.text.startswith("locator('form').") for item in composed.candidates_a)
    assert composed.grammar_a.startswith("page.locator('form').getByRole('button', { name: 'Send' })")


def test_fallback_chain_cardinality() -> None:
    composed = _compose(
        '<form><label>Email</label><input id="email" name="email" data-testid="email-input" '
        'placeholder="you@example.com" aria-label="Email address"></form>',
        "input",
    )
    assert len(composed.candidates_a) > 3
    assert composed.grammar_a.count(".or(") == 2
    assert composed.grammar_b.count("driver.findElement(") == 2


def test_dynamic_elements_get_visibility_waits() -> None:
    composed = _compose('<div><button class="cta">Buy</button></div>', "button", is_dynamic=True)

    assert composed.grammar_a.startswith(DYNAMIC_WAITER_COMMENT + "\n")
    assert "await page.waitForSelector('.cta', { state: 'visible', timeout: 5000 });" in composed.grammar_a
    assert composed.grammar_a.endswith(
        "await page.getByRole('button', { name: 'Buy' }).or(page.getByText('Buy')).or(page.locator('.cta'))"
    )
    assert composed.grammar_b.startswith(
        "WebDriverWait wait = new WebDriverWait(driver, Duration.ofSeconds(5));\n"
        'wait.until(ExpectedConditions.visibilityOfElementLocated(By.cssSelector(".cta")));\n'
    )


def test_wait_timeout_comes_from_settings() -> None:
    tree = SoupTree('<button class="cta">Buy</button>')
    node = tree.select_one("button")
    composer = LocatorComposer(tree, EngineSettings(wait_timeout_ms=8000))
    composed = composer.compose(node, None, True)
    assert "timeout: 8000" in composed.grammar_a
    assert "Duration.ofSeconds(8)" in composed.grammar_b


def test_quotes_are_escaped_for_both_grammars() -> None:
    composed = _compose(
        '<button name="say-\'hi\'" aria-label="Don\'t stop">X</button><button>Other</button>',
        "button",
    )
    assert "getByRole('button', { name: 'Don\\'t stop' })" in composed.grammar_a
    assert 'By.name("say-\\\'hi\\\'")' in composed.grammar_b


def test_multiline_attribute_stays_on_one_line() -> None:
    composed = _compose('<button class="save" aria-label="Save&#10;draft">Go</button>', "button")
    assert "getByRole('button', { name: 'Save\\ndraft' })" in composed.grammar_a
    assert "\n" not in composed.grammar_a


def test_text_candidate_only_for_leaf_nodes() -> None:
    composed = _compose('<div role="group"><span>Inner</span></div>', "div")
    assert all(item.kind != "text" for item in composed.candidates_a)


def test_explicit_role_overrides_inferred_role() -> None:
    tree = SoupTree('<a href="/x" role="tab">Overview</a>')
    composer = LocatorComposer(tree)
    node = tree.select_one("a")
    assert composer.resolve_role(node) == "tab"
    assert composer.accessible_name(node) == "Overview"
