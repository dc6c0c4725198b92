"""
Tests for the no-window-prefix rule.
"""

import pytest

from conftest import assert_lint_err, assert_lint_ok, lint
from workerlint.lint.rules.no_window_prefix import (
    CODE,
    PROPERTY_DENY_LIST,
    NoWindowPrefix,
    extract_symbol,
    is_denied,
)
from workerlint.parser import MemberExpr, parse_source

DENIED = sorted(PROPERTY_DENY_LIST)


class TestDenyList:
    """Test the property classifier."""

    def test_known_names(self):
        for name in ("fetch", "setTimeout", "crypto", "navigator", "addEventListener", "Deno", "WebSocket"):
            assert is_denied(name)

    def test_exact_case_sensitive_match(self):
        assert not is_denied("Fetch")
        assert not is_denied("FETCH")
        assert not is_denied(" fetch")
        assert not is_denied("deno")

    def test_allowed_window_only_names(self):
        for name in ("alert", "confirm", "prompt", "location", "history", "localStorage",
                     "sessionStorage", "onload", "onunload", "closed", "window", "Navigator"):
            assert not is_denied(name)

    def test_deny_list_is_immutable(self):
        assert isinstance(PROPERTY_DENY_LIST, frozenset)


class TestExtractSymbol:
    """Test static resolution of the accessed property name."""

    def _member(self, source, filename="test.js"):
        program = parse_source(source, filename)
        stack = [program.root]
        while stack:
            node = stack.pop()
            if node.type in ("member_expression", "subscript_expression"):
                return MemberExpr.from_node(node, program)
            stack.extend(reversed(node.named_children))
        raise AssertionError("no member expression")

    def test_identifier_property(self):
        assert extract_symbol(self._member("window.fetch;")) == "fetch"

    def test_string_literal(self):
        assert extract_symbol(self._member('window["fetch"];')) == "fetch"
        assert extract_symbol(self._member("window['fetch'];")) == "fetch"

    def test_string_literal_escapes_are_decoded(self):
        assert extract_symbol(self._member(r'window["fe\x74ch"];')) == "fetch"
        assert extract_symbol(self._member(r'window["\u0066etch"];')) == "fetch"
        assert extract_symbol(self._member(r'window["\u{66}etch"];')) == "fetch"

    def test_single_segment_template(self):
        assert extract_symbol(self._member("window[`fetch`];")) == "fetch"

    def test_template_uses_raw_text(self):
        assert extract_symbol(self._member(r"window[`fe\x74ch`];")) == r"fe\x74ch"

    def test_template_with_substitution_is_undetermined(self):
        assert extract_symbol(self._member("window[`${f}`];")) is None
        assert extract_symbol(self._member("window[`fe${t}ch`];")) is None

    def test_identifier_key_is_undetermined(self):
        assert extract_symbol(self._member("window[f];")) is None

    def test_other_expressions_are_undetermined(self):
        assert extract_symbol(self._member('window["fe" + "tch"];')) is None
        assert extract_symbol(self._member("window[0];")) is None
        assert extract_symbol(self._member("window[getName()];")) is None

    def test_private_name_drops_sigil(self):
        expr = self._member("class A { #fetch = 1; m() { return window.#fetch; } }")
        assert extract_symbol(expr) == "fetch"


class TestValid:
    """Sources that must not produce diagnostics."""

    def test_other_prefixes_and_bare_calls(self):
        assert_lint_ok(
            "fetch();",
            "self.fetch();",
            "globalThis.fetch();",
            "Deno.metrics();",
            "self.Deno.metrics();",
            "globalThis.Deno.metrics();",
        )

    @pytest.mark.parametrize("name", ["onload", "onunload", "alert", "confirm", "prompt"])
    def test_window_only_functions(self, name):
        assert_lint_ok(
            f"{name}();",
            f"self.{name}();",
            f"globalThis.{name}();",
            f"window.{name}();",
            f'window["{name}"]();',
            f"window[`{name}`]();",
        )

    @pytest.mark.parametrize("name", ["closed", "localStorage", "sessionStorage", "window",
                                      "Navigator", "location", "history"])
    def test_window_only_properties(self, name):
        assert_lint_ok(
            f"{name};",
            f"self.{name};",
            f"globalThis.{name};",
            f"window.{name};",
            f'window["{name}"];',
            f"window[`{name}`];",
        )

    def test_shadowed_window(self):
        assert_lint_ok(
            "const window = 42; window.fetch();",
            'const window = 42; window["fetch"]();',
            "const window = 42; window[`fetch`]();",
            "const window = 42; window.alert();",
            'const window = 42; window["alert"]();',
            "const window = 42; window[`alert`]();",
        )

    def test_property_through_variable(self):
        assert_lint_ok(
            'const f = "fetch"; window[f]();',
            'const f = "fetch"; window[`${f}`]();',
        )

    def test_chained_member_expressions(self):
        assert_lint_ok(
            "foo.window.fetch();",
            "window.fetch.bind(null);",
            "const g = window.fetch.bind;",
            "a.b.window.setTimeout;",
        )

    def test_window_as_property_not_object(self):
        assert_lint_ok("self.window;", "obj[window];", "const x = { window: 1 }; x.window.fetch;")


class TestInvalid:
    """Sources that must produce diagnostics."""

    def test_dotted(self):
        assert_lint_err("window.fetch()", [(1, 0)])

    def test_string_literal(self):
        assert_lint_err('window["fetch"]()', [(1, 0)])

    def test_template_literal(self):
        assert_lint_err("window[`fetch`]()", [(1, 0)])

    def test_shadow_in_nested_function_then_global(self):
        source = """
function foo() {
  const window = 42;
  return window;
}
window.fetch();
      """
        assert_lint_err(source, [(6, 0)])

    def test_call_result_chain_reports_once(self):
        assert_lint_err("window.fetch().then(r => r.json());", [(1, 0)])

    def test_range_covers_member_expression(self):
        [d] = assert_lint_err("x = window.setTimeout;", [(1, 4)])
        assert d.range.end.line == 1
        assert d.range.end.col == len("x = window.setTimeout")

    def test_column_counts_characters(self):
        assert_lint_err('const s = "ü"; window.fetch();', [(1, 15)])

    def test_multiple_reports(self):
        source = "window.fetch();\nwindow.atob('');\nwindow.alert('');\n"
        assert_lint_err(source, [(1, 0), (2, 0)])

    def test_nested_inside_computed_key_and_arguments(self):
        assert_lint_err("foo[window.name];", [(1, 4)])
        assert_lint_err("window.alert(window.navigator.userAgent);", [])
        assert_lint_err("console.log(window.crypto);", [(1, 12)])

    def test_parenthesized_and_optional(self):
        assert_lint_err("(window.fetch).call(null);", [(1, 1)])
        assert_lint_err("window?.fetch();", [(1, 0)])

    def test_assignment_target(self):
        assert_lint_err("window.onmessage = () => {};", [(1, 0)])

    def test_window_in_function_without_shadowing(self):
        assert_lint_err("function f(a) { return window.performance.now(); }", [])
        assert_lint_err("function f(a) { return window.performance; }", [(1, 23)])

    def test_typescript_file(self):
        assert_lint_err(
            "const r: Response = await window.fetch('/x');\n",
            [(1, 26)],
            filename="test.ts",
        )

    def test_typescript_type_positions_not_reported(self):
        assert_lint_err("let f: typeof window.fetch;\n", [], filename="test.ts")

    def test_jsx_file(self):
        assert_lint_err(
            "const el = <div onClick={() => window.postMessage('x')} />;\n",
            [(1, 31)],
            filename="test.jsx",
        )


class TestCatalogue:
    """Every denied name, every access form."""

    @pytest.mark.parametrize("name", DENIED)
    def test_denied_name_reported_in_all_forms(self, name):
        for source in (f"window.{name};", f'window["{name}"];', f"window[`{name}`];"):
            diagnostics = lint(source)
            assert len(diagnostics) == 1, source
            assert (diagnostics[0].line, diagnostics[0].col) == (1, 0)
            assert diagnostics[0].code == CODE

    @pytest.mark.parametrize("name", DENIED)
    def test_denied_name_allowed_via_other_prefixes(self, name):
        assert_lint_ok(f"self.{name};", f"globalThis.{name};", f"{name}();")


class TestRuleDescriptor:
    """Test the rule's registration data."""

    def test_code_and_tags(self):
        rule = NoWindowPrefix()
        assert rule.code == "no-window-prefix"
        assert "recommended" in rule.tags

    def test_docs(self):
        assert "window" in NoWindowPrefix().docs
