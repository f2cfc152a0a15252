"""Tests for copycontext.minifier."""

import pytest

from copycontext.minifier import (
    CSS_TRAILING_SEMICOLON,
    LANGUAGE_RULES,
    MinifyOptions,
    apply_language_rules,
    apply_steps,
    compact_lines,
    minify,
    remove_comment_from_line,
    remove_multi_line_comments,
    remove_single_line_comments,
)

SAMPLES = {
    "python": (
        "import os\n\n"
        "def main(argv):\n"
        "    if argv and not argv[0]:\n"
        "        return None\n"
        "    return os.path.join('a', 'b')  # join\n"
    ),
    "javascript": "function add(a, b) {\n  // sum\n  return a + b;\n}\n",
    "css": "a {\n  color: red; /* c */\n}\n",
    "json": '{\n  "a" : [ 1 , 2 ],\n  "b" : { "c" : null }\n}\n',
    "html": "<div>\n  <!-- hi -->\n  <p>Hello   there</p>\n</div>\n",
    "yaml": "name: demo\nitems:\n  - a  # first\n  - b\n",
    "java": "public class A {\n  // c\n  private int x = 1;\n}\n",
    "text": "  some   plain\n\n\ttext  here \n",
}


class TestRemoveCommentFromLine:
    def test_trailing_comment_is_cut(self):
        assert remove_comment_from_line("const a = 1; // note", "//") == "const a = 1;"

    def test_comment_token_inside_string_is_kept(self):
        line = 'let s = "http://x";'
        assert remove_comment_from_line(line, "//") == line

    def test_backtick_string(self):
        line = "const t = `a // b`;"
        assert remove_comment_from_line(line, "//") == line

    def test_other_quote_inside_string_does_not_close_it(self):
        assert remove_comment_from_line('s = "it\'s" // x', "//") == 's = "it\'s"'

    def test_escaped_quote_inside_string(self):
        assert remove_comment_from_line("x = 'it\\'s # no' # c", "#") == "x = 'it\\'s # no'"

    def test_backslash_escapes_quote_outside_string(self):
        assert remove_comment_from_line('echo \\"a # b', "#") == 'echo \\"a'

    def test_unterminated_string_keeps_line(self):
        line = '"abc // def'
        assert remove_comment_from_line(line, "//") == line

    def test_whole_line_comment(self):
        assert remove_comment_from_line("    # note", "#") == ""

    def test_token_at_end_of_line(self):
        assert remove_comment_from_line("a //", "//") == "a"

    def test_line_without_comment_is_unchanged(self):
        assert remove_comment_from_line("  x = 1  ", "#") == "  x = 1  "


class TestMultiLineComments:
    def test_c_style_blocks_are_non_greedy(self):
        text = "a /* x */ b /* y\n z */ c"
        assert remove_multi_line_comments(text, "javascript") == "a  b  c"

    def test_unterminated_block_is_left_alone(self):
        assert remove_multi_line_comments("a /* x", "css") == "a /* x"

    def test_python_docstrings(self):
        text = '"""doc"""\nx = 1\n\'\'\'more\ndoc\'\'\'\n'
        assert remove_multi_line_comments(text, "python") == "\nx = 1\n\n"

    def test_markup_comments(self):
        assert remove_multi_line_comments("<p><!-- c --></p>", "html") == "<p></p>"

    @pytest.mark.parametrize("language", ["text", "bash", "yaml", "json"])
    def test_other_languages_are_untouched(self, language):
        assert remove_multi_line_comments("a /* b */ c", language) == "a /* b */ c"


class TestSingleLineComments:
    def test_hash_family(self):
        assert remove_single_line_comments("a = 1 # c\nb = 2", "python") == "a = 1\nb = 2"

    def test_curly_family(self):
        assert remove_single_line_comments("x(); // y\n// z\n", "go") == "x();\n\n"

    def test_scss_uses_slashes(self):
        assert remove_single_line_comments("a { b: c; } // d", "scss") == "a { b: c; }"

    def test_language_without_line_comments(self):
        assert remove_single_line_comments("a # b // c", "text") == "a # b // c"
        assert remove_single_line_comments("a // c", "css") == "a // c"


def test_compact_lines_drops_blank_lines_and_trims():
    assert compact_lines("  a  \n\n\t b\n   \n") == "a b"


class TestLanguageRules:
    def test_every_family_is_an_ordered_step_list(self):
        for steps in LANGUAGE_RULES.values():
            assert all(len(step) == 2 for step in steps)

    def test_css_trailing_semicolon_step(self):
        assert apply_steps("a{color:red;}", (CSS_TRAILING_SEMICOLON,)) == "a{color:red}"

    def test_script(self):
        text = "function add(a, b) { return a + b; }"
        assert apply_language_rules(text, "typescript") == "function add(a,b){ return a+b;}"

    def test_script_declarations(self):
        assert apply_language_rules("const x = a + b ;", "javascript") == "const x=a+b;"

    def test_stylesheet(self):
        assert apply_language_rules("a { color : red ; }", "css") == "a{color:red}"

    def test_json(self):
        assert apply_language_rules('{ "a" : [ 1 , 2 ] }', "json") == '{"a":[1,2]}'

    def test_python(self):
        assert apply_language_rules("x = [ 1 , 2 ]", "python") == "x=[1,2]"
        assert apply_language_rules("if a and not b :", "python") == "if a and not b:"

    def test_keywords_inside_identifiers_are_not_spaced(self):
        assert apply_language_rules("is_valid = index", "python") == "is_valid=index"

    def test_compiled(self):
        text = "public static void main ( String [ ] args ) {"
        assert apply_language_rules(text, "java") == "public static void main(String[]args){"

    def test_markup(self):
        assert apply_language_rules("<ul> <li> a </li> </ul>", "html") == "<ul><li> a </li></ul>"

    def test_yaml(self):
        assert apply_language_rules("key: value list: - a - b", "yaml") == "key:value list:-a-b"

    def test_unknown_language_passes_through(self):
        assert apply_language_rules(" a  +  b ", "text") == "a  +  b"

    def test_punctuation_inside_strings_is_compacted_too(self):
        assert apply_language_rules('s = "a ; b";', "javascript") == 's="a;b";'

    def test_dollar_identifiers_are_not_split(self):
        assert minify("let $var = 1;", "javascript") == "let $var=1;"
        assert minify("const $for = $if;", "typescript") == "const $for=$if;"

    def test_property_names_are_not_spaced(self):
        assert minify("const y = Array.from(x);", "javascript") == "const y=Array.from(x);"
        assert minify("obj.class = that.new;", "java") == "obj.class=that.new;"

    def test_repeated_trailing_semicolons(self):
        assert apply_language_rules("a { color: red;; }", "css") == "a{color:red}"


class TestMinify:
    def test_python_end_to_end(self):
        assert minify("def f():\n    # note\n    return 1\n", "python") == "def f(): return 1"

    def test_comment_tokens_in_strings_survive(self):
        text = 'const url = "http://x"; // trailing\n/* block */\nlet y = 2;\n'
        assert minify(text, "javascript") == 'const url="http://x"; let y=2;'

    def test_keep_comments(self):
        result = minify("a = 1 // note", "javascript", MinifyOptions(remove_comments=False))
        assert result == "a=1//note"

    def test_text_only_collapses_whitespace(self):
        assert minify(SAMPLES["text"], "text") == "some plain text here"

    def test_html(self):
        assert minify(SAMPLES["html"], "html") == "<div><p>Hello there</p></div>"

    def test_empty_input(self):
        assert minify("", "python") == ""
        assert minify("\n\n  \n", "javascript") == ""

    def test_unterminated_block_does_not_raise(self):
        assert minify("a = 1; /* open", "c") == "a=1;/*open"

    @pytest.mark.parametrize("language", sorted(SAMPLES))
    def test_no_double_spaces(self, language):
        for remove_comments in (True, False):
            result = minify(SAMPLES[language], language, MinifyOptions(remove_comments))
            assert "  " not in result

    @pytest.mark.parametrize("language", sorted(SAMPLES))
    def test_idempotent(self, language):
        once = minify(SAMPLES[language], language)
        assert minify(once, language) == once

    @pytest.mark.parametrize(
        "source, language",
        [
            ("a { color: red;; }", "css"),
            ("let $var = Array.from($list);", "javascript"),
        ],
    )
    def test_idempotent_edge_cases(self, source, language):
        once = minify(source, language)
        assert minify(once, language) == once

    @pytest.mark.parametrize("language", sorted(SAMPLES))
    def test_keeping_comments_loses_no_characters(self, language):
        source = SAMPLES[language]
        result = minify(source, language, MinifyOptions(remove_comments=False))
        assert sorted(result.replace(" ", "")) == sorted("".join(source.split()))
