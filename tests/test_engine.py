"""Test rule-engine classification: precedence, delimited regions, regions."""

from vhighlight.engine import classify
from vhighlight.syntax import SyntaxTable
from vhighlight.tokens import Category, Span

from .conftest import assert_pairs, assert_well_formed, category_of

C = Category


class TestWorkedExamples:
    def test_function_definition(self, hl):
        pairs = hl("fn add(a int, b int) int { return a+b }")
        assert_pairs(
            pairs,
            [
                ("fn", C.DECLARATION),
                ("add", C.FUNCTION_NAME),
                ("(", C.DELIMITER),
                ("a", C.PARAMETER),
                ("int", C.BUILTIN_TYPE),
                (",", C.SEPARATOR),
                ("b", C.PARAMETER),
                ("int", C.BUILTIN_TYPE),
                (")", C.DELIMITER),
                ("int", C.BUILTIN_TYPE),
                ("{", C.DELIMITER),
                ("return", C.CAREFUL),
                ("a", C.VARIABLE_REFERENCE),
                ("+", C.OPERATOR),
                ("b", C.VARIABLE_REFERENCE),
                ("}", C.DELIMITER),
            ],
        )

    def test_function_definition_offsets(self):
        spans = classify("fn add(a int, b int) int { return a+b }")
        assert spans[0] == Span(0, 2, C.DECLARATION)
        assert spans[1] == Span(3, 6, C.FUNCTION_NAME)

    def test_const_with_comment(self, hl):
        pairs = hl("const X = 10 // ten")
        assert_pairs(
            pairs,
            [
                ("const", C.PREPROCESSOR),
                ("X", C.TYPE_NAME),
                ("=", C.OPERATOR),
                ("10", C.NUMERIC_LITERAL),
                ("// ten", C.COMMENT),
            ],
        )


class TestComments:
    def test_comment_stops_at_newline(self, hl):
        pairs = hl("x := 1 // return fn int\ny")
        assert_pairs(
            pairs,
            [
                ("x", C.VARIABLE_REFERENCE),
                (":=", C.OPERATOR),
                ("1", C.NUMERIC_LITERAL),
                ("// return fn int", C.COMMENT),
                ("y", C.VARIABLE_REFERENCE),
            ],
        )

    def test_comment_at_end_of_buffer(self):
        source = "return //"
        assert classify(source)[-1] == Span(7, 9, C.COMMENT)

    def test_single_slash_is_operator(self, hl):
        assert category_of(hl("a / b"), "/") == C.OPERATOR

    def test_comment_inside_string_is_string(self, hl):
        pairs = hl("'a // b' x")
        assert_pairs(pairs, [("'a // b'", C.STRING), ("x", C.VARIABLE_REFERENCE)])


class TestStrings:
    def test_all_delimiters(self, hl):
        pairs = hl("s := 'if return' + \"fn\" + `x`")
        assert_pairs(
            pairs,
            [
                ("s", C.VARIABLE_REFERENCE),
                (":=", C.OPERATOR),
                ("'if return'", C.STRING),
                ("+", C.OPERATOR),
                ('"fn"', C.STRING),
                ("+", C.OPERATOR),
                ("`x`", C.STRING),
            ],
        )

    def test_other_quote_does_not_close(self, hl):
        pairs = hl("'say \"hi\"' x")
        assert_pairs(pairs, [("'say \"hi\"'", C.STRING), ("x", C.VARIABLE_REFERENCE)])

    def test_escaped_quote(self, hl):
        pairs = hl("'it\\'s' x")
        assert_pairs(pairs, [("'it\\'s'", C.STRING), ("x", C.VARIABLE_REFERENCE)])

    def test_unterminated_string_runs_to_end(self, hl):
        pairs = hl('a := "abc')
        assert pairs[-1] == ('"abc', C.STRING)

    def test_string_spans_lines(self):
        spans = classify("'a\nb' c")
        assert spans[0] == Span(0, 5, C.STRING)


class TestKeywords:
    def test_standalone_vs_embedded(self, hl):
        pairs = hl("integer int my_int int8")
        assert_pairs(
            pairs,
            [
                ("integer", C.VARIABLE_REFERENCE),
                ("int", C.BUILTIN_TYPE),
                ("my_int", C.VARIABLE_REFERENCE),
                ("int8", C.VARIABLE_REFERENCE),
            ],
        )

    def test_constants_and_keywords(self, hl):
        pairs = hl("if x == true { y = none } else { z = false }")
        assert category_of(pairs, "if") == C.KEYWORD
        assert category_of(pairs, "true") == C.KEYWORD
        assert category_of(pairs, "none") == C.KEYWORD
        assert category_of(pairs, "else") == C.KEYWORD

    def test_operator_function_beats_call_reference(self, hl):
        pairs = hl("len(a)")
        assert_pairs(
            pairs,
            [
                ("len", C.KEYWORD),
                ("(", C.DELIMITER),
                ("a", C.PARAMETER),
                (")", C.DELIMITER),
            ],
        )

    def test_visibility_and_colon(self, hl):
        pairs = hl("pub mut:")
        assert_pairs(
            pairs,
            [("pub", C.PREPROCESSOR), ("mut", C.KEYWORD), (":", C.SEPARATOR)],
        )

    def test_keyword_after_comma_is_not_parameter(self, hl):
        pairs = hl("fn f(a int, mut b int)")
        assert category_of(pairs, "mut") == C.KEYWORD


class TestAttributes:
    def test_compile_time_if(self, hl):
        pairs = hl("$if debug {")
        assert_pairs(
            pairs,
            [("$if", C.ATTRIBUTE), ("debug", C.VARIABLE_REFERENCE), ("{", C.DELIMITER)],
        )

    def test_bracket_attribute(self, hl):
        pairs = hl("@[inline]")
        assert_pairs(
            pairs,
            [("[", C.DELIMITER), ("inline", C.VARIABLE_REFERENCE), ("]", C.DELIMITER)],
        )


class TestOperators:
    def test_comparison_and_logical(self, hl):
        pairs = hl("a != b && !c")
        assert_pairs(
            pairs,
            [
                ("a", C.VARIABLE_REFERENCE),
                ("!=", C.OPERATOR),
                ("b", C.VARIABLE_REFERENCE),
                ("&&", C.OPERATOR),
                ("!", C.OPERATOR),
                ("c", C.VARIABLE_REFERENCE),
            ],
        )

    def test_multi_char_operators(self, hl):
        pairs = hl("x += 1\nch <- 5\nm := 2")
        assert category_of(pairs, "+=") == C.OPERATOR
        assert category_of(pairs, "<-") == C.OPERATOR
        assert category_of(pairs, ":=") == C.OPERATOR
        assert category_of(pairs, "5") == C.NUMERIC_LITERAL

    def test_double_colon_is_unclassified(self, hl):
        pairs = hl("a::b")
        assert_pairs(pairs, [("a", C.VARIABLE_REFERENCE), ("b", C.VARIABLE_REFERENCE)])


class TestLiterals:
    def test_hex_and_float(self, hl):
        pairs = hl("x1 := 0x1F + 3.14")
        assert_pairs(
            pairs,
            [
                ("x1", C.VARIABLE_REFERENCE),
                (":=", C.OPERATOR),
                ("0x1F", C.NUMERIC_LITERAL),
                ("+", C.OPERATOR),
                ("3.14", C.NUMERIC_LITERAL),
            ],
        )

    def test_number_after_open_bracket(self, hl):
        pairs = hl("arr[0]")
        assert category_of(pairs, "0") == C.NUMERIC_LITERAL

    def test_number_at_buffer_start(self, hl):
        assert hl("42") == [("42", C.NUMERIC_LITERAL)]

    def test_number_after_range_is_not_recognized(self, hl):
        pairs = hl("for i in 0..10 {")
        assert_pairs(
            pairs,
            [
                ("for", C.KEYWORD),
                ("i", C.VARIABLE_REFERENCE),
                ("in", C.KEYWORD),
                ("0", C.NUMERIC_LITERAL),
                ("..", C.OPERATOR),
                ("{", C.DELIMITER),
            ],
        )

    def test_char_literal_when_backtick_is_not_a_string(self, hl):
        table = SyntaxTable(string_delimiters="\"'")
        pairs = hl("c := `a`", syntax_table=table)
        assert_pairs(
            pairs,
            [("c", C.VARIABLE_REFERENCE), (":=", C.OPERATOR), ("`a`", C.CHAR_LITERAL)],
        )


class TestIdentifiers:
    def test_call_references(self, hl):
        pairs = hl("os.exit(1)")
        assert_pairs(
            pairs,
            [
                ("os", C.VARIABLE_REFERENCE),
                (".", C.SEPARATOR),
                ("exit", C.CALL_REFERENCE),
                ("(", C.DELIMITER),
                ("1", C.NUMERIC_LITERAL),
                (")", C.DELIMITER),
            ],
        )

    def test_capitalized_is_type_name(self, hl):
        pairs = hl("p := Point{}")
        assert category_of(pairs, "Point") == C.TYPE_NAME

    def test_tuple_reference(self, hl):
        pairs = hl("p._0 + t.x")
        assert_pairs(
            pairs,
            [
                ("p", C.VARIABLE_REFERENCE),
                ("_0", C.TUPLE_REFERENCE),
                ("+", C.OPERATOR),
                ("t", C.VARIABLE_REFERENCE),
                (".", C.SEPARATOR),
                ("x", C.VARIABLE_REFERENCE),
            ],
        )

    def test_method_receiver(self, hl):
        pairs = hl("fn (p Point) area() f64 {")
        assert category_of(pairs, "p") == C.PARAMETER
        assert category_of(pairs, "Point") == C.TYPE_NAME
        assert category_of(pairs, "area") == C.CALL_REFERENCE
        assert category_of(pairs, "f64") == C.BUILTIN_TYPE


class TestRegions:
    SOURCE = "fn add() {}\nreturn x"

    def test_region_second_line(self):
        spans = classify(self.SOURCE, region=(12, len(self.SOURCE)))
        assert spans == [Span(12, 18, C.CAREFUL), Span(19, 20, C.VARIABLE_REFERENCE)]

    def test_region_end_cuts_tokens(self):
        spans = classify("return x", region=(0, 5))
        assert spans == [Span(0, 5, C.VARIABLE_REFERENCE)]

    def test_region_is_clamped(self):
        assert classify(self.SOURCE, region=(-5, 1000)) == classify(self.SOURCE)

    def test_inverted_region_is_empty(self):
        assert classify(self.SOURCE, region=(5, 2)) == []

    def test_context_before_region_is_visible(self):
        assert classify("my_int", region=(3, 6)) == []

    def test_spans_stay_inside_region(self):
        spans = classify(self.SOURCE, region=(3, 15))
        assert all(3 <= s.start and s.end <= 15 for s in spans)
        assert_well_formed(spans)

    def test_region_inside_comment(self):
        source = "x := 1 // if return fn\n"
        spans = classify(source, region=(12, 23))
        assert spans == [Span(12, 22, C.COMMENT)]
        assert Span(7, 22, C.COMMENT) in classify(source)

    def test_region_inside_multiline_string(self):
        source = "s := '\nif return x\n'\ny := 2\n"
        assert classify(source, region=(7, 19)) == [Span(7, 19, C.STRING)]
        assert classify(source, region=(7, len(source))) == [
            Span(7, 20, C.STRING),
            Span(21, 22, C.VARIABLE_REFERENCE),
            Span(23, 25, C.OPERATOR),
            Span(26, 27, C.NUMERIC_LITERAL),
        ]

    def test_region_matches_whole_buffer_after_string(self):
        source = "s := '\nif return x\n'\ny := 2\n"
        full = [s for s in classify(source) if s.start >= 20]
        assert classify(source, region=(7, len(source)))[1:] == full

    def test_region_splitting_comment_opener(self):
        source = "a // b"
        assert classify(source, region=(3, 6)) == [Span(3, 6, C.COMMENT)]

    def test_region_ending_inside_comment_opener(self):
        source = "a // b"
        assert classify(source, region=(0, 3)) == [
            Span(0, 1, C.VARIABLE_REFERENCE),
            Span(2, 3, C.COMMENT),
        ]

    def test_region_after_closed_string(self):
        source = "'if' if"
        assert classify(source, region=(4, 7)) == [Span(5, 7, C.KEYWORD)]


class TestDeterminism:
    def test_empty_buffer(self):
        assert classify("") == []

    def test_whitespace_only(self):
        assert classify("  \t\n  ") == []

    def test_idempotent(self):
        source = "module main\n\nfn main() {\n\tprintln('hi') // greet\n}\n"
        first = classify(source)
        assert classify(source) == first
        assert classify(source, region=(0, len(source))) == first
        assert_well_formed(first)
