"""Tests for the telco expression compiler and matcher."""

import time

import pytest

from dialplan import config
from dialplan.core.exceptions import TelcoExpressionError
from dialplan.telco.expression import (
    AtomKind,
    TelcoExpressionParser,
    compile_pattern,
    match,
)


class TestCalibration:
    """Known pattern/number pairs."""

    @pytest.mark.parametrize(
        "pattern,number,expected",
        [
            ("NxxXXXX", "5551212", True),
            ("NxxXXXX", "1234567", False),
            ("XXXX", "5555", True),
            ("XXXX", "55555", False),
            ("Nxx-XXXX", "555-1212", True),
            ("N......", "5551212", True),
            ("N55Z", "5551", True),
            ("N55x+", "555123", True),
            ("N55....?", "555121", True),
            ("(555)xxxx", "(555)1212", True),
            ("[(554)|(555)]xxxx", "5541212", True),
            ("[(554)|(555)]xxxx", "5551212", True),
            ("[(554)|(555)]xxxx", "5531212", False),
        ],
    )
    def test_match(self, pattern, number, expected):
        assert TelcoExpressionParser().match(pattern, number) is expected

    def test_module_level_match(self):
        """match() shortcut agrees with the parser."""
        assert match("NxxXXXX", "5551212") is True
        assert match("NxxXXXX", "1234567") is False

    def test_repeated_calls_are_deterministic(self):
        parser = TelcoExpressionParser()
        results = {parser.match_result("NxxXXXXZ", "5551212345") for _ in range(5)}
        assert len(results) == 1


class TestDigitClasses:
    """N, X/x and Z accept their documented digit ranges."""

    @pytest.mark.parametrize("digit", "0123456789")
    def test_n_rejects_zero_and_one(self, digit):
        assert match("N", digit) is (digit not in "01")

    @pytest.mark.parametrize("digit", "0123456789")
    def test_x_accepts_any_digit(self, digit):
        assert match("X", digit) is True
        assert match("x", digit) is True

    @pytest.mark.parametrize("digit", "0123456789")
    def test_non_terminal_z_accepts_one_to_nine(self, digit):
        assert match("ZX", digit + "0") is (digit != "0")

    def test_digit_classes_reject_letters(self):
        assert match("X", "a") is False
        assert match("N", "N") is False

    def test_digit_classes_reject_non_ascii_digits(self):
        """Arabic-Indic digits are not telephone digits."""
        assert match("X", "٥") is False

    def test_wildcard_accepts_anything(self):
        assert match(".", "a") is True
        assert match(".", "-") is True
        assert match(".", "") is False

    def test_literals_are_case_sensitive(self):
        assert match("a", "a") is True
        assert match("a", "A") is False


class TestQuantifiers:
    """+, ? and * repetition with backtracking."""

    def test_plus_requires_one(self):
        assert match("9x+", "9") is False
        assert match("9x+", "91") is True
        assert match("9x+", "912345") is True

    def test_question_is_optional(self):
        assert match("1?NxxXXXX", "15551212") is True
        assert match("1?NxxXXXX", "5551212") is True

    def test_star_allows_zero(self):
        assert match("N55x*", "555") is True
        assert match("N55x*", "5551234") is True

    def test_greedy_backtracks(self):
        """x+ gives back digits so the trailing literals can match."""
        assert match("x+99", "123499") is True
        result = TelcoExpressionParser().match_result("x+99", "123499")
        assert result.groups == ("1234",)

    def test_quantified_literal(self):
        assert match("0+N", "0002") is True
        assert match("-?X", "5") is True
        assert match("-?X", "-5") is True

    def test_trailing_starred_wildcard_absorbs_remainder(self):
        assert match("011.*", "011442071838371") is True

    def test_stacked_quantifiers_fail_fast(self):
        """Failed states are not re-explored, so a hopeless match returns quickly."""
        start = time.monotonic()
        assert match(".*" * 12 + "a", "b" * 40) is False
        assert match("X*" * 30 + "1", "0" * 60) is False
        assert time.monotonic() - start < 2.0

    def test_unconsumed_input_fails(self):
        assert match("NxxXXXX", "55512123") is False


class TestRestCapture:
    """Trailing Z consumes the rest of the input."""

    @pytest.mark.parametrize("tail", ["", "0", "345", "x9#*"])
    def test_rest_accepts_any_remainder(self, tail):
        assert match("NxxXXXXZ", "5551212" + tail) is True

    def test_rest_requires_prefix(self):
        assert match("NxxXXXXZ", "1551212345") is False

    def test_rest_is_captured_separately(self):
        result = TelcoExpressionParser().match_result("NxxXXXXZ", "5551212345")
        assert result.groups == ("555", "1212")
        assert result.rest == "345"
        assert result.captures == ("555", "1212", "345")

    def test_empty_rest(self):
        result = TelcoExpressionParser().match_result("NxxXXXXZ", "5551212")
        assert result.matched is True
        assert result.rest == ""

    def test_quantified_z_is_a_digit_class(self):
        compiled = compile_pattern("NZ+")
        assert compiled.atoms[-1].kind is AtomKind.DIGIT_NON_ZERO
        assert compiled.has_rest is False
        assert match("NZ+", "5123") is True
        assert match("NZ+", "5103") is False

    def test_non_terminal_z(self):
        compiled = compile_pattern("ZXX")
        assert compiled.atoms[0].kind is AtomKind.DIGIT_NON_ZERO
        assert compiled.has_rest is False


class TestAlternation:
    """[a|b] alternatives."""

    def test_plain_alternatives(self):
        assert match("[011|00]Z", "011449") is True
        assert match("[011|00]Z", "00449") is True
        assert match("[011|00]Z", "01449") is False

    def test_parentheses_are_formatting(self):
        compiled = compile_pattern("[(554)|(555)]xxxx")
        tokens = [
            "".join(atom.token for atom in alternative)
            for alternative in compiled.atoms[0].alternatives
        ]
        assert tokens == ["554", "555"]
        assert match("[(554)|(555)]xxxx", "(554)1212") is False

    def test_class_letters_inside_alternatives(self):
        assert match("[1N|2X]5", "155") is True
        assert match("[1N|2X]5", "205") is True
        assert match("[1N|2X]5", "115") is False

    def test_class_letters_are_not_literal_targets(self):
        assert match("[N|X]", "N") is False
        assert match("[N|X]", "X") is False
        assert match("[N|X]", "0") is True

    def test_z_inside_alternative_is_non_zero_digit(self):
        compiled = compile_pattern("[Z|00]1")
        assert compiled.atoms[0].alternatives[0][0].kind is AtomKind.DIGIT_NON_ZERO
        assert match("[Z|00]1", "71") is True
        assert match("[Z|00]1", "01") is False

    def test_wildcard_inside_alternative(self):
        assert match("[1.|2]5", "1a5") is True
        assert match("[1.|2]5", "25") is True

    def test_backtracks_into_next_alternative(self):
        """First alternative matches as a prefix but the remainder fails."""
        assert match("[1|12]3", "123") is True

    def test_alternation_is_not_captured(self):
        result = TelcoExpressionParser().match_result("[554|555]xxxx", "5551212")
        assert result.groups == ("1212",)


class TestCaptureGroups:
    """Grouping of digit-class atoms into capture groups."""

    def test_nxx_and_xxxx(self):
        compiled = compile_pattern("NxxXXXX")
        assert compiled.group_count == 2
        assert [a.group for a in compiled.atoms] == [0, 0, 0, 1, 1, 1, 1]

    def test_literals_break_groups(self):
        result = TelcoExpressionParser().match_result("Nxx-XXXX", "555-1212")
        assert result.groups == ("555", "1212")

    def test_wildcards_are_not_captured(self):
        result = TelcoExpressionParser().match_result("N......", "5551212")
        assert result.groups == ("5",)

    def test_token_change_starts_group(self):
        result = TelcoExpressionParser().match_result("NNXX", "2345")
        assert result.groups == ("23", "45")

    def test_segments_reconstruct_input(self):
        for pattern, number in [
            ("Nxx-XXXX", "555-1212"),
            ("1?NxxXXXX", "15551212"),
            ("[(554)|(555)]xxxx", "5541212"),
            ("(555)xxxx", "(555)1212"),
            ("N55....?", "555121"),
        ]:
            result = TelcoExpressionParser().match_result(pattern, number)
            assert "".join(result.segments) == number

    def test_failed_match_has_no_captures(self):
        result = TelcoExpressionParser().match_result("XXXX", "55555")
        assert not result
        assert result.groups == ()
        assert result.rest is None


class TestCompileErrors:
    """Malformed patterns raise TelcoExpressionError."""

    @pytest.mark.parametrize(
        "pattern",
        [
            "",
            "+X",
            "X++",
            "X?*",
            "[1|2]+",
            "[1|2",
            "1|2",
            "X]",
            "[12]X",
            "[1|]X",
            "[()|2]X",
            "[1|[2|3]]",
        ],
    )
    def test_invalid_pattern(self, pattern):
        with pytest.raises(TelcoExpressionError) as exc_info:
            compile_pattern(pattern)
        assert exc_info.value.code == "PATTERN_INVALID"

    def test_match_raises_for_invalid_pattern(self):
        with pytest.raises(TelcoExpressionError):
            match("X++", "55")

    def test_error_reports_position(self):
        with pytest.raises(TelcoExpressionError) as exc_info:
            compile_pattern("NX++")
        assert exc_info.value.position == 3

    def test_pattern_length_limit(self, monkeypatch):
        monkeypatch.setattr(config, "MAX_PATTERN_LENGTH", 8)
        with pytest.raises(TelcoExpressionError):
            compile_pattern("XXXXXXXXXXXXXXXXX9")

    def test_quantifier_limit(self, monkeypatch):
        monkeypatch.setattr(config, "MAX_QUANTIFIERS", 2)
        with pytest.raises(TelcoExpressionError):
            compile_pattern("1?2?3?4")


class TestCompiledPattern:
    """Compilation results are immutable and cached."""

    def test_compile_is_cached(self):
        assert compile_pattern("NxxNxxXXXX") is compile_pattern("NxxNxxXXXX")

    def test_group_lengths(self):
        assert compile_pattern("NxxXXXX").group_lengths == (3, 4)
        assert compile_pattern("1NxxX+").group_lengths == (3, None)
        assert compile_pattern("NxxXXXXZ").group_lengths == (3, 4)

    def test_compiled_pattern_is_reusable(self):
        compiled = TelcoExpressionParser().compile("NxxXXXX")
        assert compiled.match("5551212").matched is True
        assert compiled.match("1551212").matched is False
        assert compiled.match("5551212").groups == ("555", "1212")
