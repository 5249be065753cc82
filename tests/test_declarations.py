"""Tests for declaration types: validation specs and computed values."""

import re
from dataclasses import dataclass

import pytest

from mailform.declarations.types import (
    Computation,
    CustomRule,
    Inclusion,
    LengthRange,
    Literal,
    MethodRef,
    Pattern,
    RequirePresence,
    computed,
    humanize,
    read_field,
    validation_spec,
)
from mailform.errors import DeclarationError


# =============================================================================
# validation_spec
# =============================================================================


class TestValidationSpec:
    def test_none_and_false_mean_no_validation(self):
        assert validation_spec(None) is None
        assert validation_spec(False) is None

    def test_true_requires_presence(self):
        assert validation_spec(True) == RequirePresence()

    def test_compiled_regex_is_pattern(self):
        regex = re.compile(r"^\S+@\S+$")
        spec = validation_spec(regex)
        assert isinstance(spec, Pattern)
        assert spec.regex is regex

    def test_list_is_inclusion(self):
        assert validation_spec(["a", "b"]) == Inclusion(("a", "b"))

    def test_set_is_inclusion(self):
        spec = validation_spec({"x"})
        assert isinstance(spec, Inclusion)
        assert spec.choices == ("x",)

    def test_range_is_length_range(self):
        assert validation_spec(range(2, 11)) == LengthRange(minimum=2, maximum=10)

    def test_method_name_is_custom_rule(self):
        assert validation_spec("check_bug") == CustomRule("check_bug")

    def test_callable_is_custom_rule(self):
        def check(form):
            return None

        assert validation_spec(check) == CustomRule(check)

    def test_explicit_spec_passes_through(self):
        spec = LengthRange(maximum=5)
        assert validation_spec(spec) is spec

    def test_application_spec_passes_through(self):
        @dataclass(frozen=True)
        class Postcode:
            country: str

        spec = Postcode("NL")
        assert validation_spec(spec) is spec

    def test_unsupported_value_raises(self):
        with pytest.raises(DeclarationError, match="Unsupported validation"):
            validation_spec(42)


class TestSpecTypes:
    def test_pattern_compiles_strings(self):
        spec = Pattern(r"^\d+$")
        assert spec.regex.search("123")

    def test_inclusion_stores_tuple(self):
        assert Inclusion(["a"]).choices == ("a",)

    def test_length_range_needs_a_bound(self):
        with pytest.raises(DeclarationError, match="minimum or a maximum"):
            LengthRange()

    def test_length_range_rejects_inverted_bounds(self):
        with pytest.raises(DeclarationError, match="exceeds maximum"):
            LengthRange(minimum=5, maximum=2)

    def test_length_range_from_range_is_inclusive(self):
        spec = LengthRange.from_range(range(1, 4))
        assert (spec.minimum, spec.maximum) == (1, 3)

    def test_length_range_rejects_stepped_range(self):
        with pytest.raises(DeclarationError, match="step of 1"):
            LengthRange.from_range(range(1, 10, 2))


# =============================================================================
# Computed values
# =============================================================================


class Ticket:
    priority = "high"

    def reference(self):
        return "T-1"


class TestComputedValues:
    def test_literal_resolves_to_itself(self):
        assert Literal("Hello").resolve(Ticket()) == "Hello"

    def test_method_ref_calls_method(self):
        assert MethodRef("reference").resolve(Ticket()) == "T-1"

    def test_method_ref_reads_plain_attribute(self):
        assert MethodRef("priority").resolve(Ticket()) == "high"

    def test_computation_receives_instance(self):
        value = Computation(lambda t: f"[{t.priority}]")
        assert value.resolve(Ticket()) == "[high]"

    def test_computed_wraps_callables(self):
        assert isinstance(computed(lambda t: 1), Computation)

    def test_computed_wraps_plain_values(self):
        assert computed("x") == Literal("x")
        assert computed(["a", "b"]) == Literal(["a", "b"])

    def test_computed_keeps_existing_values(self):
        ref = MethodRef("reference")
        assert computed(ref) is ref

    def test_read_field_calls_methods(self):
        ticket = Ticket()
        assert read_field(ticket, "reference") == "T-1"
        assert read_field(ticket, "priority") == "high"


class TestHumanize:
    @pytest.mark.parametrize(
        "name, label",
        [
            ("name", "Name"),
            ("first_name", "First name"),
            ("ContactForm", "Contact form"),
            ("BugReportForm", "Bug report form"),
        ],
    )
    def test_labels(self, name, label):
        assert humanize(name) == label
