import datetime as dt

import pytest

from rule_normalizer.attributes import Max, ObjectValidationAttribute, Rule, Size, StringRule
from rule_normalizer.errors import InputTooDeep, InputTooLarge
from rule_normalizer.normalize import (
    Limits,
    RuleNormalizer,
    check_limits,
    normalize_declarations,
    normalize_rule,
)
from rule_normalizer.paths import ValidationPath
from rule_normalizer.references import FieldReference, RouteParameterReference

ROOT = ValidationPath.create()
USER = ValidationPath.create("user")


class PriceRule:
    def validate(self, attribute, value, fail):
        if value < 0:
            fail("negative")


class CityFor(ObjectValidationAttribute):
    def get_rule(self, path):
        return f"city_in:{path.get()}"


def test_plain_rules_pass_through():
    assert normalize_rule("required", USER) == ["required"]
    assert normalize_rule("required|max:255", USER) == ["required", "max:255"]


def test_regex_rule_is_not_split():
    assert normalize_rule("regex:/^a|b$/", USER) == ["regex:/^a|b$/"]


def test_single_and_multi_field_rewrite():
    assert normalize_rule("gt:other_field", USER) == ["gt:user.other_field"]
    assert normalize_rule("required_with:a,b", USER) == ["required_with:user.a,user.b"]


def test_field_references_untouched_at_root():
    assert normalize_rule("gt:x|required_with:a,b", ROOT) == ["gt:x", "required_with:a,b"]


def test_string_path_is_accepted():
    assert normalize_rule("same:x", "user.address") == ["same:user.address.x"]


def test_nested_lists_flatten_in_order():
    assert normalize_rule([["a", "b"], ["c"]], USER) == ["a", "b", "c"]
    assert normalize_rule([[[["a"]], "b|c"], ("d", [])], USER) == ["a", "b", "c", "d"]


def test_duplicates_are_kept():
    assert normalize_rule(["required", "required"], USER) == ["required", "required"]


def test_string_attribute_parameter_dropping():
    assert normalize_rule(Size([]), USER) == ["size"]
    assert normalize_rule(Size(5), USER) == ["size:5"]
    assert normalize_rule(StringRule("size", max=5), USER) == ["size:max=5"]


def test_object_attribute_renders_with_path():
    assert normalize_rule(CityFor(), USER) == ["city_in:user"]


def test_object_attribute_result_is_taken_as_is():
    rule = PriceRule()

    class Wrapped(ObjectValidationAttribute):
        def get_rule(self, path):
            return rule

    assert normalize_rule(Wrapped(), USER)[0] is rule


def test_rule_container_is_unwrapped_with_same_path():
    rules = Rule("required|gt:min", Rule([Max(3)]), "same:confirm")
    assert normalize_rule(rules, USER) == ["required", "gt:user.min", "max:3", "same:user.confirm"]


def test_opaque_rules_pass_through_by_identity():
    rule = PriceRule()
    result = normalize_rule(["required", rule], USER)
    assert result[0] == "required"
    assert result[1] is rule


def test_callable_rules_pass_through():
    def positive(attribute, value, fail):
        if value <= 0:
            fail("must be positive")

    assert normalize_rule(positive, USER) == [positive]


def test_unknown_shapes_pass_through():
    marker = object()
    assert normalize_rule([42, marker, None], USER) == [42, marker, None]


def test_typed_parameters_inside_attribute():
    rule = StringRule(
        "between_dates",
        dt.datetime(2024, 1, 1, tzinfo=dt.timezone.utc),
        FieldReference("ends_at"),
        strict=True,
        ids=RouteParameterReference("ids", route={"ids": [1, [2, 3]]}),
    )
    assert normalize_rule(rule, USER) == [
        "between_dates:2024-01-01T00:00:00+00:00,user.ends_at,strict=true,ids=1,2,3",
    ]


def test_normalizer_does_not_mutate_input():
    rules = ["required|gt:min", ["same:x"]]
    RuleNormalizer().execute(rules, USER)
    assert rules == ["required|gt:min", ["same:x"]]


def test_check_limits_depth():
    check_limits([["a"]], Limits(max_depth=2))
    with pytest.raises(InputTooDeep) as exc:
        check_limits([[["a"]]], Limits(max_depth=2))
    assert exc.value.depth == 3
    assert exc.value.limit == 2


def test_check_limits_counts_containers_as_depth():
    with pytest.raises(InputTooDeep):
        check_limits(Rule(Rule("a")), Limits(max_depth=1))


def test_check_limits_rule_count():
    check_limits(["a|b", "regex:/x|y/"], Limits(max_rules=3))
    with pytest.raises(InputTooLarge) as exc:
        check_limits(["a|b|c", Max(1)], Limits(max_rules=3))
    assert exc.value.count == 4


def test_check_limits_handles_deep_input_without_recursion():
    rule = "a"
    for _ in range(5000):
        rule = [rule]
    with pytest.raises(InputTooDeep):
        check_limits(rule, Limits(max_depth=100))


def test_normalize_declarations_resolves_siblings():
    declarations = {
        "min": "required|numeric",
        "max": ["required", "gt:min"],
    }
    assert normalize_declarations(declarations, "filters") == {
        "filters.min": ["required", "numeric"],
        "filters.max": ["required", "gt:filters.min"],
    }


def test_normalize_declarations_at_root():
    assert normalize_declarations({"email": "required|email"}) == {"email": ["required", "email"]}


def test_normalize_declarations_enforces_limits():
    with pytest.raises(InputTooDeep):
        normalize_declarations({"a": [["x"]]}, limits=Limits(max_depth=1))
