from __future__ import annotations
import pandas as pd
import pytest

from field_sanitizer.sanitize.engine import (
    RuleEngine,
    apply_rule,
    run_pipeline,
    sanitize_data,
    replace_merge,
    append_merge,
)
from field_sanitizer.sanitize.registry import RuleRegistry, default_registry
from field_sanitizer.sanitize.specifier import RuleSpec


def test_construct_empty_and_with_rules():
    assert RuleEngine().get_rules() == {}
    cfg = {"field1": ["trim", "lowercase"], "field2": ["uppercase"]}
    assert RuleEngine(cfg).get_rules() == cfg

def test_builtin_catalog_through_sanitize():
    data = {
        "field1": "  Trimmed  ",
        "field2": "LOWERCASE",
        "field3": "uppercase",
        "field4": "MiXeDcAsE",
        "field5": "  123-456  ",
        "field6": " test@example.com ",
        "field7": "123.45",
        "field8": "123",
        "field9": "<p>Test</p>",
        "field10": "  multiple   spaces  ",
        "field11": "This is a test with special chars: ação!@#$%^&*()",
        "field12": "https://www.example.com",
        "field13": '<p>Test</p><script>alert("XSS")</script>',
        "field14": '<a href="#">Link</a>',
        "field15": "Test1234",
    }
    rules = {
        "field1": ["trim"],
        "field2": ["lowercase"],
        "field3": ["uppercase"],
        "field4": ["capitalize"],
        "field5": ["numbers_only"],
        "field6": ["email", "trim"],
        "field7": ["float"],
        "field8": ["int"],
        "field9": ["htmlspecialchars"],
        "field10": ["norm_spaces"],
        "field11": ["slug"],
        "field12": ["url"],
        "field13": ["strip_tags"],
        "field14": ["strip_tags_allowed:<a>"],
        "field15": ["alphanumeric"],
    }
    out = RuleEngine().sanitize(data, rules)
    assert out == {
        "field1": "Trimmed",
        "field2": "lowercase",
        "field3": "UPPERCASE",
        "field4": "Mixedcase",
        "field5": "123456",
        "field6": "test@example.com",
        "field7": 123.45,
        "field8": 123,
        "field9": "&lt;p&gt;Test&lt;/p&gt;",
        "field10": "multiple spaces",
        "field11": "this-is-a-test-with-special-chars-acao",
        "field12": "https://www.example.com",
        "field13": 'Testalert("XSS")',
        "field14": '<a href="#">Link</a>',
        "field15": "Test1234",
    }
    assert isinstance(out["field8"], int)

def test_pipeline_chains_left_to_right():
    engine = RuleEngine({"name": ["trim", "capitalize"]})
    assert engine.sanitize({"name": "  john doe  "}) == {"name": "John Doe"}

def test_identity_without_any_rules():
    data = {"field1": "  test  ", "n": 3}
    assert RuleEngine().sanitize(data) == data
    assert RuleEngine().sanitize(data, {}) == data

def test_field_set_is_preserved():
    engine = RuleEngine({"a": ["trim"], "missing": ["uppercase"]})
    data = {"a": " x ", "b": " y ", "c": None}
    out = engine.sanitize(data)
    assert set(out) == set(data)
    assert out == {"a": "x", "b": " y ", "c": None}

def test_empty_data_stays_empty():
    assert RuleEngine().sanitize({}, {"field1": ["trim"]}) == {}

def test_late_rules_replace_base_pipeline_for_same_field():
    engine = RuleEngine({"name": ["trim"]})
    # replaced, not appended: 'trim' no longer runs
    assert engine.sanitize({"name": " ab "}, {"name": ["uppercase"]}) == {"name": " AB "}
    assert engine.sanitize({"name": "ab"}, {"name": ["uppercase"]}) == {"name": "AB"}
    # late rules are not persisted
    assert engine.get_rules() == {"name": ["trim"]}

def test_late_rules_add_new_fields():
    engine = RuleEngine({"field1": ["trim"]})
    out = engine.sanitize({"field1": "  test  ", "field2": "  value  "}, {"field2": ["trim"]})
    assert out == {"field1": "test", "field2": "value"}

def test_add_rules_concatenates_per_field():
    engine = RuleEngine()
    engine.add_rules({"field1": ["trim"]})
    assert engine.get_rules() == {"field1": ["trim"]}
    engine.add_rules({"field1": ["lowercase"], "field2": ["uppercase"]})
    assert engine.get_rules() == {"field1": ["trim", "lowercase"], "field2": ["uppercase"]}

def test_added_rules_replace_base_rules_for_same_field():
    engine = RuleEngine({"f": ["trim"], "g": ["uppercase"]})
    engine.add_rules({"f": ["lowercase"]})
    assert engine.get_rules() == {"f": ["lowercase"], "g": ["uppercase"]}

def test_get_rules_is_a_snapshot():
    engine = RuleEngine({"f": ["trim"]})
    snap = engine.get_rules()
    snap["f"].append("uppercase")
    snap["g"] = ["slug"]
    assert engine.get_rules() == {"f": ["trim"]}

def test_registry_field_rules_sit_between_base_and_dynamic():
    reg = RuleRegistry()
    reg.register_field_rules({"a": ["uppercase"], "b": ["lowercase"]})
    engine = RuleEngine({"a": ["trim"], "c": ["slug"]}, registry=reg)
    engine.add_rules({"b": ["trim"]})
    assert engine.get_rules() == {"a": ["uppercase"], "b": ["trim"], "c": ["slug"]}

def test_unknown_rule_is_a_noop():
    assert RuleEngine().sanitize({"f": "value"}, {"f": ["does_not_exist"]}) == {"f": "value"}
    assert apply_rule("value", "does_not_exist:1,2") == "value"

@pytest.mark.parametrize("blank", ["", None, float("nan"), pd.NA])
def test_blank_values_skip_builtins(blank):
    out = apply_rule(blank, "uppercase")
    assert out is blank
    assert apply_rule(blank, "slug") is blank
    assert apply_rule(blank, "strip_tags_allowed:<a>") is blank

def test_custom_rules_see_blank_values():
    default_registry.register("mark", lambda v: f"<{v}>")
    assert apply_rule("", "mark") == "<>"
    assert apply_rule(None, "mark") == "<None>"

def test_custom_rule_registration_and_reset():
    default_registry.register("append_custom", lambda v: v + "-custom")
    engine = RuleEngine({"name": ["append_custom"]})
    assert engine.sanitize({"name": "John Doe"}) == {"name": "John Doe-custom"}
    default_registry.reset()
    assert engine.sanitize({"name": "John Doe"}) == {"name": "John Doe"}

def test_custom_rule_receives_params_list():
    seen = []

    def append_text(value, params):
        seen.append(params)
        return value + (params[0] if params else "_appended")

    default_registry.register("append_text", append_text)
    assert apply_rule("My String", "append_text:!!!") == "My String!!!"
    assert apply_rule("My String", "append_text") == "My String_appended"
    assert apply_rule("x", RuleSpec("append_text", ("a", "b"), parameterized=True)) == "xa"
    assert seen == [["!!!"], [], ["a", "b"]]

def test_builtin_names_cannot_be_shadowed():
    default_registry.register("trim", lambda v: "hijacked")
    assert apply_rule("  x  ", "trim") == "x"

def test_injected_registry_is_used_instead_of_default():
    reg = RuleRegistry({"tag": lambda v: v + "#local"})
    default_registry.register("tag", lambda v: v + "#global")
    assert RuleEngine({"f": ["tag"]}, registry=reg).sanitize({"f": "v"}) == {"f": "v#local"}
    assert RuleEngine({"f": ["tag"]}).sanitize({"f": "v"}) == {"f": "v#global"}

def test_custom_rule_errors_propagate_and_abort_the_batch():
    def boom(value):
        raise RuntimeError("bad value")

    default_registry.register("boom", boom)
    engine = RuleEngine({"a": ["trim"], "b": ["boom"]})
    with pytest.raises(RuntimeError, match="bad value"):
        engine.sanitize({"a": " x ", "b": "y"})

def test_arity_errors_from_custom_rules_propagate():
    default_registry.register("needs_three", lambda value, params: params[2])
    with pytest.raises(IndexError):
        apply_rule("v", "needs_three:a")

def test_scalar_mode_with_pipeline_list():
    engine = RuleEngine()
    assert engine.sanitize("  john doe  ", ["trim", "capitalize"]) == "John Doe"
    assert engine.sanitize("  keep  ") == "  keep  "

def test_scalar_mode_flattens_rule_set():
    engine = RuleEngine()
    late = {"x": ["trim"], "y": ["uppercase"]}
    assert engine.sanitize("  ab ", late) == "AB"

def test_strip_tags_allowed_variants():
    engine = RuleEngine()
    data = {"field1": "<p>Test</p><a>Link</a>"}
    assert engine.sanitize(data, {"field1": ["strip_tags_allowed:<a>"]}) == {"field1": "Test<a>Link</a>"}
    assert engine.sanitize(data, {"field1": ["strip_tags_allowed"]}) == {"field1": "TestLink"}
    assert engine.sanitize(data, {"field1": ["strip_tags_allowed:<a>,<p>"]}) == data

def test_slug_on_non_string_yields_empty():
    assert RuleEngine().sanitize({"field1": 123}, {"field1": ["slug"]}) == {"field1": ""}

def test_run_pipeline_and_sanitize_data_helpers():
    assert run_pipeline("  A  B ", ["norm_spaces", "lowercase"]) == "a b"
    assert run_pipeline("same", []) == "same"
    assert sanitize_data({"a": " x ", "b": " y "}, {"a": ["trim"]}) == {"a": "x", "b": " y "}
    assert sanitize_data({"a": " x "}, {}) == {"a": " x "}

def test_merge_strategies_differ():
    base = {"f": ["trim"], "g": ["slug"]}
    incoming = {"f": ["uppercase"], "h": ["int"]}
    assert replace_merge(base, incoming) == {"f": ["uppercase"], "g": ["slug"], "h": ["int"]}
    assert append_merge(base, incoming) == {"f": ["trim", "uppercase"], "g": ["slug"], "h": ["int"]}
    # inputs untouched
    assert base == {"f": ["trim"], "g": ["slug"]}

def test_sanitize_frame_maps_columns_with_pipelines():
    df = pd.DataFrame({"name": ["  ann lee ", None, " BOB "], "phone": ["(555) 123", "1-2", ""], "n": [1, 2, 3]})
    engine = RuleEngine({"name": ["trim", "capitalize"], "phone": ["numbers_only"]})
    out = engine.sanitize_frame(df)
    assert list(out.columns) == ["name", "phone", "n"]
    assert out["name"].tolist() == ["Ann Lee", None, "Bob"]
    assert out["phone"].tolist() == ["555123", "12", ""]
    assert out["n"].tolist() == [1, 2, 3]
    # original untouched
    assert df.loc[0, "name"] == "  ann lee "

def test_builtins_from_edge_inputs_through_apply_rule():
    assert apply_rule(float("inf"), "int") == 0
    assert apply_rule("9" * 5000, "int") == 0
    assert apply_rule("1,000 items", "slug") == "1-000-items"
    assert apply_rule('<a title="x>y">t</a>', "strip_tags") == "t"
