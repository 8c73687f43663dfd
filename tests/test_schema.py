import json

from cmdassert.schema import _dependency_order, generate_json_schema, write_json_schema


def test_schema_describes_suite_fields():
    schema = generate_json_schema()
    assert schema["title"] == "cmdassert suite"
    assert set(schema["properties"]) == {"name", "cases"}
    assert {"CaseConfig", "Expectation"} <= set(schema["$defs"])


def test_schema_defs_are_ordered_by_dependency():
    names = list(generate_json_schema()["$defs"])
    assert names.index("Expectation") < names.index("CaseConfig")


def test_dependency_order_puts_dependencies_first():
    defs = {
        "Outer": {"properties": {"inner": {"$ref": "#/$defs/Inner"}}},
        "Inner": {"type": "string"},
    }
    assert list(_dependency_order(defs)) == ["Inner", "Outer"]


def test_write_json_schema(tmp_path):
    out = tmp_path / "nested" / "schema.json"
    write_json_schema(out)
    assert json.loads(out.read_text()) == generate_json_schema()


def test_dependency_order_tolerates_cycles():
    defs = {
        "Node": {"properties": {"next": {"$ref": "#/$defs/Node"}}},
        "Leaf": {"type": "string"},
    }
    assert list(_dependency_order(defs)) == ["Node", "Leaf"]
