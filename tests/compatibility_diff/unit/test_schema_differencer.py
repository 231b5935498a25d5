"""Schema differencer tests."""

from __future__ import annotations

from webhook_contract_ci.compatibility_diff import ChangeKind, DiffEntry, diff_schemas


def _object(properties: dict, **keywords) -> dict:
    return {"type": "object", "properties": properties, **keywords}


def test_required_became_optional_is_breaking() -> None:
    base = _object({"id": {"type": "string"}}, required=["id"])
    candidate = _object({"id": {"type": "string"}})

    result = diff_schemas(base, candidate)

    assert result.required_became_optional == (
        DiffEntry(ChangeKind.REQUIRED_BECAME_OPTIONAL, "/id"),
    )
    assert result.breaking_count == 1


def test_type_change_detail_renders_both_type_sets() -> None:
    base = _object({"total": {"type": "integer"}})
    candidate = _object({"total": {"type": ["integer", "string"]}})

    result = diff_schemas(base, candidate)

    assert [entry.render() for entry in result.type_changed] == [
        '/total ("integer" -> ["integer", "string"])'
    ]


def test_dropped_type_is_breaking_only_for_required_paths() -> None:
    base = _object(
        {"id": {"type": "string"}, "note": {"type": "string"}},
        required=["id"],
    )
    candidate = _object({"id": {}, "note": {}}, required=["id"])

    result = diff_schemas(base, candidate)

    assert [entry.path for entry in result.type_changed] == ["/id"]


def test_base_without_type_constraint_never_reports_type_change() -> None:
    result = diff_schemas(_object({"value": {}}), _object({"value": {"type": "string"}}))

    assert result.type_changed == ()


def test_removed_optional_is_reported_only_under_closed_parent() -> None:
    base = _object({"id": {"type": "string"}, "note": {"type": "string"}})

    closed = diff_schemas(base, _object({"id": {"type": "string"}}, additionalProperties=False))
    open_ = diff_schemas(base, _object({"id": {"type": "string"}}))

    assert [entry.path for entry in closed.removed_optional] == ["/note"]
    assert open_.removed_optional == ()
    assert closed.constraints_changed == ()


def test_new_field_must_fit_additional_properties_schema() -> None:
    base = _object({}, additionalProperties={"type": "string"})
    candidate = _object(
        {"label": {"type": "string"}, "count": {"type": "integer"}},
        additionalProperties={"type": "string"},
    )

    result = diff_schemas(base, candidate)

    assert [entry.render() for entry in result.constraints_changed] == [
        '/count (type "integer" not allowed by additionalProperties of /)'
    ]
    assert [entry.path for entry in result.added] == ["/label"]


def test_additional_properties_schema_rows_are_not_reported_as_paths() -> None:
    base = _object({"id": {"type": "string"}}, additionalProperties={"type": "string"})
    candidate = _object({"id": {"type": "string"}})

    result = diff_schemas(base, candidate)

    assert result.removed_required == ()
    assert result.added == ()
    assert result.removed_optional == ()


def test_rows_below_a_shared_additional_properties_schema_are_compared() -> None:
    keyed = {"type": "object", "required": ["id"], "properties": {"id": {"type": "string"}}}
    base = _object({}, additionalProperties=keyed)
    candidate = _object({}, additionalProperties={"type": "object"})

    result = diff_schemas(base, candidate)

    assert [entry.path for entry in result.removed_required] == ["/[additionalProperties]/id"]


def test_rows_below_a_new_additional_properties_schema_are_not_added() -> None:
    base = _object({"meta": {"type": "object"}})
    keyed = _object({"source": {"type": "string"}})
    candidate = _object({"meta": _object({}, additionalProperties=keyed)})

    result = diff_schemas(base, candidate)

    assert result.added == ()
    assert result.breaking_count == 0


def test_properties_of_a_reference_also_used_as_all_of_mixin_are_compared() -> None:
    entity = {"type": "object", "required": ["id"], "properties": {"id": {"type": "string"}}}
    base = _object(
        {"parent": {"$ref": "#/$defs/entity"}},
        required=["parent"],
        allOf=[{"$ref": "#/$defs/entity"}],
        **{"$defs": {"entity": entity}},
    )
    candidate = {**base, "properties": {"parent": {"type": "object"}}}

    result = diff_schemas(base, candidate)

    assert [entry.path for entry in result.removed_required] == ["/parent/id"]
    assert result.breaking_count == 1


def test_opening_a_closed_object_is_breaking() -> None:
    base = _object({"id": {"type": "string"}}, additionalProperties=False)
    candidate = _object({"id": {"type": "string"}}, additionalProperties=True)

    result = diff_schemas(base, candidate)

    assert [entry.render() for entry in result.constraints_changed] == [
        "/ (additionalProperties opened)"
    ]


def test_new_array_element_paths_are_added() -> None:
    base = _object({"tags": {"type": "array"}})
    candidate = _object({"tags": {"type": "array", "items": {"type": "string"}}})

    result = diff_schemas(base, candidate)

    assert [entry.path for entry in result.added] == ["/tags/*"]
    assert result.breaking_count == 0


def test_entries_are_sorted_by_display_path_then_kind_then_detail() -> None:
    base = _object(
        {
            "b": {"type": "integer", "minimum": 5, "maxLength": 3},
            "a": {"type": "string"},
        },
        required=["a", "b"],
    )
    candidate = _object({"b": {"type": "integer", "minimum": 1, "maxLength": 9}})

    result = diff_schemas(base, candidate)

    assert [entry.path for entry in result.removed_required] == ["/a"]
    assert [entry.detail for entry in result.constraints_changed] == [
        "maxLength loosened (3 -> 9)",
        "minimum loosened (5 -> 1)",
    ]
    assert [entry.path for entry in result.required_became_optional] == ["/b"]


def test_result_renders_json_structure() -> None:
    base = _object({"id": {"type": "string"}}, required=["id"])
    candidate = _object({"name": {"type": "string"}})

    rendered = diff_schemas(base, candidate).to_dict()

    assert rendered == {
        "breaking": {
            "removedRequired": ["/id"],
            "requiredBecameOptional": [],
            "typeChanged": [],
            "constraintsChanged": [],
        },
        "nonBreaking": {"added": ["/name"], "removedOptional": []},
        "breakingCount": 1,
    }
