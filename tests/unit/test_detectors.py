"""Tests for the per-kind element detectors."""

from typing import Any

import pytest

from bpmn_finder.core.search.detectors import (
    detect_call_activities,
    detect_call_reference,
    detect_condition_expressions,
    detect_script,
    detect_script_tasks,
)
from bpmn_finder.core.search.records import PlaceholderIds
from bpmn_finder.models.match import ElementKind

PARENT: dict[str, Any] = {"@_id": "Process_1"}


def test_call_reference_exact_match() -> None:
    activity = {"@_id": "ca1", "@_calledElement": "SubProcA"}
    matches = detect_call_reference(
        "callActivity", activity, PARENT, process_id="SubProcA", ids=PlaceholderIds()
    )
    assert len(matches) == 1
    assert matches[0].element_id == "ca1"
    assert matches[0].element_kind == ElementKind.CALL_ACTIVITY
    assert matches[0].label == "CallActivity - calledElement: SubProcA"
    assert matches[0].matched_text == "SubProcA"


@pytest.mark.parametrize("called", ["subproca", "SubProcA2", "Sub", " SubProcA"])
def test_call_reference_is_case_sensitive_and_exact(called: str) -> None:
    activity = {"@_id": "ca1", "@_calledElement": called}
    assert not detect_call_reference(
        "callActivity", activity, PARENT, process_id="SubProcA", ids=PlaceholderIds()
    )


def test_call_reference_ignores_other_kinds() -> None:
    node = {"@_id": "t1", "@_calledElement": "SubProcA"}
    assert not detect_call_reference(
        "scriptTask", node, PARENT, process_id="SubProcA", ids=PlaceholderIds()
    )


def test_call_reference_cardinality() -> None:
    one = {"@_id": "ca1", "@_calledElement": "P"}
    two = [one, {"@_id": "ca2", "@_calledElement": "P"}, {"@_id": "ca3", "@_calledElement": "Q"}]
    single = detect_call_reference("callActivity", one, PARENT, process_id="P", ids=PlaceholderIds())
    many = detect_call_reference("callActivity", two, PARENT, process_id="P", ids=PlaceholderIds())
    assert [m.element_id for m in single] == ["ca1"]
    assert [m.element_id for m in many] == ["ca1", "ca2"]
    assert many[0] == single[0]


def test_script_matches_scalar_and_structured_text() -> None:
    node = {"@_id": "listener"}
    ids = PlaceholderIds()
    scalar = detect_script("script", "print('TODO')", node, query="todo", ids=ids)
    structured = detect_script(
        "script", {"@_scriptFormat": "groovy", "#text": "todo()"}, node, query="TODO", ids=ids
    )
    assert [m.label for m in scalar + structured] == ["Script content match"] * 2
    assert scalar[0].element_id == "listener"
    assert scalar[0].element_kind == ElementKind.SCRIPT
    assert structured[0].matched_text == "todo()"


def test_script_without_owner_id_gets_placeholder() -> None:
    matches = detect_script("script", "todo", {}, query="todo", ids=PlaceholderIds())
    assert matches[0].element_id == "script_1"


def test_script_task_matches_nested_script() -> None:
    tasks = [
        {"@_id": "st1", "@_name": "Check", "bpmn:script": "// TODO later"},
        {"@_id": "st2", "@_name": "Other", "bpmn:script": "done()"},
        {"@_id": "st3", "bpmn:script": "todo: unnamed"},
    ]
    matches = detect_script_tasks("scriptTask", tasks, PARENT, query="todo", ids=PlaceholderIds())
    assert [(m.element_id, m.label) for m in matches] == [
        ("st1", "Script Task - Check"),
        ("st3", "Script Task - Unnamed Task"),
    ]
    assert matches[0].matched_text == "// TODO later"


def test_script_task_without_script_does_not_match() -> None:
    task = {"@_id": "st1", "@_name": "todo"}
    assert not detect_script_tasks("scriptTask", task, PARENT, query="todo", ids=PlaceholderIds())


def test_script_task_with_repeated_scripts() -> None:
    task = {"@_id": "s", "@_name": "n", "script": ["a", "hit", {"#text": "another hit"}]}
    matches = detect_script_tasks("scriptTask", task, PARENT, query="HIT", ids=PlaceholderIds())
    assert [(m.element_id, m.matched_text) for m in matches] == [
        ("s", "hit"),
        ("s", "another hit"),
    ]
    assert {m.label for m in matches} == {"Script Task - n"}


def test_script_task_placeholder_shared_across_scripts() -> None:
    ids = PlaceholderIds()
    task = {"script": ["hit one", "hit two"]}
    matches = detect_script_tasks("scriptTask", task, PARENT, query="hit", ids=ids)
    assert [m.element_id for m in matches] == ["script_task_1", "script_task_1"]


def test_call_activity_whole_and_field_matches() -> None:
    activity = {
        "@_id": "ca2",
        "@_name": "Billing",
        "@_calledElement": "BillingProcess",
        "bpmn:extensionElements": {"camunda:in": {"@_source": "amount", "@_target": "amount"}},
    }
    matches = detect_call_activities(
        "callActivity", activity, PARENT, query="billing", ids=PlaceholderIds()
    )

    assert {m.element_id for m in matches} == {"ca2"}
    assert {m.element_kind for m in matches} == {ElementKind.CALL_ACTIVITY}
    assert matches[0].label == "Call Activity - Billing"
    assert '"@_calledElement": "BillingProcess"' in (matches[0].matched_text or "")

    fields = matches[1:]
    assert [m.label for m in fields] == [
        "Call Activity (Billing) - @_name: Billing",
        "Call Activity (Billing) - @_calledElement: BillingProcess",
    ]
    assert [m.matched_text for m in fields] == ["Billing", "BillingProcess"]


def test_call_activity_nested_field_match() -> None:
    activity = {
        "@_id": "ca1",
        "bpmn:extensionElements": {"camunda:in": {"@_source": "customerId"}},
    }
    matches = detect_call_activities(
        "callActivity", activity, PARENT, query="CUSTOMER", ids=PlaceholderIds()
    )
    assert [m.label for m in matches] == [
        "Call Activity - Unnamed Call Activity",
        "Call Activity (Unnamed Call Activity) - @_source: customerId",
    ]


def test_call_activity_tag_name_only_matches_whole_serialization() -> None:
    activity = {"@_id": "ca1", "@_calledElement": "X"}
    matches = detect_call_activities(
        "callActivity", activity, PARENT, query="calledelement", ids=PlaceholderIds()
    )
    assert len(matches) == 1
    assert matches[0].label == "Call Activity - Unnamed Call Activity"


def test_call_activity_without_id_shares_one_placeholder() -> None:
    ids = PlaceholderIds()
    idle = {"@_name": "Idle", "@_calledElement": "Nothing"}
    hit = {"@_name": "Pay", "@_calledElement": "Payment"}
    matches = detect_call_activities("callActivity", [idle, hit], PARENT, query="pay", ids=ids)
    assert len(matches) == 3
    assert {m.element_id for m in matches} == {"call_activity_1"}


def test_condition_expression_shapes() -> None:
    flow_scalar = {"@_id": "f1", "@_sourceRef": "A", "@_targetRef": "B"}
    flow_named = {"@_id": "f2", "@_name": "Approved?"}
    ids = PlaceholderIds()

    scalar = detect_condition_expressions(
        "conditionExpression", "${amount > 100}", flow_scalar, query="AMOUNT", ids=ids
    )
    structured = detect_condition_expressions(
        "conditionExpression",
        {"@_xsi:type": "tFormalExpression", "#text": "${amount > 5}"},
        flow_named,
        query="amount",
        ids=ids,
    )
    opaque = detect_condition_expressions(
        "conditionExpression", {"@_language": "groovy"}, {}, query="groovy", ids=ids
    )

    assert (scalar[0].element_id, scalar[0].label) == ("f1", "Condition Expression (A -> B)")
    assert scalar[0].matched_text == "${amount > 100}"
    assert (structured[0].element_id, structured[0].label) == (
        "f2",
        "Condition Expression (Approved?)",
    )
    assert structured[0].matched_text == "${amount > 5}"
    assert (opaque[0].element_id, opaque[0].label) == (
        "condition_expression_1",
        "Condition Expression",
    )
    assert opaque[0].matched_text == '{"@_language": "groovy"}'
    assert {m.element_kind for m in scalar + structured + opaque} == {
        ElementKind.CONDITION_EXPRESSION
    }


def test_condition_expression_no_match() -> None:
    assert not detect_condition_expressions(
        "conditionExpression", "${x}", PARENT, query="amount", ids=PlaceholderIds()
    )


@pytest.mark.parametrize(
    ("detector", "tag", "value"),
    [
        (detect_script, "script", "todo"),
        (detect_script_tasks, "scriptTask", {"@_id": "t", "script": "todo"}),
        (detect_call_activities, "callActivity", {"@_id": "c", "@_name": "todo"}),
        (detect_condition_expressions, "conditionExpression", "todo"),
    ],
)
def test_text_detectors_ignore_other_tags(detector: Any, tag: str, value: Any) -> None:
    ids = PlaceholderIds()
    assert detector(tag, value, PARENT, query="todo", ids=ids)
    assert not detector("task", value, PARENT, query="todo", ids=ids)
