"""Tests for bpmn_workflow.document."""

from __future__ import annotations

import pytest

from tests.conftest import BRANCHING_BPMN, bpmn, flow
from bpmn_workflow import (
    BpmnDocument,
    DuplicateTaskError,
    ElementKind,
    InvalidDocumentError,
    SequenceFlow,
    SourceElement,
    TaskNotFoundError,
)


class TestElementKind:
    def test_from_tag_ignores_case(self) -> None:
        assert ElementKind.from_tag("exclusiveGateway") is ElementKind.EXCLUSIVE_GATEWAY
        assert ElementKind.from_tag("EXCLUSIVEGATEWAY") is ElementKind.EXCLUSIVE_GATEWAY
        assert ElementKind.from_tag("servicetask") is ElementKind.SERVICE_TASK

    def test_unknown_tag_is_other(self) -> None:
        assert ElementKind.from_tag("parallelGateway") is ElementKind.OTHER

    def test_source_element_kind(self) -> None:
        assert SourceElement(tag="endEvent", id="E").kind is ElementKind.END_EVENT


class TestBpmnDocument:
    def test_namespaces_are_stripped(self) -> None:
        doc = BpmnDocument.from_string(BRANCHING_BPMN)
        tasks = doc.elements("task")
        assert tasks == [SourceElement(tag="task", id="Task_No", name="Explain the refusal")]

    def test_elements_in_document_order(self) -> None:
        xml = bpmn(
            '<bpmn:task id="B" />',
            '<bpmn:task id="A" />',
            '<bpmn:task id="C" />',
        )
        doc = BpmnDocument.from_string(xml)
        assert [e.id for e in doc.elements("task")] == ["B", "A", "C"]

    def test_outgoing_flows_are_indexed_by_source(self) -> None:
        doc = BpmnDocument.from_string(BRANCHING_BPMN)
        assert doc.outgoing_flows("Gateway_1") == [
            SequenceFlow(id="Flow_3", source="Gateway_1", target="Task_Yes", name="Yes"),
            SequenceFlow(id="Flow_4", source="Gateway_1", target="Task_No", name="No"),
        ]
        assert doc.outgoing_flows("End_1") == []
        assert len(doc.flows) == 6

    def test_find_linkable_filters_by_tag(self) -> None:
        doc = BpmnDocument.from_string(BRANCHING_BPMN)
        found = doc.find_linkable("Task_Yes", ["task", "serviceTask"])
        assert found.kind is ElementKind.SERVICE_TASK
        with pytest.raises(TaskNotFoundError):
            doc.find_linkable("Task_Yes", ["task"])

    def test_find_linkable_missing(self) -> None:
        doc = BpmnDocument.from_string(BRANCHING_BPMN)
        with pytest.raises(TaskNotFoundError, match='No task found for id "Nope"'):
            doc.find_linkable("Nope", ["task"])

    def test_find_linkable_duplicate(self) -> None:
        xml = bpmn('<bpmn:task id="X" />', '<bpmn:serviceTask id="X" />')
        doc = BpmnDocument.from_string(xml)
        with pytest.raises(DuplicateTaskError, match='Multiple tasks found for id "X"'):
            doc.find_linkable("X", ["task", "serviceTask"])

    def test_missing_attributes_default_to_empty(self) -> None:
        doc = BpmnDocument.from_string(bpmn("<bpmn:startEvent />", flow("F", "start", "A")))
        assert doc.elements("startEvent") == [SourceElement(tag="startEvent", id="", name="")]
        assert doc.outgoing_flows("start")[0].name == ""

    def test_malformed_xml_raises(self) -> None:
        with pytest.raises(InvalidDocumentError, match="Error parsing BPMN"):
            BpmnDocument.from_string("<definitions>")

    def test_entity_declarations_are_rejected(self) -> None:
        xml = '<!DOCTYPE d [<!ENTITY boom "boom">]><definitions name="&boom;" />'
        with pytest.raises(InvalidDocumentError):
            BpmnDocument.from_string(xml)
