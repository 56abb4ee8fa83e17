"""Shared fixtures for BPMN compiler tests."""

from __future__ import annotations

import pytest

from bpmn_workflow import BpmnCompiler

BPMN_NS = "http://www.omg.org/spec/BPMN/20100524/MODEL"


def bpmn(*elements: str) -> str:
    """Wrap flow elements in a BPMN definitions/process document."""
    body = "\n    ".join(elements)
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<bpmn:definitions xmlns:bpmn="{BPMN_NS}" id="Definitions_1">
  <bpmn:process id="Process_1" isExecutable="false">
    {body}
  </bpmn:process>
</bpmn:definitions>"""


def flow(flow_id: str, source: str, target: str, name: str | None = None) -> str:
    label = f' name="{name}"' if name is not None else ""
    return f'<bpmn:sequenceFlow id="{flow_id}" sourceRef="{source}" targetRef="{target}"{label} />'


LINEAR_BPMN = bpmn(
    '<bpmn:startEvent id="Start_1" name="Begin" />',
    '<bpmn:task id="Task_A" name="Collect documents" />',
    '<bpmn:endEvent id="End_1" name="Done" />',
    flow("Flow_1", "Start_1", "Task_A"),
    flow("Flow_2", "Task_A", "End_1"),
)


BRANCHING_BPMN = bpmn(
    '<bpmn:startEvent id="Start_1" />',
    '<bpmn:userTask id="Task_Check" name="Check the request" />',
    '<bpmn:exclusiveGateway id="Gateway_1" name="Is it approved?" />',
    '<bpmn:serviceTask id="Task_Yes" name="Send confirmation" />',
    '<bpmn:task id="Task_No" name="Explain the refusal" />',
    '<bpmn:endEvent id="End_1" />',
    flow("Flow_1", "Start_1", "Task_Check"),
    flow("Flow_2", "Task_Check", "Gateway_1"),
    flow("Flow_3", "Gateway_1", "Task_Yes", "Yes"),
    flow("Flow_4", "Gateway_1", "Task_No", "No"),
    flow("Flow_5", "Task_Yes", "End_1"),
    flow("Flow_6", "Task_No", "End_1"),
)


ELIDED_GATEWAY_BPMN = bpmn(
    '<bpmn:startEvent id="Start_1" />',
    '<bpmn:task id="Task_A" name="First" />',
    '<bpmn:exclusiveGateway id="Gateway_G" name="Pass through" />',
    '<bpmn:task id="Task_B" name="Second" />',
    '<bpmn:endEvent id="End_1" />',
    flow("Flow_1", "Start_1", "Task_A"),
    flow("Flow_2", "Task_A", "Gateway_G"),
    flow("Flow_3", "Gateway_G", "Task_B"),
    flow("Flow_4", "Task_B", "End_1"),
)


@pytest.fixture
def warnings() -> list[str]:
    return []


@pytest.fixture
def compiler(warnings: list[str]) -> BpmnCompiler:
    return BpmnCompiler(warning_handler=warnings.append)
