"""JSON schema for compiled workflows and validation utilities."""

from __future__ import annotations

from typing import Any

import jsonschema

from bpmn_workflow.exceptions import (
    WorkflowDefinitionError,
    WorkflowValidationError,
)
from bpmn_workflow.models import (
    ConditionStep,
    EndStep,
    Step,
    StepType,
    TaskStep,
    TaskType,
    Transition,
    Workflow,
)

TRANSITION_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "stepName": {"type": "string", "minLength": 1},
        "buttonText": {"type": "string"},
        "answer": {"type": "string"},
    },
    "required": ["stepName", "buttonText"],
    "additionalProperties": False,
}

TASK_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "type": {"const": StepType.TASK.value},
        "title": {"type": "string"},
        "prompt": {"type": "string"},
        "taskType": {"type": "string", "enum": [t.value for t in TaskType]},
        "outgoing": TRANSITION_SCHEMA,
    },
    "required": ["type", "title", "prompt", "taskType", "outgoing"],
    "additionalProperties": False,
}

CONDITION_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "type": {"const": StepType.CONDITION.value},
        "title": {"type": "string"},
        "prompt": {"type": "string"},
        "outgoing": {
            "type": "array",
            "items": TRANSITION_SCHEMA,
            "minItems": 2,
        },
    },
    "required": ["type", "title", "prompt", "outgoing"],
    "additionalProperties": False,
}

END_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "type": {"const": StepType.END.value},
        "title": {"type": "string"},
    },
    "required": ["type", "title"],
    "additionalProperties": False,
}

WORKFLOW_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "entryPoint": {"type": "string", "minLength": 1},
        "steps": {
            "type": "object",
            "additionalProperties": {"oneOf": [TASK_SCHEMA, CONDITION_SCHEMA, END_SCHEMA]},
            "minProperties": 1,
        },
    },
    "required": ["name", "entryPoint", "steps"],
    "additionalProperties": False,
}


def validate_schema(data: dict[str, Any]) -> None:
    """Validate a serialized workflow against the workflow JSON schema.

    Raises:
        WorkflowValidationError: If the data does not conform to the schema.
    """
    validator = jsonschema.Draft7Validator(WORKFLOW_SCHEMA)
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path))
    if errors:
        messages = [f"  - {e.json_path}: {e.message}" for e in errors]
        raise WorkflowValidationError(
            f"Workflow schema validation failed with {len(errors)} error(s):\n"
            + "\n".join(messages),
            errors=messages,
        )


def validate_structure(workflow: Workflow) -> None:
    """Validate graph constraints beyond the JSON schema.

    Checks:
    - The entry point is a step.
    - Every transition leads to an existing step.
    - Condition steps have at least two transitions.

    Raises:
        WorkflowDefinitionError: If any check fails.
    """
    errors: list[str] = []

    if workflow.entry_point not in workflow.steps:
        errors.append(f"Entry point '{workflow.entry_point}' is not a step.")

    for step_id, step in workflow.steps.items():
        for t in step.transitions():
            if t.step_name not in workflow.steps:
                errors.append(f"Step '{step_id}' leads to unknown step '{t.step_name}'.")
        if isinstance(step, ConditionStep) and len(step.outgoing) < 2:
            errors.append(f"Condition '{step_id}' must have at least two outgoing transitions.")

    if errors:
        raise WorkflowDefinitionError(
            "Workflow structural validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        )


def _parse_transition(data: dict[str, Any]) -> Transition:
    return Transition(
        step_name=data["stepName"],
        button_text=data["buttonText"],
        answer=data.get("answer"),
    )


def _parse_step(data: dict[str, Any]) -> Step:
    step_type = StepType(data["type"])
    if step_type is StepType.TASK:
        return TaskStep(
            title=data["title"],
            prompt=data["prompt"],
            task_type=TaskType(data["taskType"]),
            outgoing=_parse_transition(data["outgoing"]),
        )
    if step_type is StepType.CONDITION:
        return ConditionStep(
            title=data["title"],
            prompt=data["prompt"],
            outgoing=[_parse_transition(t) for t in data["outgoing"]],
        )
    return EndStep(title=data["title"])


def parse_workflow(data: dict[str, Any]) -> Workflow:
    """Load a serialized workflow (as produced by ``Workflow.to_dict``).

    Raises:
        WorkflowValidationError: If JSON schema validation fails.
        WorkflowDefinitionError: If structural validation fails.
    """
    validate_schema(data)

    workflow = Workflow(
        name=data["name"],
        entry_point=data["entryPoint"],
        steps={step_id: _parse_step(step) for step_id, step in data["steps"].items()},
    )

    validate_structure(workflow)
    return workflow
