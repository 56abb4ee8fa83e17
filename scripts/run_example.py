#!/usr/bin/env python3
"""Example: compile the refund process diagram and print the workflow."""

from __future__ import annotations

import json
from pathlib import Path

from bpmn_workflow import ConditionStep, EndStep, TaskStep, parse_bpmn, parse_workflow

DIAGRAM_PATH = Path(__file__).parent / "example_process.bpmn"


def main() -> None:
    # 1. Compile the diagram, collecting warnings
    warnings: list[str] = []
    workflow = parse_bpmn(DIAGRAM_PATH.read_text(), "refund", warning_handler=warnings.append)
    print(f"Compiled workflow: {workflow.name} ({len(workflow.steps)} steps)")
    print(f"  Entry point: {workflow.entry_point}")
    for warning in warnings:
        print(f"  Warning: {warning}")
    print()

    # 2. Walk the steps in insertion order
    print("=== Steps ===")
    for step_id, step in workflow.steps.items():
        if isinstance(step, TaskStep):
            print(
                f"  [task/{step.task_type.value}] {step_id}: {step.title} "
                f"-> {step.outgoing.step_name} ({step.outgoing.button_text})"
            )
        elif isinstance(step, ConditionStep):
            branches = ", ".join(f"{t.answer} -> {t.step_name}" for t in step.outgoing)
            print(f"  [condition] {step_id}: {step.title} [{branches}]")
        elif isinstance(step, EndStep):
            print(f"  [end] {step_id}: {step.title}")
    print()

    # 3. Serialize and load it back
    data = workflow.to_dict()
    assert parse_workflow(data) == workflow
    print("=== JSON ===")
    print(json.dumps(data, indent=2))


if __name__ == "__main__":
    main()
