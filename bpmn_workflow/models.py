"""Core data models for compiled workflows."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class StepType(str, Enum):
    """Types of steps in a compiled workflow."""

    TASK = "task"
    CONDITION = "condition"
    END = "end"


class TaskType(str, Enum):
    """How a task step is meant to be carried out."""

    AI_EXECUTED = "ai-executed"
    GUIDELINE = "guideline"


@dataclass
class Transition:
    """An edge from a step to the step named ``step_name``."""

    step_name: str
    button_text: str
    answer: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"stepName": self.step_name, "buttonText": self.button_text}
        if self.answer is not None:
            data["answer"] = self.answer
        return data


@dataclass
class TaskStep:
    """A unit of work with exactly one outgoing transition."""

    title: str
    prompt: str
    task_type: TaskType
    outgoing: Transition
    type: StepType = field(default=StepType.TASK, init=False)

    def transitions(self) -> list[Transition]:
        return [self.outgoing]

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "title": self.title,
            "prompt": self.prompt,
            "taskType": self.task_type.value,
            "outgoing": self.outgoing.to_dict(),
        }


@dataclass
class ConditionStep:
    """A branch point; one transition per possible answer."""

    title: str
    prompt: str
    outgoing: list[Transition]
    type: StepType = field(default=StepType.CONDITION, init=False)

    def transitions(self) -> list[Transition]:
        return list(self.outgoing)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "title": self.title,
            "prompt": self.prompt,
            "outgoing": [t.to_dict() for t in self.outgoing],
        }


@dataclass
class EndStep:
    """A terminal step."""

    title: str
    type: StepType = field(default=StepType.END, init=False)

    def transitions(self) -> list[Transition]:
        return []

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "title": self.title}


Step = Union[TaskStep, ConditionStep, EndStep]


@dataclass
class Workflow:
    """A compiled workflow: steps keyed by id, reachable from ``entry_point``."""

    name: str
    entry_point: str | None = None
    steps: dict[str, Step] = field(default_factory=dict)

    def transitions(self) -> list[Transition]:
        """Return every transition of every step, in step order."""
        return [t for step in self.steps.values() for t in step.transitions()]

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-serializable form of this workflow."""
        return {
            "name": self.name,
            "entryPoint": self.entry_point,
            "steps": {step_id: step.to_dict() for step_id, step in self.steps.items()},
        }
