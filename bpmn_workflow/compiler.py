"""Compile BPMN 2.0 diagrams into executable workflows."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from bpmn_workflow.document import BpmnDocument, ElementKind, SequenceFlow, SourceElement
from bpmn_workflow.exceptions import BpmnParserError, NoEntryPointError
from bpmn_workflow.models import (
    ConditionStep,
    EndStep,
    TaskStep,
    TaskType,
    Transition,
    Workflow,
)

logger = logging.getLogger(__name__)

WarningHandler = Callable[[str], None]

# Elements that can be linked to by a sequence flow.
SUPPORTED_ELEMENTS: tuple[str, ...] = (
    ElementKind.TASK.value,
    ElementKind.USER_TASK.value,
    ElementKind.SERVICE_TASK.value,
    ElementKind.EXCLUSIVE_GATEWAY.value,
    ElementKind.END_EVENT.value,
)

# Elements a start event may lead to.
ENTRY_POINT_ELEMENTS: tuple[str, ...] = SUPPORTED_ELEMENTS[:4]

START_EVENT_FALLBACK_ID = "start"
DEFAULT_BUTTON_TEXT = "Continue"
END_BUTTON_TEXT = "End the workflow"
SYNTHETIC_END_TITLE = "End of workflow"
SYNTHETIC_END_PREFIX = "endEvent-"


def _log_warning(message: str) -> None:
    logger.warning("%s", message)


@dataclass(frozen=True)
class _Link:
    """A live sequence flow together with its resolved target."""

    flow: SequenceFlow
    target: SourceElement


@dataclass
class _Compilation:
    """State owned by a single ``compile`` call."""

    document: BpmnDocument
    workflow: Workflow
    warn: WarningHandler
    # Elided single-output gateways: gateway id -> successor id.
    elided: dict[str, str] = field(default_factory=dict)


class BpmnCompiler:
    """Compiles BPMN XML into a :class:`Workflow`.

    Only start events, tasks (plain, user and service), exclusive gateways,
    end events and sequence flows are understood. Anomalies that can be
    worked around are reported through the warning handler and compilation
    carries on; a diagram without a usable start event raises
    :class:`NoEntryPointError`.

    Usage::

        compiler = BpmnCompiler(warning_handler=warnings.append)
        workflow = compiler.compile(xml, "onboarding")
        json.dumps(workflow.to_dict())
    """

    def __init__(self, warning_handler: WarningHandler | None = None) -> None:
        self.warning_handler: WarningHandler = warning_handler or _log_warning

    def compile(
        self,
        xml: str | bytes,
        workflow_name: str,
        warning_handler: WarningHandler | None = None,
    ) -> Workflow:
        """Compile a BPMN document.

        Args:
            xml: The BPMN 2.0 XML text.
            workflow_name: Name given to the resulting workflow.
            warning_handler: Overrides the compiler's handler for this call.

        Returns:
            The compiled workflow. Its entry point and every transition
            target are keys of ``steps``, except when gateways loop onto
            each other, which is reported as a warning.

        Raises:
            InvalidDocumentError: If the XML cannot be read.
            NoEntryPointError: If no start event leads to a supported element.
        """
        compilation = _Compilation(
            document=BpmnDocument.from_string(xml),
            workflow=Workflow(name=workflow_name),
            warn=warning_handler or self.warning_handler,
        )

        entry = self._resolve_entry_point(compilation)
        self._walk(compilation, entry)
        self._finish(compilation)
        return compilation.workflow

    def _resolve_entry_point(self, compilation: _Compilation) -> SourceElement:
        """Pick the first start event leading to a task-like element."""
        warn = compilation.warn
        entry: SourceElement | None = None

        for event in compilation.document.elements(ElementKind.START_EVENT.value):
            if entry is not None:
                warn("multiple start events detected. Keeping only the first one")
                continue

            event_id = event.id or START_EVENT_FALLBACK_ID
            links = self._live_links(compilation, event_id, ENTRY_POINT_ELEMENTS)
            if not links:
                warn(f'start event "{event_id}" without outgoing flow. Ignoring it')
                continue
            if len(links) > 1:
                warn(
                    f'multiple outgoing flows from the start event: "{event.name}". '
                    "Keeping only the first one"
                )

            entry = links[0].target
            compilation.workflow.entry_point = entry.id

        if entry is None:
            raise NoEntryPointError(
                "No StartEvent found with a linked supported element. "
                f"Supported elements are {', '.join(ENTRY_POINT_ELEMENTS)}"
            )
        logger.debug("Entry point of %r is %r", compilation.workflow.name, entry.id)
        return entry

    def _live_links(
        self,
        compilation: _Compilation,
        source_id: str,
        tags: tuple[str, ...] = SUPPORTED_ELEMENTS,
    ) -> list[_Link]:
        """Return the flows leaving ``source_id`` whose target resolves among ``tags``."""
        links: list[_Link] = []
        for flow in compilation.document.outgoing_flows(source_id):
            try:
                target = compilation.document.find_linkable(flow.target, tags)
            except BpmnParserError as exc:
                compilation.warn(f"error while searching task: {exc}")
                continue
            links.append(_Link(flow=flow, target=target))
        return links

    def _walk(self, compilation: _Compilation, entry: SourceElement) -> None:
        """Visit every element reachable from ``entry``, depth first, pre-order."""
        pending = [entry]
        while pending:
            element = pending.pop()
            successors = self._visit(compilation, element)
            pending.extend(reversed(successors))

    def _visit(self, compilation: _Compilation, element: SourceElement) -> list[SourceElement]:
        """Add ``element`` to the workflow and return the elements to visit next."""
        steps = compilation.workflow.steps
        if element.id in steps:
            return []
        if element.id in compilation.elided:
            # Reached again through another predecessor.
            self._redirect(
                compilation.workflow, element.id, self._bypass_target(compilation, element.id)
            )
            return []

        logger.debug("Visiting %s %r", element.tag, element.id)
        links = self._live_links(compilation, element.id)
        kind = element.kind

        if kind is ElementKind.EXCLUSIVE_GATEWAY:
            return self._build_condition(compilation, element, links)
        if kind is ElementKind.END_EVENT:
            steps[element.id] = EndStep(title=element.name)
            return [link.target for link in links]
        return self._build_task(compilation, element, links)

    def _build_task(
        self, compilation: _Compilation, element: SourceElement, links: list[_Link]
    ) -> list[SourceElement]:
        steps = compilation.workflow.steps
        title = element.name
        task_type = (
            TaskType.AI_EXECUTED if element.kind is ElementKind.SERVICE_TASK else TaskType.GUIDELINE
        )

        successors: list[SourceElement] = []
        if not links:
            compilation.warn(
                f'no flow going out of task: "{title}" ({element.id}). Adding EndEvent after it'
            )
            end_id = f"{SYNTHETIC_END_PREFIX}{element.id}"
            if end_id not in steps:
                steps[end_id] = EndStep(title=SYNTHETIC_END_TITLE)
            outgoing = Transition(step_name=end_id, button_text=END_BUTTON_TEXT)
        else:
            if len(links) > 1:
                compilation.warn(
                    f'multiple outgoing flows from the task: "{title}" ({element.id}). '
                    "Keeping only the first one"
                )
            first = links[0]
            outgoing = Transition(
                step_name=first.target.id,
                button_text=first.flow.name or DEFAULT_BUTTON_TEXT,
            )
            successors.append(first.target)

        steps[element.id] = TaskStep(
            title=title, prompt=title, task_type=task_type, outgoing=outgoing
        )
        return successors

    def _build_condition(
        self, compilation: _Compilation, element: SourceElement, links: list[_Link]
    ) -> list[SourceElement]:
        steps = compilation.workflow.steps
        title = element.name

        if not links:
            compilation.warn(
                f'no flow going out of gateway: "{title}" ({element.id}). '
                "Transform it into endEvent"
            )
            steps[element.id] = EndStep(title=title)
            return []

        if len(links) == 1:
            compilation.warn(
                f'single outgoing flow from the gateway: "{title}" ({element.id}). '
                "Skipping the gateway"
            )
            compilation.elided[element.id] = links[0].target.id
            self._redirect(
                compilation.workflow, element.id, self._bypass_target(compilation, element.id)
            )
            return [links[0].target]

        steps[element.id] = ConditionStep(
            title=title,
            prompt=title,
            outgoing=[
                Transition(
                    step_name=link.target.id,
                    button_text=link.flow.name,
                    answer=link.flow.name,
                )
                for link in links
            ],
        )
        return [link.target for link in links]

    def _bypass_target(self, compilation: _Compilation, step_id: str) -> str:
        """Follow elided gateways from ``step_id`` until a kept element is reached."""
        seen: set[str] = set()
        while step_id in compilation.elided and step_id not in seen:
            seen.add(step_id)
            step_id = compilation.elided[step_id]
        return step_id

    def _redirect(self, workflow: Workflow, old_target: str, new_target: str) -> int:
        """Point every transition targeting ``old_target`` at ``new_target``.

        Returns the number of transitions rewritten.
        """
        count = 0
        for transition in workflow.transitions():
            if transition.step_name == old_target:
                transition.step_name = new_target
                count += 1
        if count:
            logger.debug("Redirected %d transition(s) from %r to %r", count, old_target, new_target)
        return count

    def _finish(self, compilation: _Compilation) -> None:
        """Resolve an elided entry point and report transitions left dangling."""
        workflow = compilation.workflow
        if workflow.entry_point is not None:
            workflow.entry_point = self._bypass_target(compilation, workflow.entry_point)
            if workflow.entry_point not in workflow.steps:
                compilation.warn(f'entry point "{workflow.entry_point}" has no matching step')

        for step_id, step in workflow.steps.items():
            for transition in step.transitions():
                if transition.step_name not in workflow.steps:
                    compilation.warn(
                        f'step "{step_id}" leads to unknown step "{transition.step_name}"'
                    )


def parse_bpmn(
    xml: str | bytes,
    workflow_name: str,
    warning_handler: WarningHandler | None = None,
) -> Workflow:
    """Compile a BPMN document with a default :class:`BpmnCompiler`.

    This is the primary entry point for loading diagrams.
    """
    return BpmnCompiler(warning_handler).compile(xml, workflow_name)
