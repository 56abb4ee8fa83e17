"""Read-only view over a BPMN 2.0 XML document."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Iterable
from xml.etree.ElementTree import ParseError

import defusedxml.ElementTree as ET  # noqa: N817
from defusedxml import DefusedXmlException

from bpmn_workflow.exceptions import (
    DuplicateTaskError,
    InvalidDocumentError,
    TaskNotFoundError,
)


class ElementKind(str, Enum):
    """BPMN element kinds understood by the compiler, valued by their tag."""

    START_EVENT = "startEvent"
    TASK = "task"
    USER_TASK = "userTask"
    SERVICE_TASK = "serviceTask"
    EXCLUSIVE_GATEWAY = "exclusiveGateway"
    END_EVENT = "endEvent"
    SEQUENCE_FLOW = "sequenceFlow"
    OTHER = "other"

    @classmethod
    def from_tag(cls, tag: str) -> ElementKind:
        """Classify a local tag name, ignoring case."""
        return _KINDS_BY_LOWER_TAG.get(tag.lower(), cls.OTHER)


_KINDS_BY_LOWER_TAG: dict[str, ElementKind] = {
    kind.value.lower(): kind for kind in ElementKind if kind is not ElementKind.OTHER
}


def local_name(tag: str) -> str:
    """Strip the ``{namespace}`` part of an ElementTree tag."""
    return tag.rsplit("}", 1)[-1]


@dataclass(frozen=True)
class SourceElement:
    """A flow node of the source diagram."""

    tag: str
    id: str
    name: str = ""

    @property
    def kind(self) -> ElementKind:
        return ElementKind.from_tag(self.tag)


@dataclass(frozen=True)
class SequenceFlow:
    """A directed, optionally labelled edge between two flow nodes."""

    id: str
    source: str
    target: str
    name: str = ""


class BpmnDocument:
    """Parsed BPMN document with tag, id and outgoing-flow indexes.

    All indexes are built once when the document is loaded and preserve
    document order.

    Usage::

        doc = BpmnDocument.from_string(xml)
        for start in doc.elements("startEvent"):
            flows = doc.outgoing_flows(start.id)
    """

    def __init__(self, elements: Iterable[SourceElement], flows: Iterable[SequenceFlow]) -> None:
        self._by_tag: dict[str, list[SourceElement]] = defaultdict(list)
        self._by_id: dict[str, list[SourceElement]] = defaultdict(list)
        self._outgoing: dict[str, list[SequenceFlow]] = defaultdict(list)
        self._flows: list[SequenceFlow] = []

        for element in elements:
            self._by_tag[element.tag].append(element)
            self._by_id[element.id].append(element)
        for flow in flows:
            self._flows.append(flow)
            self._outgoing[flow.source].append(flow)

    @classmethod
    def from_string(cls, xml: str | bytes) -> BpmnDocument:
        """Parse XML text into a document.

        Raises:
            InvalidDocumentError: If the text is not well-formed XML or uses
                constructs rejected by defusedxml (entity declarations, ...).
        """
        try:
            root = ET.fromstring(xml)
        except (ParseError, DefusedXmlException) as exc:
            raise InvalidDocumentError(f"invalid XML document: {exc}") from exc

        elements: list[SourceElement] = []
        flows: list[SequenceFlow] = []
        for node in root.iter():
            if not isinstance(node.tag, str):
                continue
            tag = local_name(node.tag)
            if tag == ElementKind.SEQUENCE_FLOW.value:
                flows.append(
                    SequenceFlow(
                        id=node.get("id", ""),
                        source=node.get("sourceRef", ""),
                        target=node.get("targetRef", ""),
                        name=node.get("name", ""),
                    )
                )
            else:
                elements.append(
                    SourceElement(tag=tag, id=node.get("id", ""), name=node.get("name", ""))
                )
        return cls(elements, flows)

    @property
    def flows(self) -> list[SequenceFlow]:
        """Return all sequence flows in document order."""
        return list(self._flows)

    def elements(self, tag: str) -> list[SourceElement]:
        """Return the elements with exactly this local tag, in document order."""
        return list(self._by_tag.get(tag, ()))

    def outgoing_flows(self, source_id: str) -> list[SequenceFlow]:
        """Return the flows whose ``sourceRef`` is ``source_id``, in document order."""
        return list(self._outgoing.get(source_id, ()))

    def find_linkable(self, element_id: str, tags: Iterable[str]) -> SourceElement:
        """Resolve ``element_id`` among elements with one of ``tags``.

        Raises:
            TaskNotFoundError: If no such element exists.
            DuplicateTaskError: If more than one element matches.
        """
        allowed = set(tags)
        matches = [e for e in self._by_id.get(element_id, ()) if e.tag in allowed]
        if not matches:
            raise TaskNotFoundError(element_id)
        if len(matches) > 1:
            raise DuplicateTaskError(element_id)
        return matches[0]
