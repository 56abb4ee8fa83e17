"""BPMN workflow compiler exceptions."""


class WorkflowError(Exception):
    """Base exception for all bpmn_workflow errors."""


class WorkflowDefinitionError(WorkflowError):
    """Raised when a compiled workflow is structurally invalid."""


class WorkflowValidationError(WorkflowDefinitionError):
    """Raised when a serialized workflow fails JSON schema validation."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)


class BpmnParserError(WorkflowDefinitionError):
    """Raised when a BPMN document cannot be compiled."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Error parsing BPMN: {message}")


class InvalidDocumentError(BpmnParserError):
    """Raised when the XML text is not a readable document."""


class TaskNotFoundError(BpmnParserError):
    """Raised when no supported element carries the requested id."""

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f'No task found for id "{task_id}"')


class DuplicateTaskError(BpmnParserError):
    """Raised when several supported elements share the requested id."""

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f'Multiple tasks found for id "{task_id}"')


class NoEntryPointError(BpmnParserError):
    """Raised when no start event leads to a supported element."""
