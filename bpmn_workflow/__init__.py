"""bpmn_workflow — Compile BPMN 2.0 diagrams into executable workflows."""

from bpmn_workflow.compiler import (
    ENTRY_POINT_ELEMENTS,
    SUPPORTED_ELEMENTS,
    BpmnCompiler,
    WarningHandler,
    parse_bpmn,
)
from bpmn_workflow.document import BpmnDocument, ElementKind, SequenceFlow, SourceElement
from bpmn_workflow.exceptions import (
    BpmnParserError,
    DuplicateTaskError,
    InvalidDocumentError,
    NoEntryPointError,
    TaskNotFoundError,
    WorkflowDefinitionError,
    WorkflowError,
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
from bpmn_workflow.schema import parse_workflow, validate_schema, validate_structure

__version__ = "0.1.0"

__all__ = [
    # Compiler
    "BpmnCompiler",
    "ENTRY_POINT_ELEMENTS",
    "SUPPORTED_ELEMENTS",
    "WarningHandler",
    "parse_bpmn",
    # Document
    "BpmnDocument",
    "ElementKind",
    "SequenceFlow",
    "SourceElement",
    # Models
    "ConditionStep",
    "EndStep",
    "Step",
    "StepType",
    "TaskStep",
    "TaskType",
    "Transition",
    "Workflow",
    # Schema
    "parse_workflow",
    "validate_schema",
    "validate_structure",
    # Exceptions
    "BpmnParserError",
    "DuplicateTaskError",
    "InvalidDocumentError",
    "NoEntryPointError",
    "TaskNotFoundError",
    "WorkflowDefinitionError",
    "WorkflowError",
    "WorkflowValidationError",
    # Version
    "__version__",
]
