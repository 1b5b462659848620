"""Validate Node Handler.

Validation rules are parsed and logged, but rule evaluation itself is not
implemented: every record is considered valid. Rules of an unknown type or
severity are skipped with a warning instead of failing the node.
"""

from dataclasses import dataclass
from datetime import datetime

from nodeflow.core.executors.context import ExecutionContext
from nodeflow.core.executors.handlers.base import NodeHandler
from nodeflow.core.executors.results import NodeOutcome
from nodeflow.core.models import Node, NodeType, RecordSet
from nodeflow.core.node_configs import ValidateNodeConfig
from nodeflow.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ValidationOutcome:
    errors_count: int
    valid_records: int
    rules_evaluated: int = 0


def validate_records(
    records: RecordSet, validate_config: ValidateNodeConfig
) -> ValidationOutcome:
    for rule in validate_config.unsupported_rules:
        logger.warning(
            f"Skipping validation rule {rule.name or rule.type_name!r}: "
            f"type {rule.type_name!r} with severity {rule.severity_name!r} "
            f"is not supported yet"
        )
    active_rules = validate_config.active_rules
    if active_rules:
        logger.info(
            f"Rule evaluation is not supported yet; "
            f"{len(active_rules)} active rules not evaluated"
        )
    return ValidationOutcome(errors_count=0, valid_records=len(records))


class ValidateNodeHandler(NodeHandler):
    NODE_TYPE = NodeType.VALIDATE.value

    def process(
        self,
        node: Node,
        records: RecordSet,
        context: ExecutionContext,
        start_time: datetime,
    ) -> NodeOutcome:
        validation = validate_records(records, ValidateNodeConfig.from_dict(node.config))

        return NodeOutcome.success(
            node,
            start_time,
            message=f"Validation complete: {validation.errors_count} errors",
            errors_count=validation.errors_count,
        )
