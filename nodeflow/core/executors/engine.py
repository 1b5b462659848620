"""Pipeline engine.

Runs the nodes of a pipeline strictly in declaration order, carrying a single
in-memory record set from node to node. A failing node is counted and logged
and the run continues with the next node; only a failure to set up the run
(e.g. the execution cannot be loaded) aborts it.

The execution record is written once, when the run ends.
"""

from typing import List, Optional, Type

from nodeflow.config import Settings
from nodeflow.connectors.registry.destination_registry import (
    DestinationConnectorRegistry,
)
from nodeflow.connectors.registry.source_registry import SourceConnectorRegistry
from nodeflow.core.evaluator import ConditionEvaluator
from nodeflow.core.executors.context import ExecutionContext
from nodeflow.core.executors.handlers import NodeHandlerFactory
from nodeflow.core.executors.results import NodeOutcome
from nodeflow.core.executors.transcript import ExecutionTranscript
from nodeflow.core.models import (
    DestinationResult,
    ExecutionOutcome,
    ExecutionState,
    ExecutionStatus,
    Node,
    PipelineDefinition,
    RecordSet,
    utc_now,
)
from nodeflow.core.stores import ConnectionRegistry, ExecutionStore, PipelineStore
from nodeflow.exceptions import FatalSetupError
from nodeflow.logging import get_logger
from nodeflow.security.credentials import ConnectionCredentialStore

logger = get_logger(__name__)


class PipelineEngine:
    """
    Executes pipelines against registered connections.

    Args:
        connection_registry: Lookup of connections by ID
        execution_store: Tracking records of executions
        pipeline_store: Receives the last-run stamp of each pipeline
        credential_store: Decrypts connection configs
        settings: Runtime settings
        evaluator: Condition evaluator for filter transforms (fail-open by default)
        handler_factory: Node type to handler lookup
        source_connectors: Source connectors by connection type (default: built-in)
        destination_connectors: Destination connectors by connection type (default: built-in)
    """

    def __init__(
        self,
        connection_registry: ConnectionRegistry,
        execution_store: ExecutionStore,
        pipeline_store: PipelineStore,
        credential_store: ConnectionCredentialStore,
        settings: Settings,
        evaluator: Optional[ConditionEvaluator] = None,
        handler_factory: Type[NodeHandlerFactory] = NodeHandlerFactory,
        source_connectors: Optional[SourceConnectorRegistry] = None,
        destination_connectors: Optional[DestinationConnectorRegistry] = None,
    ):
        self.connection_registry = connection_registry
        self.execution_store = execution_store
        self.pipeline_store = pipeline_store
        self.credential_store = credential_store
        self.settings = settings
        self.evaluator = evaluator or ConditionEvaluator()
        self.handler_factory = handler_factory
        self.source_connectors = source_connectors
        self.destination_connectors = destination_connectors

    def execute(
        self, pipeline: PipelineDefinition, execution_id: str
    ) -> ExecutionOutcome:
        """
        Run a pipeline and record the result on its execution.

        Args:
            pipeline: The pipeline to run
            execution_id: ID of an existing execution in the ``running`` state

        Returns:
            ExecutionOutcome; ``success`` is False if any node failed

        Raises:
            FatalSetupError: If the execution cannot be loaded
        """
        transcript = ExecutionTranscript()
        transcript.append("Starting pipeline execution")
        logger.info(f"Starting pipeline execution for: {pipeline.name}")

        execution_loaded = False
        try:
            self._load_execution(execution_id)
            execution_loaded = True

            context = ExecutionContext.create(
                connection_registry=self.connection_registry,
                credential_store=self.credential_store,
                settings=self.settings,
                evaluator=self.evaluator,
                sources=self.source_connectors,
                destinations=self.destination_connectors,
                run_id=execution_id,
            )
            return self._run(pipeline, execution_id, context, transcript)
        except Exception as e:
            transcript.append(f"FATAL ERROR: {e}")
            logger.error(f"Fatal pipeline error in {pipeline.name}: {e}")
            if execution_loaded:
                self._mark_failed(execution_id, transcript, e)
            raise

    def process_node(
        self, node: Node, records: RecordSet, context: ExecutionContext
    ) -> NodeOutcome:
        """Dispatch a node to the handler for its type.

        Nodes of an unknown type are skipped, not failed.
        """
        if not self.handler_factory.is_node_type_supported(node.type):
            logger.warning(f"Unknown node type: {node.type} (node {node.name})")
            return NodeOutcome.skipped(node, f"Unknown node type: {node.type}")

        handler = self.handler_factory.get_handler(node.type)
        return handler.execute(node, records, context)

    def _load_execution(self, execution_id: str) -> ExecutionState:
        try:
            return self.execution_store.get_by_id(execution_id)
        except Exception as e:
            raise FatalSetupError(
                f"Execution {execution_id} could not be loaded: {e}", original_error=e
            ) from e

    def _run(
        self,
        pipeline: PipelineDefinition,
        execution_id: str,
        context: ExecutionContext,
        transcript: ExecutionTranscript,
    ) -> ExecutionOutcome:
        nodes = pipeline.nodes
        transcript.append(f"Total nodes: {len(nodes)}")

        records: RecordSet = []
        records_processed = 0
        errors_count = 0
        destination_result: Optional[DestinationResult] = None
        outcomes: List[NodeOutcome] = []

        for index, node in enumerate(nodes, start=1):
            logger.info(f"Processing node {index}/{len(nodes)}: {node.type} {node.name}")
            transcript.append(f"Processing node: {node.name} ({node.type})")

            outcome = self.process_node(node, records, context)
            outcomes.append(outcome)
            transcript.append(outcome.message)

            if outcome.failed:
                errors_count += 1
                continue

            if outcome.records is not None:
                records = outcome.records
            errors_count += outcome.errors_count
            if outcome.destination_result is not None:
                destination_result = outcome.destination_result
                records_processed = outcome.records_processed or 0

        status = ExecutionStatus.FAILED if errors_count > 0 else ExecutionStatus.COMPLETED
        transcript.append(
            f"Pipeline execution completed: {records_processed} records, "
            f"{errors_count} errors"
        )
        logger.info(
            f"Pipeline {pipeline.name} {status.value}. "
            f"Records: {records_processed} Errors: {errors_count}"
        )

        completed_at = utc_now()
        self.execution_store.update(
            execution_id,
            status=status,
            completed_at=completed_at,
            logs=transcript.text,
            records_processed=records_processed,
            errors_count=errors_count,
        )
        self.pipeline_store.stamp_last_run(pipeline.id, completed_at, status)

        return ExecutionOutcome(
            success=errors_count == 0,
            records_processed=records_processed,
            errors_count=errors_count,
            destination_result=destination_result,
            records=records,
            node_outcomes=outcomes,
            logs=transcript.text,
        )

    def _mark_failed(
        self, execution_id: str, transcript: ExecutionTranscript, error: Exception
    ) -> None:
        try:
            self.execution_store.update(
                execution_id,
                status=ExecutionStatus.FAILED,
                completed_at=utc_now(),
                logs=transcript.text,
                error_message=str(error),
            )
        except Exception as update_error:
            # The original error is re-raised by the caller
            logger.error(
                f"Could not mark execution {execution_id} as failed: {update_error}"
            )
