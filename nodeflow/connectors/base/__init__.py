from .connection_test_result import ConnectionTestResult
from .destination_connector import DestinationConnector
from .preview_result import PreviewResult
from .source_connector import SourceConnector

__all__ = [
    "SourceConnector",
    "DestinationConnector",
    "ConnectionTestResult",
    "PreviewResult",
]
