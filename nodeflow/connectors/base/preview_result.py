from dataclasses import dataclass, field
from typing import Any, Dict, List

from nodeflow.core.models import RecordSet


@dataclass(frozen=True)
class PreviewResult:
    """A sample of rows read from a connection, with column metadata.

    Attributes:
        data: Sampled records
        columns: One ``{"name": ..., "type": ...}`` entry per column, where the
            type is whatever the underlying engine reports
        connection_type: Type of the previewed connection
    """

    data: RecordSet
    connection_type: str
    columns: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data": self.data,
            "columns": self.columns,
            "count": self.count,
            "dataSourceType": self.connection_type,
        }
