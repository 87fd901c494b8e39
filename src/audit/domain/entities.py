# audit/domain/entities.py

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass
class AuditEntry:
    user_id: str
    action: str
    resource: str
    company_id: Optional[str] = None
    resource_id: Optional[str] = None
    old_data: Optional[dict] = None
    new_data: Optional[dict] = None
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class IntegrationLog:
    provider: str
    operation: str
    company_id: Optional[str] = None
    status_code: Optional[int] = None
    request_data: Any = None
    response_data: Any = None
    error_message: Optional[str] = None
    duration_ms: Optional[int] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
