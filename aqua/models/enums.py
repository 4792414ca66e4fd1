from enum import Enum


class ComplaintStatus(str, Enum):
    Open = "open"
    Assigned = "assigned"
    InProgress = "in_progress"
    Resolved = "resolved"
    Closed = "closed"
    Cancelled = "cancelled"


class ComplaintPriority(str, Enum):
    Low = "low"
    Medium = "medium"
    High = "high"
    Critical = "critical"


class ServiceStatus(str, Enum):
    Pending = "pending"
    Assigned = "assigned"
    InProgress = "in_progress"
    Completed = "completed"
    Cancelled = "cancelled"


class CustomerStatus(str, Enum):
    Active = "active"
    Inactive = "inactive"
    Suspended = "suspended"


class NotificationType(str, Enum):
    Info = "info"
    Success = "success"
    Warning = "warning"
    Error = "error"
    Assignment = "assignment"
