"""
Standardized result types for site plan operations
Ensures consistent return patterns for actions that can be rolled back
"""

from typing import Optional
from dataclasses import dataclass


@dataclass
class OperationResult:
    """Simple success/failure result for basic operations"""
    success: bool
    message: Optional[str] = None
    data: Optional[dict] = None

    @classmethod
    def success_result(cls, message: str = None, data: dict = None) -> 'OperationResult':
        """Create a successful operation result"""
        return cls(success=True, message=message, data=data)

    @classmethod
    def error_result(cls, message: str, data: dict = None) -> 'OperationResult':
        """Create an error operation result"""
        return cls(success=False, message=message, data=data)

    @classmethod
    def pending(cls, message: str = None, data: dict = None) -> 'OperationResult':
        """Operation accepted, waiting for more input (e.g. a second click)"""
        return cls(success=True, message=message, data=dict(data or {}, pending=True))

    @property
    def is_pending(self) -> bool:
        return bool(self.data and self.data.get('pending'))
