from pydantic import BaseModel
from typing import Optional, Any

class ErrorResponse(BaseModel):
    """
    Standard error response structure. The dashboard reads `error`.
    """
    error: str
    code: str
    details: Optional[Any] = None