"""Request models for the Recipe Extractor Service."""
from typing import Optional
from pydantic import BaseModel

class ExtractRequest(BaseModel):
    """Request model for single video extraction."""
    # Kept as a plain string: platform validation happens in the service
    url: Optional[str] = None
