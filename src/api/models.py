"""
API Models — Request and Response schemas
Using Pydantic for automatic validation and documentation
"""

from pydantic import BaseModel, Field
from typing import List, Optional


# ─── Parse Models ─────────────────────────────────────────────────────────────

class LineItemModel(BaseModel):
    """One parsed receipt row."""
    name: str          = Field(..., description="Product name as printed")
    unit_price: float  = Field(..., description="Price per unit", gt=0)
    quantity: int      = Field(..., description="Units purchased", ge=1)
    total_price: float = Field(..., description="Line total", gt=0)


class ParseTextRequest(BaseModel):
    """Already recognized transcript to parse."""
    text: str         = Field(...,   description="Raw OCR transcript")
    confidence: float = Field(100.0, description="OCR confidence (0-100)", ge=0, le=100)


class ParseResponse(BaseModel):
    """Parsed receipt, for human review before it is committed."""
    status: str              = Field("success", description="Response status")
    filename: Optional[str]  = Field(None,      description="Processed filename")
    raw_text: str            = Field(...,       description="Transcript the items were parsed from")
    items: List[LineItemModel] = Field(...,     description="Items in receipt print order")
    item_count: int          = Field(...,       description="Number of parsed items")
    total_amount: float      = Field(...,       description="Declared total, or the sum of items")
    confidence: float        = Field(...,       description="OCR confidence (0-100)", ge=0, le=100)

    class Config:
        json_schema_extra = {
            "example": {
                "status": "success",
                "filename": "supermarket_receipt.jpg",
                "raw_text": "超市购物小票\n苹果 5.00 2 10.00\n合计: ¥10.00",
                "items": [
                    {"name": "苹果", "unit_price": 5.0, "quantity": 2, "total_price": 10.0}
                ],
                "item_count": 1,
                "total_amount": 10.0,
                "confidence": 85.0,
            }
        }


# ─── Health & Error Models ────────────────────────────────────────────────────

class HealthResponse(BaseModel):
    """Health check response."""
    status: str  = Field("healthy",             description="Health status")
    service: str = Field("receipt-line-parser", description="Service name")
    version: str = Field("1.0.0",               description="API version")


class ErrorResponse(BaseModel):
    """Error response."""
    status: str           = Field("error", description="Response status")
    error: str            = Field(...,     description="Error type")
    message: str          = Field(...,     description="Error message")
    detail: Optional[str] = Field(None,    description="Additional details")
