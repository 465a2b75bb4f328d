"""
API Routes - receipt parsing endpoints
"""

from fastapi import APIRouter, Depends, UploadFile, File, HTTPException
from functools import lru_cache
import shutil
from pathlib import Path
import uuid

from api.models import ParseResponse, ParseTextRequest, ErrorResponse
from receipt_processor import ReceiptProcessor
from recognition import ParseResult, RecognitionError
from utils import ensure_directory
from loguru import logger

router = APIRouter()


@lru_cache(maxsize=1)
def get_processor() -> ReceiptProcessor:
    """Shared processor (loads the OCR model on first request)"""
    return ReceiptProcessor()


# ==================== UTILITY FUNCTIONS ====================

def validate_file(file: UploadFile, processor: ReceiptProcessor):
    """Validate uploaded file"""
    if not file.filename:
        raise HTTPException(400, detail="No filename provided")

    allowed = processor.config.get('upload', {}).get('allowed_extensions', [])
    ext = Path(file.filename).suffix.lower()
    if ext not in allowed:
        raise HTTPException(
            400,
            detail=f"Invalid file type: {ext}. Allowed: {', '.join(allowed)}"
        )


def save_upload(file: UploadFile, processor: ReceiptProcessor) -> Path:
    """Save uploaded file and return path"""
    upload_dir = Path(ensure_directory(processor.config.get('upload', {}).get('upload_dir', 'data/uploads')))
    ext = Path(file.filename).suffix.lower()
    file_path = upload_dir / f"{uuid.uuid4()}{ext}"

    with file_path.open("wb") as buffer:
        shutil.copyfileobj(file.file, buffer)

    return file_path


def to_response(result: ParseResult, filename: str = None) -> ParseResponse:
    return ParseResponse(filename=filename, **result.to_dict())


# ==================== API ENDPOINTS ====================

@router.post("/receipts/parse", response_model=ParseResponse, tags=["Receipts"])
async def parse_receipt(
    file: UploadFile = File(..., description="Receipt image"),
    processor: ReceiptProcessor = Depends(get_processor),
):
    """
    **Recognize and parse a receipt image**

    Runs OCR (retrying once on low confidence) and extracts line items
    and the receipt total for review.

    **Example:**
    ```bash
    curl -X POST http://localhost:8000/api/v1/receipts/parse \\
      -F "file=@receipt.jpg"
    ```
    """
    file_path = None
    try:
        validate_file(file, processor)
        file_path = save_upload(file, processor)
        logger.info(f"Processing: {file.filename}")

        result = processor.parse_receipt(str(file_path))
        return to_response(result, file.filename)

    except HTTPException:
        raise
    except RecognitionError as e:
        logger.error(f"Recognition failed for {file.filename}: {e}")
        raise HTTPException(
            422,
            detail=ErrorResponse(error="recognition_failed", message=str(e)).model_dump(),
        )
    except Exception as e:
        logger.exception(f"Error processing {file.filename}: {e}")
        raise HTTPException(500, str(e))
    finally:
        if file_path and file_path.exists():
            file_path.unlink()


@router.post("/receipts/parse-text", response_model=ParseResponse, tags=["Receipts"])
async def parse_text(
    request: ParseTextRequest,
    processor: ReceiptProcessor = Depends(get_processor),
):
    """
    **Parse an already recognized transcript**

    **Example:**
    ```bash
    curl -X POST http://localhost:8000/api/v1/receipts/parse-text \\
      -H "Content-Type: application/json" \\
      -d '{"text": "苹果 5.00 2 10.00", "confidence": 90}'
    ```
    """
    result = processor.parse_text(request.text, request.confidence)
    return to_response(result)
