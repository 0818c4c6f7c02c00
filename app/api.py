"""
FastAPI routes for uploading a Binance export and downloading the
converted CoinTracker file.
"""
import asyncio
import uuid
from pathlib import Path

from fastapi import BackgroundTasks, FastAPI, File, HTTPException, UploadFile
from fastapi.responses import FileResponse

from core.config import get_settings
from core.exceptions import (
    ConverterException,
    DataNotFoundError,
    ParsingError,
    SignValidationError,
)
from core.exporters import create_output_filename
from core.logger import setup_logger
from services.conversion_service import ConversionService

logger = setup_logger(__name__)
settings = get_settings()

# Initialize FastAPI app
app = FastAPI(
    title="Binance to CoinTracker Converter",
    description="Merge Binance transaction history rows into CoinTracker import records",
    version="1.0.0"
)

# Service instance
conversion_service = ConversionService()


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "cointracker_converter",
        "version": "1.0.0"
    }


def validate_file_extension(filename: str) -> None:
    """
    Validate file has correct extension.

    Args:
        filename: Name of file to validate

    Raises:
        HTTPException: If file extension is invalid
    """
    if not filename or not filename.lower().endswith(".csv"):
        raise HTTPException(
            status_code=400,
            detail=f"Invalid file type: {filename}. Only .csv is supported."
        )


@app.post("/convert")
async def convert_file(file: UploadFile = File(...)):
    """
    Convert an uploaded Binance transaction history CSV.

    Args:
        file: Binance export

    Returns:
        Result filename (for /download) and conversion statistics
    """
    logger.info(f"Received file: {file.filename}")
    validate_file_extension(file.filename)

    job_id = str(uuid.uuid4())
    storage = Path(settings.temp_storage_path)
    storage.mkdir(parents=True, exist_ok=True)
    upload_path = storage / f"{job_id}_upload.csv"
    output_path = create_output_filename(settings.temp_storage_path, file.filename, job_id[:8])

    try:
        with open(upload_path, "wb") as f:
            f.write(await file.read())

        # Parsing and export are synchronous, keep them off the event loop
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(
            None, conversion_service.convert_file, str(upload_path), output_path
        )

    except SignValidationError as e:
        raise HTTPException(
            status_code=422,
            detail={"error": e.message, "details": e.details}
        )

    except (ParsingError, DataNotFoundError) as e:
        raise HTTPException(
            status_code=400,
            detail={"error": e.message, "details": e.details}
        )

    except ConverterException as e:
        logger.error(f"Job {job_id} failed: {e.message}")
        raise HTTPException(status_code=500, detail={"error": e.message})

    finally:
        try:
            if upload_path.exists():
                upload_path.unlink()
                logger.debug(f"Cleaned up: {upload_path}")
        except OSError as cleanup_error:
            logger.warning(f"Failed to cleanup {upload_path}: {cleanup_error}")

    logger.info(f"Job {job_id} completed successfully")

    return {
        "job_id": job_id,
        "filename": Path(result["output_path"]).name,
        "stats": result["stats"]
    }


def remove_result_file(path: Path) -> None:
    """Delete a downloaded result file."""
    try:
        path.unlink()
        logger.debug(f"Cleaned up: {path}")
    except OSError as e:
        logger.warning(f"Failed to cleanup {path}: {e}")


@app.get("/download/{filename}")
async def download_file(filename: str, background_tasks: BackgroundTasks):
    """
    Download a converted file. The file is removed once it has been sent.

    Args:
        filename: Name of the file to download

    Returns:
        File response
    """
    # Validate filename to prevent path traversal
    if ".." in filename or "/" in filename or "\\" in filename:
        raise HTTPException(status_code=400, detail="Invalid filename")

    if not filename.endswith(".csv"):
        raise HTTPException(status_code=400, detail="Invalid file type")

    storage = Path(settings.temp_storage_path).resolve()
    file_path = (storage / filename).resolve()

    if file_path.parent != storage:
        raise HTTPException(status_code=400, detail="Invalid file path")

    if not file_path.exists():
        raise HTTPException(status_code=404, detail="File not found")

    background_tasks.add_task(remove_result_file, file_path)

    return FileResponse(
        path=str(file_path),
        filename=filename,
        media_type="text/csv"
    )
