"""
Main entry point for the Binance to CoinTracker converter.

``python main.py convert [INPUT] [OUTPUT]`` converts a file once;
``python main.py serve`` starts the upload API.
"""
import argparse
import sys
from pathlib import Path

# Add project root to Python path for module imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from dotenv import load_dotenv

from core.config import get_settings
from core.exceptions import ConfigurationError, ConverterException
from core.logger import setup_logger

# Load environment variables from .env file
_env_file = PROJECT_ROOT / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

logger = setup_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert Binance transaction history into CoinTracker CSV"
    )
    subparsers = parser.add_subparsers(dest="command")

    convert = subparsers.add_parser("convert", help="Convert a CSV export")
    convert.add_argument("input", nargs="?", help="Binance CSV (default: INPUT_PATH)")
    convert.add_argument("output", nargs="?", help="CoinTracker CSV (default: OUTPUT_PATH)")

    subparsers.add_parser("serve", help="Start the upload API")
    return parser


def run_conversion(input_path=None, output_path=None) -> int:
    """Convert one file and return the process exit code."""
    from services.conversion_service import ConversionService

    try:
        result = ConversionService().convert_file(input_path, output_path)
    except ConverterException as e:
        logger.error(e.message)
        if e.details:
            logger.error(f"Details: {e.details}")
        return 1

    logger.info(f"Wrote {result['stats']['output_records']} records to {result['output_path']}")
    return 0


def run_server() -> int:
    import uvicorn
    from app.api import app

    settings = get_settings()
    logger.info(f"Starting {settings.app_name}")
    logger.info(f"Storage: {settings.temp_storage_path}")
    logger.info(f"Starting server on {settings.host}:{settings.port}")

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower()
    )
    return 0


def main(argv=None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)

    try:
        # Load and validate configuration
        get_settings()
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e.message}")
        if e.details:
            logger.error(f"Details: {e.details}")
        return 1

    if args.command == "serve":
        return run_server()
    return run_conversion(getattr(args, "input", None), getattr(args, "output", None))


if __name__ == "__main__":
    sys.exit(main())
