from fastapi import FastAPI, Body
import os
import sys
import logging
import argparse
from datetime import datetime
from typing import Optional
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

import config
from commute_summary import SummaryGenerator, SummaryRequest, SummaryResponse
from utils.result import Result


# Create logs directory if it doesn't exist
os.makedirs(config.LOG_DIR, exist_ok=True)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Add file handler to write logs to file
log_file_path = os.path.join(config.LOG_DIR, f"app_{datetime.now().strftime('%Y%m%d')}.log")
file_handler = logging.FileHandler(log_file_path, encoding="utf-8")
file_handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
logging.getLogger().addHandler(file_handler)


def resolve_file_path(file_path: Optional[str]) -> Optional[str]:
    """
    Convert static_path references to actual file paths

    Args:
        file_path: The file path which may contain 'static_path/' prefix

    Returns:
        Resolved absolute file path
    """
    if file_path and file_path.startswith("static_path/"):
        relative_path = file_path.replace("static_path/", "", 1)
        return os.path.join(config.STATIC_DIR, relative_path)
    return file_path


def to_response(result: Result[SummaryResponse]):
    """
    Turn a summary Result into the API response.

    Successful results are returned as the SummaryResponse itself; failures
    become a JSONResponse carrying the Result's status code.
    """
    if result.is_success():
        return result.data
    return JSONResponse(status_code=result.status_code.value, content=result.to_dict())


# Initialize FastAPI app with metadata
app = FastAPI(
    title="Commute Expense Summary API",
    description="API for building commute reimbursement summaries from monthly work tables",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# API Endpoints
@app.get(
    "/summary/",
    response_model=SummaryResponse,
    tags=["Commute Summary"]
)
async def get_default_summary():
    """
    Summarise the commute days of the default work table workbook.

    Returns:
        SummaryResponse with the reimbursement text, or an error response
        (404 when the workbook or work table sheet is missing, 422 when no
        commute day is recorded, 500 on read errors)
    """
    logger.info(f"Serving commute summary for default workbook {config.DEFAULT_WORKBOOK}")
    result = SummaryGenerator.generate_summary(SummaryRequest())
    return to_response(result)


@app.post(
    "/summary/",
    response_model=SummaryResponse,
    tags=["Commute Summary"]
)
async def create_summary(request: SummaryRequest = Body(...)):
    """
    Summarise the commute days of the workbook given in the request.

    ``file_path`` may start with ``static_path/`` to point inside the
    static folder; ``round_trip_fare`` overrides the configured fare.
    """
    request = SummaryRequest(
        file_path=resolve_file_path(request.file_path),
        round_trip_fare=request.round_trip_fare,
    )
    logger.info(f"Serving commute summary for {request.file_path or config.DEFAULT_WORKBOOK}")
    result = SummaryGenerator.generate_summary(request)
    return to_response(result)


def run_cli(argv=None) -> int:
    """
    Print the commute summary for a workbook, or start the API server.

    Returns:
        Process exit status: 0 when the summary was printed, 1 otherwise
    """
    parser = argparse.ArgumentParser(
        description="Commute Expense Summary - build the commute reimbursement text from a monthly work table"
    )
    parser.add_argument(
        "workbook",
        nargs="?",
        default=None,
        help=f"Path to the attendance workbook (default: {config.DEFAULT_WORKBOOK})"
    )
    parser.add_argument(
        "--fare",
        type=int,
        default=None,
        help=f"Round-trip fare per commute day (default: {config.ROUND_TRIP_FARE})"
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Run the API server instead of printing a summary"
    )
    args = parser.parse_args(argv)

    if args.serve:
        import uvicorn
        logger.info("Starting Commute Expense Summary API in development mode.")
        uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
        return 0

    result = SummaryGenerator.generate_summary(
        SummaryRequest(file_path=resolve_file_path(args.workbook), round_trip_fare=args.fare)
    )
    if result.is_failure():
        logger.error(str(result))
        return 1

    print(result.data.summary)
    return 0


if __name__ == "__main__":
    sys.exit(run_cli())
