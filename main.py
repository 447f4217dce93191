"""
Sales Intelligence Engine - Server Launcher
===========================================
Starts the FastAPI app with uvicorn.

    python main.py
    python main.py --port 8080 --log-level debug
    python main.py --reload

Interactive docs are served at /docs (Swagger) and /redoc.
"""

import argparse
import logging
import os

import uvicorn
from dotenv import load_dotenv

load_dotenv()

APP_PATH = "sales_intel.api.endpoints:app"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the Sales Intelligence Engine API")
    parser.add_argument("--host", default=os.getenv("HOST", "0.0.0.0"),
                        help="Interface to bind (env HOST, default 0.0.0.0)")
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "8000")),
                        help="Port to listen on (env PORT, default 8000)")
    parser.add_argument("--log-level", default=os.getenv("LOG_LEVEL", "info"),
                        choices=["debug", "info", "warning", "error"],
                        help="Log level for the app and uvicorn (env LOG_LEVEL)")
    parser.add_argument("--reload", action="store_true",
                        help="Restart on code changes (development only)")
    return parser


def main():
    args = build_parser().parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    log = logging.getLogger("sales_intel")

    assistant_mode = "LLM" if os.getenv("OPENROUTER_API_KEY") else "rule-based"
    log.info("Sales Intelligence Engine listening on http://%s:%d", args.host, args.port)
    log.info("Docs at http://localhost:%d/docs, assistant mode: %s", args.port, assistant_mode)

    # Datasets live in process memory, so only one worker may serve them
    uvicorn.run(
        APP_PATH,
        host=args.host,
        port=args.port,
        log_level=args.log_level,
        reload=args.reload,
        workers=1,
    )


if __name__ == "__main__":
    main()
