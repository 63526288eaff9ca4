"""Run the aggregation API with uvicorn."""

from __future__ import annotations

import argparse
import logging
from typing import List, Optional

import uvicorn

from common.config import get_settings


def main(argv: Optional[List[str]] = None) -> None:
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )

    p = argparse.ArgumentParser(description="Energy aggregation API")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=8001)
    args = p.parse_args(argv)

    uvicorn.run("aggregation_api.main:app", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
