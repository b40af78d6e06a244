"""
Serve the rxcheck API.

    python -m rxcheck [--host 0.0.0.0] [--port 8000] [--backend gemini|rxnav]
"""

import argparse
import os

import uvicorn

from rxcheck.core.config import load_settings
from rxcheck.main import create_app


def main() -> None:
    ap = argparse.ArgumentParser(prog="rxcheck", description="Serve the rxcheck API")
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=int(os.getenv("PORT", "8000")))
    ap.add_argument("--backend", choices=["gemini", "rxnav"], default=None,
                    help="Override RXCHECK_BACKEND")
    args = ap.parse_args()

    overrides = {"analysis_backend": args.backend} if args.backend else {}
    app = create_app(load_settings(**overrides))
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
