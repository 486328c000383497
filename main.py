"""
MatrixTutor — Entry point.

Serve the walkthrough API for the browser front end.
"""

import logging

import uvicorn

from backend.app.main import app


def main() -> None:
    logging.basicConfig(level=logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(app, host="127.0.0.1", port=8000)


if __name__ == "__main__":
    main()
