"""Run the storage API under uvicorn."""

import os

import uvicorn
from dotenv import load_dotenv

load_dotenv()


def main() -> None:
    uvicorn.run(
        "backend.src.api.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "false").lower() == "true",
    )


if __name__ == "__main__":
    main()
