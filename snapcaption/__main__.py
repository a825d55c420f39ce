"""Run the API with uvicorn: python -m snapcaption"""

import uvicorn

from .core.settings import settings

def main() -> None:
    uvicorn.run("snapcaption.main:app", host=settings.host, port=settings.port)

if __name__ == "__main__":
    main()
