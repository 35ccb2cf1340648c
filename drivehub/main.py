import uvicorn

from drivehub.configs.settings import settings
from drivehub.configs.setup import create_app

app = create_app()


if __name__ == "__main__":
    uvicorn.run("drivehub.main:app", host=settings.app_host, port=settings.app_port, reload=settings.APP_DEBUG)
