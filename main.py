from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
import logging
import traceback
import uvicorn

import config
from auth import router as auth_router
from dashboard import router as dashboard_router
from pages import HOME_PAGE

app = FastAPI(title="WHOOP OAuth relay")


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger = logging.getLogger("uvicorn.error")
    logger.error("Unhandled exception occurred: %s", exc)
    logger.error(traceback.format_exc())
    return JSONResponse({"detail": "Internal server error"}, status_code=500)


@app.get("/", response_class=HTMLResponse)
def home():
    return HOME_PAGE


@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(auth_router)
app.include_router(dashboard_router)


def run():
    print(f"Local server: http://localhost:{config.PORT}")
    print(f"Start OAuth:   http://localhost:{config.PORT}/auth/whoop")
    uvicorn.run(app, host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    run()
