# quiz_editor/main.py

import logging
import os

import uvicorn
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from quiz_editor.api.quiz_routes import router as editor_router

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=LOG_LEVEL)

# APP Initialization
app = FastAPI(title="Quiz Editor")
app.include_router(editor_router)


@app.get("/")
async def home():
    return RedirectResponse(url="/docs")


if __name__ == "__main__":
    uvicorn.run("quiz_editor.main:app", host="0.0.0.0", port=int(os.getenv("PORT", 8080)))
