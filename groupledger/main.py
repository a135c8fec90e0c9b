import logging
import os
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from .database import init_db
from .errors import InvalidInputError
from .routers import users, groups, expenses, balances, dashboard, bills

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper(),
                    format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = FastAPI(title="Group Ledger API", version="1.0.0")

init_db()

@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    return JSONResponse(status_code=400, content={"detail": exc.message})

app.include_router(users.router, prefix="/users", tags=["users"])
app.include_router(groups.router, prefix="/groups", tags=["groups"])
app.include_router(expenses.router, prefix="/groups/{group_id}/expenses", tags=["expenses"])
app.include_router(balances.router, prefix="/groups/{group_id}/balances", tags=["balances"])
app.include_router(dashboard.router, prefix="/groups/{group_id}/dashboard", tags=["dashboard"])
app.include_router(bills.router, prefix="/groups/{group_id}/bills", tags=["bills"])

@app.get("/")
def health():
    return {"status": "ok"}
