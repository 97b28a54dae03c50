import uvicorn
from fastapi import FastAPI

from cardrewards.api.routes.calculator import router as calculator_router
from cardrewards.api.routes.catalog import router as catalog_router
from cardrewards.api.routes.comparison import router as comparison_router
from cardrewards.api.routes.health import router as health_router
from cardrewards.api.routes.reward_rules import router as reward_rules_router
from cardrewards.api.routes.users import router as users_router
from cardrewards.config import settings

app = FastAPI(title="Card Rewards API", version="0.1.0")
app.include_router(health_router)
app.include_router(catalog_router)
app.include_router(reward_rules_router)
app.include_router(users_router)
app.include_router(calculator_router)
app.include_router(comparison_router)


def run() -> None:
    uvicorn.run("cardrewards.api.app:app", host=settings.app_host, port=settings.app_port, reload=False)
