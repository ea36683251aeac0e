from fastapi import APIRouter

from expense_api.api.v1.routes import auth, budgets, categories, dashboard, expenses, goals, google_auth, profile

api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(google_auth.router)
api_router.include_router(profile.router)
api_router.include_router(categories.router)
api_router.include_router(expenses.router)
api_router.include_router(budgets.router)
api_router.include_router(goals.router)
api_router.include_router(dashboard.router)
