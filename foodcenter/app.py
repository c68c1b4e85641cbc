from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, HTTPException, Request
from starlette.middleware.sessions import SessionMiddleware

from .auth.dependencies import require_admin, require_user
from .auth.models import LoginRequest, UserCreate, UserOut
from .auth.users import UserExistsError, authenticate, create_user, list_users
from .config import DEFAULT_APP_CONFIG
from .food_centers.models import (
    FoodCenter,
    FoodCenterCount,
    FoodCenterIn,
    FoodCenterSearch,
    FoodCenterUpdate,
)
from .food_centers.service import FoodCenterService

logging.basicConfig(
    level=DEFAULT_APP_CONFIG.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Food Center API", version="1.0.0")
app.add_middleware(SessionMiddleware, secret_key=DEFAULT_APP_CONFIG.session_secret)


def get_service() -> FoodCenterService:
    return FoodCenterService()


def search_params(
    q: str | None = None,
    lat: str | None = None,
    long: str | None = None,
    radius: str | None = None,
    status: str | None = None,
) -> FoodCenterSearch:
    return FoodCenterSearch(q=q, lat=lat, long=long, radius=radius, status=status)


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/login")
def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.email_id, body.password)
    if not user:
        logger.info("Failed login for %s", body.email_id)
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/me")
def me(user: dict = Depends(require_user)) -> dict:
    return user


# ── Users (admin) ────────────────────────────────────────────────────────


@app.get("/users", response_model=list[UserOut])
def get_users(user: dict = Depends(require_admin)) -> list[UserOut]:
    return list_users()


@app.post("/users", response_model=UserOut)
def add_user(body: UserCreate, user: dict = Depends(require_admin)) -> UserOut:
    try:
        return create_user(body)
    except UserExistsError:
        raise HTTPException(status_code=409, detail="User already exists")


# ── Food centers ─────────────────────────────────────────────────────────


@app.get("/food-centers", response_model=list[FoodCenter])
def get_food_centers(
    search: FoodCenterSearch = Depends(search_params),
    service: FoodCenterService = Depends(get_service),
) -> list[FoodCenter]:
    return service.get_all(search)


# Registered before /food-centers/{food_center_id} so the literal paths win.
@app.get("/food-centers/count", response_model=FoodCenterCount)
def get_food_center_count(
    search: FoodCenterSearch = Depends(search_params),
    service: FoodCenterService = Depends(get_service),
) -> FoodCenterCount:
    return FoodCenterCount(count=service.get_count(search))


@app.get("/food-centers/mine", response_model=list[FoodCenter])
def get_my_food_centers(
    user: dict = Depends(require_user),
    service: FoodCenterService = Depends(get_service),
) -> list[FoodCenter]:
    return service.get_by_user_id(user["id"])


@app.get("/food-centers/{food_center_id}", response_model=FoodCenter)
def get_food_center(
    food_center_id: str,
    service: FoodCenterService = Depends(get_service),
) -> FoodCenter:
    food_center = service.get_by_id(food_center_id)
    if food_center is None:
        raise HTTPException(status_code=404, detail="Food center not found")
    return food_center


@app.post("/food-centers", response_model=FoodCenter)
def add_food_center(
    body: FoodCenterIn,
    user: dict = Depends(require_user),
    service: FoodCenterService = Depends(get_service),
) -> FoodCenter:
    return service.save(body, user_id=user["id"])


@app.put("/food-centers/{food_center_id}", response_model=FoodCenter)
def update_food_center(
    food_center_id: str,
    body: FoodCenterUpdate,
    user: dict = Depends(require_user),
    service: FoodCenterService = Depends(get_service),
) -> FoodCenter:
    updated = service.update(food_center_id, body)
    if updated is None:
        raise HTTPException(status_code=404, detail="Food center not found")
    return updated
