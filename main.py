from typing import Any, Optional
import logging

from fastapi import FastAPI, Depends, Body, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from auth import Identity, authenticate_user, create_access_token, hash_password, require_identity
from config import settings
from database import engine, Base, get_db
from errors import AppError, Conflict, InvalidInput, NotFound, Unauthenticated
from models import Category, Product, User
from queries import (
    DEFAULT_CATEGORY_LIMIT, DEFAULT_PRODUCT_LIMIT, MAX_PAGE_LIMIT, PageRequest,
    build_category_query, build_product_query, run_list_query,
)
from responses import envelope, error_response
from schemas import CategoryOut, ProductOut, UserOut
from store import Store
from validation import (
    format_errors, is_valid_id, validate_category, validate_login,
    validate_product_create, validate_product_update, validate_signup,
)

logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

app = FastAPI(title="Inventory Manager Backend")

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

QUERY_LABELS = {"page": "Page", "limit": "Limit", "inStock": "In stock flag"}


# ------------------- Error handlers -------------------

@app.exception_handler(AppError)
def app_error_handler(request: Request, exc: AppError):
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return error_response(exc.status_code, exc.message, exc.errors, headers=headers)


@app.exception_handler(RequestValidationError)
def request_validation_handler(request: Request, exc: RequestValidationError):
    return error_response(400, "Validation error", format_errors(exc.errors(), QUERY_LABELS))


@app.exception_handler(StarletteHTTPException)
def http_error_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


@app.exception_handler(Exception)
def unexpected_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(500, "Internal server error")


def product_json(product: Product):
    return ProductOut.model_validate(product).to_json()


def category_json(category: Category):
    return CategoryOut.model_validate(category).to_json()


# ------------------- APIs -------------------

@app.get("/")
def home():
    return envelope(message="Inventory Manager Backend Running Successfully")


# ---------------- AUTH APIs ---------------- #

@app.post("/auth/signup", status_code=201)
def signup(payload: Any = Body(None), db: Session = Depends(get_db)):
    fields = validate_signup(payload)
    users = Store(db, User)

    if users.find_one([User.email == fields.email]) is not None:
        raise Conflict("User already exists with this email")

    try:
        user = users.insert(User(
            name=fields.name,
            email=fields.email,
            password_hash=hash_password(fields.password),
        ))
    except IntegrityError:
        raise Conflict("User already exists with this email")

    logger.info("User %s registered", user.id)
    return envelope(
        message="User registered successfully",
        data={"user": UserOut.model_validate(user).to_json(), "token": create_access_token(user.id)},
    )


@app.post("/auth/login")
def login(payload: Any = Body(None), db: Session = Depends(get_db)):
    fields = validate_login(payload)

    user = authenticate_user(db, fields.email, fields.password)
    if user is None:
        logger.warning("Failed login attempt")
        raise Unauthenticated("Invalid email or password")

    return envelope(
        message="Login successful",
        data={"user": UserOut.model_validate(user).to_json(), "token": create_access_token(user.id)},
    )


# ---------------- CATEGORY APIs ---------------- #

@app.post("/categories", status_code=201)
def create_category(payload: Any = Body(None), db: Session = Depends(get_db)):
    fields = validate_category(payload)
    categories = Store(db, Category)
    name_key = fields.name.lower()

    if categories.find_one([Category.name_key == name_key]) is not None:
        raise Conflict("Category already exists")

    try:
        category = categories.insert(Category(name=fields.name, name_key=name_key))
    except IntegrityError:
        raise Conflict("Category already exists")

    logger.info("Category %s created: %s", category.id, category.name)
    return envelope(message="Category created successfully", data=category_json(category))


@app.get("/categories")
def get_categories(
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_CATEGORY_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    db: Session = Depends(get_db),
):
    categories = Store(db, Category)
    query = build_category_query(search, PageRequest(page=page, limit=limit))
    items, pagination = run_list_query(categories, query)
    return envelope(data=[category_json(c) for c in items], pagination=pagination)


@app.get("/categories/{category_id}")
def get_category(category_id: str, db: Session = Depends(get_db)):
    if not is_valid_id(category_id):
        raise InvalidInput("Invalid category ID")

    category = Store(db, Category).find_by_id(category_id)
    if category is None:
        raise NotFound("Category not found")

    return envelope(data=category_json(category))


@app.delete("/categories/{category_id}")
def delete_category(category_id: str, db: Session = Depends(get_db)):
    if not is_valid_id(category_id):
        raise InvalidInput("Invalid category ID")

    categories = Store(db, Category)
    if not categories.exists_by_id(category_id):
        raise NotFound("Category not found")

    # products are not cascaded, so a category in use stays
    if Store(db, Product).count([Product.category_id == category_id]) > 0:
        raise Conflict("Category has products and cannot be deleted")

    categories.delete_by_id(category_id)
    logger.info("Category %s deleted", category_id)
    return envelope(message="Category deleted successfully")


# ---------------- PRODUCT APIs ---------------- #

@app.post("/products", status_code=201)
def create_product(
    payload: Any = Body(None),
    identity: Identity = Depends(require_identity),
    db: Session = Depends(get_db),
):
    fields = validate_product_create(payload)

    if not Store(db, Category).exists_by_id(fields.category_id):
        raise InvalidInput("Category not found")

    product = Store(db, Product).insert(Product(
        name=fields.name,
        price=fields.price,
        category_id=fields.category_id,
        in_stock=fields.in_stock,
    ))

    logger.info("Product %s created by user %s", product.id, identity.user_id)
    return envelope(message="Product created successfully", data=product_json(product))


@app.get("/products")
def get_products(
    name: Optional[str] = None,
    category: Optional[str] = None,
    in_stock: Optional[bool] = Query(None, alias="inStock"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PRODUCT_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    identity: Identity = Depends(require_identity),
    db: Session = Depends(get_db),
):
    query = build_product_query(
        Store(db, Category),
        PageRequest(page=page, limit=limit),
        name=name,
        category=category,
        in_stock=in_stock,
    )
    items, pagination = run_list_query(Store(db, Product), query)
    return envelope(data=[product_json(p) for p in items], pagination=pagination)


@app.get("/products/{product_id}")
def get_product(
    product_id: str,
    identity: Identity = Depends(require_identity),
    db: Session = Depends(get_db),
):
    if not is_valid_id(product_id):
        raise InvalidInput("Invalid product ID")

    product = Store(db, Product).find_by_id(product_id)
    if product is None:
        raise NotFound("Product not found")

    return envelope(data=product_json(product))


@app.put("/products/{product_id}")
def update_product(
    product_id: str,
    payload: Any = Body(None),
    identity: Identity = Depends(require_identity),
    db: Session = Depends(get_db),
):
    if not is_valid_id(product_id):
        raise InvalidInput("Invalid product ID")

    patch = validate_product_update(payload)

    if "category_id" in patch and not Store(db, Category).exists_by_id(patch["category_id"]):
        raise InvalidInput("Category not found")

    product = Store(db, Product).update_by_id(product_id, patch)
    if product is None:
        raise NotFound("Product not found")

    logger.info("Product %s updated by user %s: %s", product.id, identity.user_id, sorted(patch))
    return envelope(message="Product updated successfully", data=product_json(product))


@app.delete("/products/{product_id}")
def delete_product(
    product_id: str,
    identity: Identity = Depends(require_identity),
    db: Session = Depends(get_db),
):
    if not is_valid_id(product_id):
        raise InvalidInput("Invalid product ID")

    if not Store(db, Product).delete_by_id(product_id):
        raise NotFound("Product not found")

    logger.info("Product %s deleted by user %s", product_id, identity.user_id)
    return envelope(message="Product deleted successfully")
