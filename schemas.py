from datetime import datetime, timezone
from typing import Annotated, ClassVar, Dict

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, field_validator

ID_PATTERN = r"^[0-9a-f]{32}$"


# ------------------- Input -------------------

class InputModel(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    # human readable name of each field, keyed by its JSON name
    labels: ClassVar[Dict[str, str]] = {}


class CategoryCreate(InputModel):
    labels = {"name": "Category name"}

    name: str = Field(min_length=2, max_length=50)


class ProductBase(InputModel):
    labels = {
        "name": "Product name",
        "price": "Price",
        "categoryId": "Category",
        "inStock": "In stock flag",
    }


class ProductCreate(ProductBase):
    name: str = Field(min_length=2, max_length=100)
    price: float = Field(ge=0, allow_inf_nan=False)
    category_id: str = Field(alias="categoryId", pattern=ID_PATTERN)
    in_stock: bool = Field(True, alias="inStock")


class ProductUpdate(ProductBase):
    # defaults are not validated, so an omitted field stays out of
    # model_fields_set while an explicit null is rejected
    name: str = Field(None, min_length=2, max_length=100)
    price: float = Field(None, ge=0, allow_inf_nan=False)
    category_id: str = Field(None, alias="categoryId", pattern=ID_PATTERN)
    in_stock: bool = Field(None, alias="inStock")


class SignupRequest(InputModel):
    labels = {"name": "Name", "email": "Email", "password": "Password"}

    name: str = Field(min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()


class LoginRequest(InputModel):
    labels = {"email": "Email", "password": "Password"}

    email: str = Field(min_length=1)
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()


# ------------------- Output -------------------

def as_utc(value: datetime) -> datetime:
    # the store may hand back naive values; they are always UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class OutputModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(serialization_alias="_id")

    def to_json(self):
        return self.model_dump(by_alias=True, mode="json")


class CategoryRef(OutputModel):
    name: str


class CategoryOut(OutputModel):
    name: str
    created_at: UtcDatetime = Field(serialization_alias="createdAt")
    updated_at: UtcDatetime = Field(serialization_alias="updatedAt")


class ProductOut(OutputModel):
    name: str
    price: float
    category: CategoryRef = Field(serialization_alias="categoryId")
    in_stock: bool = Field(serialization_alias="inStock")
    created_at: UtcDatetime = Field(serialization_alias="createdAt")
    updated_at: UtcDatetime = Field(serialization_alias="updatedAt")


class UserOut(OutputModel):
    name: str
    email: str
    created_at: UtcDatetime = Field(serialization_alias="createdAt")
    updated_at: UtcDatetime = Field(serialization_alias="updatedAt")
