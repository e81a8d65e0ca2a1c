from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.domain.enums import OrderStatus, ServiceCategory, is_valid_sub_service


class OrderFormRequest(BaseModel):
    name: str = Field(min_length=2, max_length=120)
    contact: str = Field(min_length=10, max_length=40)
    service_category: ServiceCategory
    sub_service: str = Field(min_length=1, max_length=40)
    topic: str = Field(min_length=10, max_length=5000)
    deadline: str = Field(min_length=1, max_length=120)
    budget: str = Field(min_length=1, max_length=120)

    model_config = ConfigDict(str_strip_whitespace=True)

    @model_validator(mode="after")
    def check_sub_service(self) -> "OrderFormRequest":
        if not is_valid_sub_service(self.service_category, self.sub_service):
            raise ValueError(
                f"Sub service '{self.sub_service}' is not offered under "
                f"'{self.service_category.value}'"
            )
        return self


class OrderUpdateRequest(BaseModel):
    status: OrderStatus | None = None
    notes: str | None = Field(default=None, max_length=5000)

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("status")
    @classmethod
    def reject_null_status(cls, value: OrderStatus | None) -> OrderStatus | None:
        if value is None:
            raise ValueError("status may be omitted but not null")
        return value


class OrderResponse(BaseModel):
    id: int
    name: str
    contact: str
    service_category: str
    sub_service: str
    topic: str
    deadline: str
    budget: str
    status: OrderStatus
    notes: str | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
