import pytest
from fakes import order_form
from pydantic import ValidationError

from app.domain.enums import OrderStatus, ServiceCategory
from app.schemas.order import OrderFormRequest, OrderUpdateRequest


def test_valid_order_form() -> None:
    form = OrderFormRequest(**order_form())

    assert form.service_category == ServiceCategory.GRAPHIC_DESIGN
    assert form.model_dump(mode="json")["service_category"] == "graphicDesign"


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": "R"},
        {"contact": "0812"},
        {"service_category": "videoEditing"},
        {"sub_service": ""},
        {"topic": "too short"},
        {"deadline": ""},
        {"budget": ""},
    ],
)
def test_invalid_order_form_fields(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        OrderFormRequest(**order_form(**overrides))


def test_sub_service_must_belong_to_category() -> None:
    with pytest.raises(ValidationError, match="not offered"):
        OrderFormRequest(**order_form(service_category="academicHelp", sub_service="poster"))

    form = OrderFormRequest(**order_form(service_category="academicHelp", sub_service="essay"))
    assert form.sub_service == "essay"


def test_fields_are_trimmed_before_length_checks() -> None:
    form = OrderFormRequest(
        **order_form(name="  Rina Putri  ", contact=" 081234567890 ")
    )

    assert form.name == "Rina Putri"
    assert form.contact == "081234567890"

    with pytest.raises(ValidationError):
        OrderFormRequest(**order_form(name="   "))
    with pytest.raises(ValidationError):
        OrderFormRequest(**order_form(topic="   short    "))


def test_order_update_rejects_null_status() -> None:
    with pytest.raises(ValidationError, match="not null"):
        OrderUpdateRequest(status=None)

    assert OrderUpdateRequest(notes=None).model_dump(exclude_unset=True) == {
        "notes": None
    }
    assert OrderUpdateRequest(status="completed").model_dump(exclude_unset=True) == {
        "status": OrderStatus.COMPLETED
    }
