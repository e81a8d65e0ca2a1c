import pytest
from pydantic import ValidationError

from app.schemas.project import ProjectCreateRequest, ProjectUpdateRequest


@pytest.mark.parametrize(
    "field_name",
    ["title", "description", "category", "image_url", "featured", "display_order"],
)
def test_update_rejects_null_for_required_columns(field_name: str) -> None:
    with pytest.raises(ValidationError, match="not null"):
        ProjectUpdateRequest(**{field_name: None})


def test_update_keeps_only_fields_that_were_sent() -> None:
    changes = ProjectUpdateRequest(title="  Festival poster ", title_en=None)

    assert changes.model_dump(exclude_unset=True) == {
        "title": "Festival poster",
        "title_en": None,
    }


def test_create_rejects_blank_title() -> None:
    with pytest.raises(ValidationError):
        ProjectCreateRequest(
            title="   ",
            description="Poster series",
            category="poster",
            image_url="https://cdn.example.com/poster.png",
        )
