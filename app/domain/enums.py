from enum import Enum


class ServiceCategory(str, Enum):
    GRAPHIC_DESIGN = "graphicDesign"
    ACADEMIC_HELP = "academicHelp"


class GraphicDesignType(str, Enum):
    FLYER = "flyer"
    POSTER = "poster"
    SOCIAL_MEDIA = "socialMedia"
    UIUX = "uiux"


class AcademicHelpType(str, Enum):
    ESSAY = "essay"
    PPT = "ppt"
    RESUME = "resume"


class OrderStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "inProgress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class AdminRole(str, Enum):
    ADMIN = "admin"


SUB_SERVICES_BY_CATEGORY: dict[ServiceCategory, frozenset[str]] = {
    ServiceCategory.GRAPHIC_DESIGN: frozenset(item.value for item in GraphicDesignType),
    ServiceCategory.ACADEMIC_HELP: frozenset(item.value for item in AcademicHelpType),
}


def is_valid_sub_service(category: ServiceCategory, sub_service: str) -> bool:
    return sub_service in SUB_SERVICES_BY_CATEGORY.get(category, frozenset())
