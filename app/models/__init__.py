"""Database and schema models for Folio."""
from app.models.database_models import (
    AboutProfile,
    BlogCategory,
    BlogComment,
    BlogPost,
    BlogTag,
    ContactMessage,
    Experience,
    PostStatus,
    PricingModel,
    Project,
    ProjectFeature,
    ProjectImage,
    ProjectMetric,
    ProjectStatus,
    ProjectType,
    ProjectVideo,
    Service,
    ServiceFeature,
    ServiceType,
    Skill,
    SkillCategory,
)
from app.models.schemas import (
    HealthCheckResponse,
    ReorderRequest,
    ProjectCreate,
    ProjectResponse,
    BlogPostCreate,
    BlogPostResponse,
    ServiceCreate,
    ServiceResponse,
)

__all__ = [
    # Database models
    "AboutProfile",
    "BlogCategory",
    "BlogComment",
    "BlogPost",
    "BlogTag",
    "ContactMessage",
    "Experience",
    "PostStatus",
    "PricingModel",
    "Project",
    "ProjectFeature",
    "ProjectImage",
    "ProjectMetric",
    "ProjectStatus",
    "ProjectType",
    "ProjectVideo",
    "Service",
    "ServiceFeature",
    "ServiceType",
    "Skill",
    "SkillCategory",
    # Pydantic schemas
    "HealthCheckResponse",
    "ReorderRequest",
    "ProjectCreate",
    "ProjectResponse",
    "BlogPostCreate",
    "BlogPostResponse",
    "ServiceCreate",
    "ServiceResponse",
]
