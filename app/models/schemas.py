"""
Pydantic schemas for request/response validation.
"""
from pydantic import BaseModel, Field, ConfigDict, computed_field, model_validator
from typing import Optional, List, Dict, Any, ClassVar, Generic, Literal, Tuple, TypeVar
from datetime import date, datetime

from app.models.database_models import PostStatus, PricingModel, ProjectStatus, ServiceType, video_embed_url
from app.services.ordering import OrderEntry, positional_entries
from app.services.storage import public_url

T = TypeVar("T")

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
URL_PATTERN = r"^https?://\S+$"


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------

class PartialUpdate(BaseModel):
    """
    Base for update bodies: only the fields the client sent are applied.
    Fields listed in ``not_null`` may be omitted but never sent as null.
    """

    not_null: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def _reject_nulls(self):
        nulls = [name for name in self.not_null if name in self.model_fields_set and getattr(self, name) is None]
        if nulls:
            raise ValueError(f"Fields may not be null: {', '.join(nulls)}")
        return self

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class ReorderItem(BaseModel):
    id: int
    display_order: int


class ReorderRequest(BaseModel):
    """
    Either ``{"order": [id, ...]}`` (position = new display_order) or
    ``{"items": [{"id": .., "display_order": ..}, ...]}``.
    """

    order: Optional[List[int]] = Field(None, min_length=1)
    items: Optional[List[ReorderItem]] = Field(None, min_length=1)

    @model_validator(mode="after")
    def _exactly_one_shape(self):
        if (self.order is None) == (self.items is None):
            raise ValueError("Provide exactly one of 'order' or 'items'.")
        return self

    @property
    def field(self) -> str:
        return "order" if self.order is not None else "items"

    def entries(self) -> List[OrderEntry]:
        if self.order is not None:
            return positional_entries(self.order)
        return [(item.id, item.display_order) for item in self.items]


class ReorderResponse(BaseModel):
    message: str = "Order updated successfully."
    updated: int


class BulkIdsRequest(BaseModel):
    ids: List[int] = Field(..., min_length=1)


class BulkActionResponse(BaseModel):
    message: str
    affected: int


class Page(BaseModel, Generic[T]):
    """One page of a paginated listing."""

    items: List[T]
    total: int
    page: int
    per_page: int
    last_page: int


# ---------------------------------------------------------------------------
# Project types
# ---------------------------------------------------------------------------

class ProjectTypeCreate(BaseModel):
    """Schema for creating a project type."""

    name: str = Field(..., min_length=1, max_length=100)
    slug: Optional[str] = Field(None, max_length=255, pattern=SLUG_PATTERN)
    color: str = Field("cyan", max_length=50)
    icon: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    display_order: Optional[int] = Field(None, ge=0)
    is_active: bool = True


class ProjectTypeUpdate(PartialUpdate):
    not_null = ("name", "color", "is_active", "display_order")

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, max_length=255, pattern=SLUG_PATTERN)
    color: Optional[str] = Field(None, max_length=50)
    icon: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    display_order: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class ProjectTypeBrief(BaseModel):
    id: int
    name: str
    slug: str
    color: str
    icon: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ProjectTypeResponse(ProjectTypeBrief):
    """Schema for project type responses."""

    description: Optional[str] = None
    display_order: int
    is_active: bool
    projects_count: int = 0
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------

class ProjectFeatureInput(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    icon: Optional[str] = Field(None, max_length=100)
    display_order: Optional[int] = Field(None, ge=0)


class ProjectMetricInput(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    value: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=500)
    display_order: Optional[int] = Field(None, ge=0)


class ProjectVideoInput(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    video_url: str = Field(..., max_length=500, pattern=URL_PATTERN)
    platform: Optional[Literal["youtube", "vimeo", "other"]] = None
    thumbnail: Optional[str] = Field(None, max_length=512)
    display_order: Optional[int] = Field(None, ge=0)


class ProjectImageInput(BaseModel):
    """An already uploaded gallery image (see POST /projects/{id}/images)."""

    image_path: str = Field(..., min_length=1, max_length=512)
    caption: Optional[str] = Field(None, max_length=255)
    display_order: Optional[int] = Field(None, ge=0)


class ProjectCreate(BaseModel):
    """Schema for creating a project with its nested collections."""

    title: str = Field(..., min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255, pattern=SLUG_PATTERN)
    short_description: str = Field(..., min_length=1, max_length=500)
    detailed_description: Optional[str] = None
    project_type_id: int
    tech_stack: List[str] = []
    tags: List[str] = []
    github_url: Optional[str] = Field(None, max_length=500, pattern=URL_PATTERN)
    live_url: Optional[str] = Field(None, max_length=500, pattern=URL_PATTERN)
    paper_url: Optional[str] = Field(None, max_length=500, pattern=URL_PATTERN)
    dataset_used: Optional[str] = Field(None, max_length=255)
    role: Optional[str] = Field(None, max_length=255)
    is_featured: bool = False
    status: ProjectStatus = ProjectStatus.COMPLETED
    is_active: bool = True
    display_order: Optional[int] = Field(None, ge=0)

    features: List[ProjectFeatureInput] = []
    metrics: List[ProjectMetricInput] = []
    videos: List[ProjectVideoInput] = []


class ProjectUpdate(PartialUpdate):
    """
    Partial project update.  A nested list that is omitted (or null) leaves
    that collection alone; any list, even empty, replaces it entirely.
    """

    not_null = (
        "title", "short_description", "project_type_id", "is_featured",
        "status", "is_active", "display_order",
    )

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255, pattern=SLUG_PATTERN)
    short_description: Optional[str] = Field(None, min_length=1, max_length=500)
    detailed_description: Optional[str] = None
    project_type_id: Optional[int] = None
    tech_stack: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    github_url: Optional[str] = Field(None, max_length=500, pattern=URL_PATTERN)
    live_url: Optional[str] = Field(None, max_length=500, pattern=URL_PATTERN)
    paper_url: Optional[str] = Field(None, max_length=500, pattern=URL_PATTERN)
    dataset_used: Optional[str] = Field(None, max_length=255)
    role: Optional[str] = Field(None, max_length=255)
    is_featured: Optional[bool] = None
    status: Optional[ProjectStatus] = None
    is_active: Optional[bool] = None
    display_order: Optional[int] = Field(None, ge=0)

    features: Optional[List[ProjectFeatureInput]] = None
    metrics: Optional[List[ProjectMetricInput]] = None
    videos: Optional[List[ProjectVideoInput]] = None
    images: Optional[List[ProjectImageInput]] = None


class ProjectImageResponse(BaseModel):
    id: int
    image_path: str
    caption: Optional[str] = None
    display_order: int

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def image_url(self) -> Optional[str]:
        return public_url(self.image_path)


class ProjectFeatureResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    icon: Optional[str] = None
    display_order: int

    model_config = ConfigDict(from_attributes=True)


class ProjectMetricResponse(BaseModel):
    id: int
    name: str
    value: str
    description: Optional[str] = None
    display_order: int

    model_config = ConfigDict(from_attributes=True)


class ProjectVideoResponse(BaseModel):
    id: int
    title: str
    video_url: str
    platform: Optional[str] = None
    thumbnail: Optional[str] = None
    display_order: int

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def embed_url(self) -> Optional[str]:
        return video_embed_url(self.platform, self.video_url)

    @computed_field
    @property
    def thumbnail_url(self) -> Optional[str]:
        return public_url(self.thumbnail)


class ProjectSummary(BaseModel):
    """Schema for project list rows."""

    id: int
    title: str
    slug: str
    short_description: str
    project_type_id: int
    project_type: Optional[ProjectTypeBrief] = None
    tech_stack: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    thumbnail_image: Optional[str] = None
    cover_image: Optional[str] = None
    is_featured: bool
    status: ProjectStatus
    is_active: bool
    display_order: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def thumbnail_url(self) -> Optional[str]:
        return public_url(self.thumbnail_image)

    @computed_field
    @property
    def cover_url(self) -> Optional[str]:
        return public_url(self.cover_image)


class ProjectResponse(ProjectSummary):
    """Schema for a full project with its nested collections."""

    detailed_description: Optional[str] = None
    github_url: Optional[str] = None
    live_url: Optional[str] = None
    paper_url: Optional[str] = None
    dataset_used: Optional[str] = None
    role: Optional[str] = None
    images: List[ProjectImageResponse] = []
    features: List[ProjectFeatureResponse] = []
    metrics: List[ProjectMetricResponse] = []
    videos: List[ProjectVideoResponse] = []


class PublicProjectDetail(ProjectResponse):
    """Project page plus a few active projects of the same type."""

    related: List[ProjectSummary] = []


# ---------------------------------------------------------------------------
# Blog taxonomy
# ---------------------------------------------------------------------------

class BlogCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    display_order: Optional[int] = Field(None, ge=0)


class BlogCategoryUpdate(PartialUpdate):
    not_null = ("name", "display_order")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    display_order: Optional[int] = Field(None, ge=0)


class BlogCategoryBrief(BaseModel):
    id: int
    name: str
    slug: str

    model_config = ConfigDict(from_attributes=True)


class BlogCategoryResponse(BlogCategoryBrief):
    description: Optional[str] = None
    display_order: int
    posts_count: int = 0
    created_at: datetime
    updated_at: datetime


class BlogTagCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255, pattern=SLUG_PATTERN)


class BlogTagUpdate(PartialUpdate):
    not_null = ("name",)

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255, pattern=SLUG_PATTERN)


class BlogTagBrief(BaseModel):
    id: int
    name: str
    slug: str

    model_config = ConfigDict(from_attributes=True)


class BlogTagResponse(BlogTagBrief):
    posts_count: int = 0
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# Blog posts
# ---------------------------------------------------------------------------

class BlogPostCreate(BaseModel):
    """Schema for creating a blog post."""

    title: str = Field(..., min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255, pattern=SLUG_PATTERN)
    excerpt: Optional[str] = Field(None, max_length=500)
    content: str = Field(..., min_length=1)
    author_name: Optional[str] = Field(None, max_length=255)
    status: PostStatus = PostStatus.DRAFT
    published_at: Optional[datetime] = None
    is_featured: bool = False
    meta_title: Optional[str] = Field(None, max_length=255)
    meta_description: Optional[str] = Field(None, max_length=500)
    category_ids: List[int] = []
    tag_ids: List[int] = []


class BlogPostUpdate(PartialUpdate):
    """Partial post update; ``category_ids`` / ``tag_ids`` replace the links when sent."""

    not_null = ("title", "content", "author_name", "status", "is_featured")

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255, pattern=SLUG_PATTERN)
    excerpt: Optional[str] = Field(None, max_length=500)
    content: Optional[str] = Field(None, min_length=1)
    author_name: Optional[str] = Field(None, max_length=255)
    status: Optional[PostStatus] = None
    published_at: Optional[datetime] = None
    is_featured: Optional[bool] = None
    meta_title: Optional[str] = Field(None, max_length=255)
    meta_description: Optional[str] = Field(None, max_length=500)
    category_ids: Optional[List[int]] = None
    tag_ids: Optional[List[int]] = None


class BlogPostSummary(BaseModel):
    """Schema for post list rows (no body)."""

    id: int
    title: str
    slug: str
    excerpt: Optional[str] = None
    cover_image: Optional[str] = None
    author_name: str
    reading_time: Optional[int] = None
    reading_time_text: str
    status: PostStatus
    published_at: Optional[datetime] = None
    is_featured: bool
    views_count: int
    categories: List[BlogCategoryBrief] = []
    tags: List[BlogTagBrief] = []
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def cover_url(self) -> Optional[str]:
        return public_url(self.cover_image)


class BlogPostResponse(BlogPostSummary):
    content: str
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None


class CommentPublic(BaseModel):
    id: int
    user_name: str
    comment_body: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PublicBlogPostDetail(BlogPostResponse):
    """Post page: body, SEO fallbacks, approved comments and related posts."""

    meta_title_text: str
    meta_description_text: str
    comments: List[CommentPublic] = []
    related: List[BlogPostSummary] = []


class PublicBlogIndex(Page[BlogPostSummary]):
    featured: Optional[BlogPostSummary] = None
    categories: List[BlogCategoryResponse] = []


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------

class CommentCreate(BaseModel):
    """Public comment submission.  ``website`` is a honeypot and must stay empty."""

    user_name: str = Field(..., min_length=1, max_length=100)
    user_email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    comment_body: str = Field(..., min_length=5, max_length=2000)
    website: Optional[str] = None


class CommentSubmitResponse(BaseModel):
    message: str = "Thank you! Your comment has been submitted and is awaiting moderation."


class CommentResponse(BaseModel):
    """Schema for comments in the moderation queue."""

    id: int
    blog_post_id: int
    post_title: Optional[str] = None
    user_name: str
    user_email: str
    comment_body: str
    is_approved: bool
    ip_address: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommentCounts(BaseModel):
    total: int
    pending: int
    approved: int


class CommentListResponse(Page[CommentResponse]):
    counts: CommentCounts


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------

class ServiceFeatureInput(BaseModel):
    feature_text: str = Field(..., min_length=1, max_length=255)
    display_order: Optional[int] = Field(None, ge=0)


class ServiceCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255, pattern=SLUG_PATTERN)
    short_description: str = Field(..., min_length=1, max_length=500)
    detailed_description: Optional[str] = None
    service_type: ServiceType = ServiceType.CONSULTING
    pricing_model: PricingModel = PricingModel.CUSTOM
    price_label: Optional[str] = Field(None, max_length=100)
    duration: Optional[str] = Field(None, max_length=100)
    icon: Optional[str] = Field(None, max_length=100)
    is_featured: bool = False
    is_active: bool = True
    display_order: Optional[int] = Field(None, ge=0)
    features: List[ServiceFeatureInput] = []


class ServiceUpdate(PartialUpdate):
    not_null = (
        "title", "short_description", "service_type", "pricing_model",
        "is_featured", "is_active", "display_order",
    )

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255, pattern=SLUG_PATTERN)
    short_description: Optional[str] = Field(None, min_length=1, max_length=500)
    detailed_description: Optional[str] = None
    service_type: Optional[ServiceType] = None
    pricing_model: Optional[PricingModel] = None
    price_label: Optional[str] = Field(None, max_length=100)
    duration: Optional[str] = Field(None, max_length=100)
    icon: Optional[str] = Field(None, max_length=100)
    is_featured: Optional[bool] = None
    is_active: Optional[bool] = None
    display_order: Optional[int] = Field(None, ge=0)
    features: Optional[List[ServiceFeatureInput]] = None


class ServiceFeatureResponse(BaseModel):
    id: int
    feature_text: str
    display_order: int

    model_config = ConfigDict(from_attributes=True)


class ServiceResponse(BaseModel):
    id: int
    title: str
    slug: str
    short_description: str
    detailed_description: Optional[str] = None
    service_type: ServiceType
    pricing_model: PricingModel
    price_label: Optional[str] = None
    duration: Optional[str] = None
    icon: Optional[str] = None
    is_featured: bool
    is_active: bool
    display_order: int
    features: List[ServiceFeatureResponse] = []
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PublicServiceDetail(ServiceResponse):
    related: List[ServiceResponse] = []


# ---------------------------------------------------------------------------
# Skills
# ---------------------------------------------------------------------------

class SkillCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255, pattern=SLUG_PATTERN)
    description: Optional[str] = Field(None, max_length=500)
    icon: Optional[str] = Field(None, max_length=100)
    color: str = Field("cyan", max_length=50)
    display_order: Optional[int] = Field(None, ge=0)
    is_active: bool = True


class SkillCategoryUpdate(PartialUpdate):
    not_null = ("name", "color", "display_order", "is_active")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255, pattern=SLUG_PATTERN)
    description: Optional[str] = Field(None, max_length=500)
    icon: Optional[str] = Field(None, max_length=100)
    color: Optional[str] = Field(None, max_length=50)
    display_order: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class SkillCreate(BaseModel):
    skill_category_id: int
    name: str = Field(..., min_length=1, max_length=255)
    icon: Optional[str] = Field(None, max_length=100)
    tag: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    is_featured: bool = False
    is_active: bool = True
    display_order: Optional[int] = Field(None, ge=0)


class SkillUpdate(PartialUpdate):
    not_null = ("skill_category_id", "name", "is_featured", "is_active", "display_order")

    skill_category_id: Optional[int] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    icon: Optional[str] = Field(None, max_length=100)
    tag: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    is_featured: Optional[bool] = None
    is_active: Optional[bool] = None
    display_order: Optional[int] = Field(None, ge=0)


class SkillResponse(BaseModel):
    id: int
    skill_category_id: int
    name: str
    icon: Optional[str] = None
    tag: Optional[str] = None
    description: Optional[str] = None
    is_featured: bool
    is_active: bool
    display_order: int

    model_config = ConfigDict(from_attributes=True)


class SkillCategoryResponse(BaseModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    icon: Optional[str] = None
    color: str
    display_order: int
    is_active: bool
    skills: List[SkillResponse] = []
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Experiences
# ---------------------------------------------------------------------------

ExperienceKind = Literal["full-time", "part-time", "contract", "freelance", "internship"]


class ExperienceCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    company: str = Field(..., min_length=1, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    type: ExperienceKind = "full-time"
    start_date: date
    end_date: Optional[date] = None
    is_current: bool = False
    description: Optional[str] = None
    highlights: List[str] = []
    is_active: bool = True
    display_order: Optional[int] = Field(None, ge=0)

    @model_validator(mode="after")
    def _dates_in_order(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class ExperienceUpdate(PartialUpdate):
    not_null = ("title", "company", "type", "start_date", "is_current", "is_active", "display_order")

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    company: Optional[str] = Field(None, min_length=1, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    type: Optional[ExperienceKind] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_current: Optional[bool] = None
    description: Optional[str] = None
    highlights: Optional[List[str]] = None
    is_active: Optional[bool] = None
    display_order: Optional[int] = Field(None, ge=0)


class ExperienceResponse(BaseModel):
    id: int
    title: str
    company: str
    location: Optional[str] = None
    type: str
    start_date: date
    end_date: Optional[date] = None
    is_current: bool
    date_range: str
    description: Optional[str] = None
    highlights: Optional[List[str]] = None
    is_active: bool
    display_order: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# About profile
# ---------------------------------------------------------------------------

class AboutProfileInput(BaseModel):
    """Full profile body (the profile is a single row, created on first save)."""

    full_name: str = Field(..., min_length=1, max_length=255)
    title: str = Field(..., min_length=1, max_length=255)
    subtitle: Optional[str] = Field(None, max_length=255)
    short_bio: str = Field(..., min_length=1)
    long_bio: Optional[str] = None
    company: Optional[str] = Field(None, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    years_of_experience: Optional[int] = Field(None, ge=0, le=80)
    university: Optional[str] = Field(None, max_length=255)
    cgpa: Optional[float] = Field(None, ge=0, le=4)
    academic_highlight: Optional[str] = Field(None, max_length=255)
    resume_url: Optional[str] = Field(None, max_length=512, pattern=URL_PATTERN)
    email: Optional[str] = Field(None, max_length=255, pattern=EMAIL_PATTERN)
    phone: Optional[str] = Field(None, max_length=50)
    social_links: Optional[Dict[str, str]] = None
    status: str = Field("Open to Opportunities", max_length=255)
    is_active: bool = True


class AboutProfileResponse(BaseModel):
    id: int
    full_name: str
    title: str
    subtitle: Optional[str] = None
    short_bio: str
    long_bio: Optional[str] = None
    profile_image: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    years_of_experience: Optional[int] = None
    university: Optional[str] = None
    cgpa: Optional[float] = None
    academic_highlight: Optional[str] = None
    resume_url: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    social_links: Optional[Dict[str, str]] = None
    status: str
    is_active: bool
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def profile_image_url(self) -> Optional[str]:
        return public_url(self.profile_image)


class AboutPageResponse(BaseModel):
    profile: Optional[AboutProfileResponse] = None
    skill_categories: List[SkillCategoryResponse] = []
    experiences: List[ExperienceResponse] = []


# ---------------------------------------------------------------------------
# Contact
# ---------------------------------------------------------------------------

class ContactCreate(BaseModel):
    """Public contact form.  ``website`` is a honeypot and must stay empty."""

    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    subject: Optional[str] = Field(None, max_length=255)
    message: str = Field(..., min_length=10, max_length=5000)
    website: Optional[str] = None


class ContactSubmitResponse(BaseModel):
    message: str = "Thank you for reaching out! I'll get back to you soon."


class ContactFlagsUpdate(BaseModel):
    is_read: Optional[bool] = None
    is_replied: Optional[bool] = None


class ContactMessageResponse(BaseModel):
    id: int
    name: str
    email: str
    subject: Optional[str] = None
    message: str
    preview: str
    is_read: bool
    is_replied: bool
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ContactCounts(BaseModel):
    total: int
    unread: int
    unreplied: int


class ContactListResponse(Page[ContactMessageResponse]):
    counts: ContactCounts


# Health Check Schema
class HealthCheckResponse(BaseModel):
    """Schema for health check response."""

    status: str
    database: str
    timestamp: datetime
