"""
SQLAlchemy ORM models for the Folio database.

Three shapes recur across the content tables:

* slugged   — ``slug`` unique per table, ``slug_auto`` remembers whether the
              slug was derived from the title (see app.services.slugs)
* ordered   — integer ``display_order`` within a sibling scope, ties broken
              by ``order_tiebreak`` then ``id`` (see app.services.ordering)
* parents   — own child rows that are replaced wholesale on update
              (see app.services.children)
"""
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Date,
    DateTime,
    ForeignKey,
    Float,
    Boolean,
    Table,
    Enum as SQLEnum,
    JSON,
)
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import enum
import re
from typing import Optional

from app.database import Base
from app.utils.helpers import strip_tags, truncate_text


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


_YOUTUBE_ID_RE = re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/)([^&\s]+)")
_VIMEO_ID_RE = re.compile(r"vimeo\.com/(\d+)")


def video_embed_url(platform: Optional[str], video_url: Optional[str]) -> Optional[str]:
    """Player URL for YouTube and Vimeo links; other platforms use video_url as is."""
    if platform == "youtube":
        match = _YOUTUBE_ID_RE.search(video_url or "")
        return f"https://www.youtube.com/embed/{match.group(1)}" if match else None
    if platform == "vimeo":
        match = _VIMEO_ID_RE.search(video_url or "")
        return f"https://player.vimeo.com/video/{match.group(1)}" if match else None
    return video_url


def _enum(enum_cls, name: str) -> SQLEnum:
    # Persist the lowercase values, not the member names.
    return SQLEnum(enum_cls, name=name, values_callable=lambda e: [m.value for m in e])


# Enums
class ProjectStatus(str, enum.Enum):
    """Project lifecycle; freely toggled, no side effects."""

    COMPLETED = "completed"
    ONGOING = "ongoing"


class PostStatus(str, enum.Enum):
    """Blog post publication state."""

    DRAFT = "draft"
    PUBLISHED = "published"


class ServiceType(str, enum.Enum):
    CONSULTING = "consulting"
    DEVELOPMENT = "development"
    RESEARCH = "research"
    FREELANCE = "freelance"
    HIRING = "hiring"


class PricingModel(str, enum.Enum):
    HOURLY = "hourly"
    PROJECT = "project"
    RETAINER = "retainer"
    CUSTOM = "custom"


# Mixins
class TimestampMixin:
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class SluggedMixin:
    """Unique, URL-safe identifier derived from ``slug_source``."""

    slug_source = "name"
    slug_fallback = "item"

    slug = Column(String(255), nullable=False, unique=True, index=True)
    slug_auto = Column(Boolean, default=True, nullable=False)


class OrderedMixin:
    """Position within a sibling scope (``order_scope`` names the scoping column)."""

    order_scope = None
    order_tiebreak = "created_at"

    display_order = Column(Integer, default=0, nullable=False)


# Association tables
blog_post_category = Table(
    "blog_post_category",
    Base.metadata,
    Column("blog_post_id", Integer, ForeignKey("blog_posts.id", ondelete="CASCADE"), primary_key=True),
    Column("blog_category_id", Integer, ForeignKey("blog_categories.id", ondelete="CASCADE"), primary_key=True),
)

blog_post_tag = Table(
    "blog_post_tag",
    Base.metadata,
    Column("blog_post_id", Integer, ForeignKey("blog_posts.id", ondelete="CASCADE"), primary_key=True),
    Column("blog_tag_id", Integer, ForeignKey("blog_tags.id", ondelete="CASCADE"), primary_key=True),
)


# ---------------------------------------------------------------------------
# About
# ---------------------------------------------------------------------------

class AboutProfile(TimestampMixin, Base):
    """Single-row profile shown on the about page."""

    __tablename__ = "about_profiles"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(255), nullable=False)
    title = Column(String(255), nullable=False)
    subtitle = Column(String(255), nullable=True)
    short_bio = Column(Text, nullable=False)
    long_bio = Column(Text, nullable=True)
    profile_image = Column(String(512), nullable=True)
    company = Column(String(255), nullable=True)
    location = Column(String(255), nullable=True)
    years_of_experience = Column(Integer, nullable=True)
    university = Column(String(255), nullable=True)
    cgpa = Column(Float, nullable=True)
    academic_highlight = Column(String(255), nullable=True)
    resume_url = Column(String(512), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    social_links = Column(JSON, nullable=True)
    status = Column(String(255), default="Open to Opportunities", nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)


class SkillCategory(SluggedMixin, OrderedMixin, TimestampMixin, Base):
    """Group of skills; owns its skills (deleted with the category)."""

    __tablename__ = "skill_categories"

    slug_fallback = "skills"
    order_tiebreak = "name"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(String(500), nullable=True)
    icon = Column(String(100), nullable=True)
    color = Column(String(50), default="cyan", nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    skills = relationship(
        "Skill",
        back_populates="category",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by=lambda: [Skill.display_order, Skill.name, Skill.id],
    )


class Skill(OrderedMixin, TimestampMixin, Base):
    """A single skill, ordered within its category."""

    __tablename__ = "skills"

    order_scope = "skill_category_id"
    order_tiebreak = "name"

    id = Column(Integer, primary_key=True, index=True)
    skill_category_id = Column(
        Integer, ForeignKey("skill_categories.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(255), nullable=False)
    icon = Column(String(100), nullable=True)
    tag = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    is_featured = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    category = relationship("SkillCategory", back_populates="skills")


class Experience(OrderedMixin, TimestampMixin, Base):
    """Work history entry."""

    __tablename__ = "experiences"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    company = Column(String(255), nullable=False)
    location = Column(String(255), nullable=True)
    type = Column(String(50), default="full-time", nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)  # NULL = current position
    is_current = Column(Boolean, default=False, nullable=False)
    description = Column(Text, nullable=True)
    highlights = Column(JSON, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    @property
    def date_range(self) -> str:
        start = self.start_date.strftime("%b %Y")
        if self.is_current or self.end_date is None:
            return f"{start} - Present"
        return f"{start} - {self.end_date.strftime('%b %Y')}"


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------

class ProjectType(SluggedMixin, OrderedMixin, TimestampMixin, Base):
    """Dynamic project category (AI, Computer Vision, ...)."""

    __tablename__ = "project_types"

    slug_fallback = "type"
    order_tiebreak = "name"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    color = Column(String(50), default="cyan", nullable=False)
    icon = Column(String(100), nullable=True)
    description = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    projects = relationship("Project", back_populates="project_type", passive_deletes=True)


class Project(SluggedMixin, OrderedMixin, TimestampMixin, Base):
    """Portfolio project with gallery images, features, metrics and videos."""

    __tablename__ = "projects"

    slug_source = "title"
    slug_fallback = "project"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    short_description = Column(String(500), nullable=False)
    detailed_description = Column(Text, nullable=True)
    project_type_id = Column(
        Integer, ForeignKey("project_types.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    tech_stack = Column(JSON, nullable=True)
    tags = Column(JSON, nullable=True)
    thumbnail_image = Column(String(512), nullable=True)
    cover_image = Column(String(512), nullable=True)
    github_url = Column(String(500), nullable=True)
    live_url = Column(String(500), nullable=True)
    paper_url = Column(String(500), nullable=True)
    dataset_used = Column(String(255), nullable=True)
    role = Column(String(255), nullable=True)
    is_featured = Column(Boolean, default=False, nullable=False)
    status = Column(_enum(ProjectStatus, "project_status"), default=ProjectStatus.COMPLETED, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    project_type = relationship("ProjectType", back_populates="projects", lazy="selectin")
    images = relationship(
        "ProjectImage",
        back_populates="project",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by=lambda: [ProjectImage.display_order, ProjectImage.id],
    )
    features = relationship(
        "ProjectFeature",
        back_populates="project",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by=lambda: [ProjectFeature.display_order, ProjectFeature.id],
    )
    metrics = relationship(
        "ProjectMetric",
        back_populates="project",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by=lambda: [ProjectMetric.display_order, ProjectMetric.id],
    )
    videos = relationship(
        "ProjectVideo",
        back_populates="project",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by=lambda: [ProjectVideo.display_order, ProjectVideo.id],
    )


class ProjectImage(OrderedMixin, Base):
    """Gallery image; ``image_path`` is relative to the storage root."""

    __tablename__ = "project_images"

    order_scope = "project_id"
    order_tiebreak = "id"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    image_path = Column(String(512), nullable=False)
    caption = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    project = relationship("Project", back_populates="images")


class ProjectFeature(OrderedMixin, Base):
    __tablename__ = "project_features"

    order_scope = "project_id"
    order_tiebreak = "id"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(String(100), nullable=True)

    project = relationship("Project", back_populates="features")


class ProjectMetric(OrderedMixin, Base):
    __tablename__ = "project_metrics"

    order_scope = "project_id"
    order_tiebreak = "id"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    value = Column(String(255), nullable=False)
    description = Column(String(500), nullable=True)

    project = relationship("Project", back_populates="metrics")


class ProjectVideo(OrderedMixin, Base):
    __tablename__ = "project_videos"

    order_scope = "project_id"
    order_tiebreak = "id"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    video_url = Column(String(500), nullable=False)
    platform = Column(String(20), nullable=True)  # youtube, vimeo, other
    thumbnail = Column(String(512), nullable=True)

    project = relationship("Project", back_populates="videos")


# ---------------------------------------------------------------------------
# Blog
# ---------------------------------------------------------------------------

class BlogCategory(SluggedMixin, OrderedMixin, TimestampMixin, Base):
    __tablename__ = "blog_categories"

    slug_fallback = "category"
    order_tiebreak = "name"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    posts = relationship("BlogPost", secondary=blog_post_category, back_populates="categories", passive_deletes=True)


class BlogTag(SluggedMixin, TimestampMixin, Base):
    __tablename__ = "blog_tags"

    slug_fallback = "tag"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)

    posts = relationship("BlogPost", secondary=blog_post_tag, back_populates="tags", passive_deletes=True)


class BlogPost(SluggedMixin, TimestampMixin, Base):
    """Blog article; ``draft -> published`` stamps ``published_at`` once."""

    __tablename__ = "blog_posts"

    slug_source = "title"
    slug_fallback = "post"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    excerpt = Column(Text, nullable=True)
    content = Column(Text, nullable=False)
    cover_image = Column(String(512), nullable=True)
    author_name = Column(String(255), nullable=False)
    reading_time = Column(Integer, nullable=True)  # minutes
    status = Column(_enum(PostStatus, "post_status"), default=PostStatus.DRAFT, nullable=False, index=True)
    published_at = Column(DateTime(timezone=True), nullable=True)
    is_featured = Column(Boolean, default=False, nullable=False)
    views_count = Column(Integer, default=0, nullable=False)
    meta_title = Column(String(255), nullable=True)
    meta_description = Column(Text, nullable=True)

    categories = relationship(
        "BlogCategory",
        secondary=blog_post_category,
        back_populates="posts",
        lazy="selectin",
        order_by=lambda: [BlogCategory.display_order, BlogCategory.name],
    )
    tags = relationship(
        "BlogTag",
        secondary=blog_post_tag,
        back_populates="posts",
        lazy="selectin",
        order_by=lambda: BlogTag.name,
    )
    comments = relationship("BlogComment", back_populates="post", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def reading_time_text(self) -> str:
        return f"{self.reading_time or 1} min read"

    @property
    def meta_title_text(self) -> str:
        return self.meta_title or self.title

    @property
    def meta_description_text(self) -> str:
        if self.meta_description:
            return self.meta_description
        if self.excerpt:
            return self.excerpt
        return truncate_text(strip_tags(self.content or ""), 160)


class BlogComment(TimestampMixin, Base):
    """Reader comment; hidden until a moderator approves it."""

    __tablename__ = "blog_comments"

    id = Column(Integer, primary_key=True, index=True)
    blog_post_id = Column(Integer, ForeignKey("blog_posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_name = Column(String(255), nullable=False)
    user_email = Column(String(255), nullable=False)
    comment_body = Column(Text, nullable=False)
    is_approved = Column(Boolean, default=False, nullable=False, index=True)
    ip_address = Column(String(45), nullable=True, index=True)
    user_agent = Column(Text, nullable=True)

    post = relationship("BlogPost", back_populates="comments", lazy="selectin")

    @property
    def post_title(self):
        return self.post.title if self.post is not None else None


# ---------------------------------------------------------------------------
# Services & contact
# ---------------------------------------------------------------------------

class Service(SluggedMixin, OrderedMixin, TimestampMixin, Base):
    """Offered service with an ordered bullet list of features."""

    __tablename__ = "services"

    slug_source = "title"
    slug_fallback = "service"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    short_description = Column(String(500), nullable=False)
    detailed_description = Column(Text, nullable=True)
    service_type = Column(_enum(ServiceType, "service_type"), default=ServiceType.CONSULTING, nullable=False)
    pricing_model = Column(_enum(PricingModel, "pricing_model"), default=PricingModel.CUSTOM, nullable=False)
    price_label = Column(String(100), nullable=True)
    duration = Column(String(100), nullable=True)
    icon = Column(String(100), nullable=True)
    is_featured = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    features = relationship(
        "ServiceFeature",
        back_populates="service",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by=lambda: [ServiceFeature.display_order, ServiceFeature.id],
    )


class ServiceFeature(OrderedMixin, Base):
    __tablename__ = "service_features"

    order_scope = "service_id"
    order_tiebreak = "id"

    id = Column(Integer, primary_key=True, index=True)
    service_id = Column(Integer, ForeignKey("services.id", ondelete="CASCADE"), nullable=False, index=True)
    feature_text = Column(String(255), nullable=False)

    service = relationship("Service", back_populates="features")


class ContactMessage(TimestampMixin, Base):
    """Inbound message from the contact form; read/replied are independent flags."""

    __tablename__ = "contact_messages"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    subject = Column(String(255), nullable=True)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False, index=True)
    is_replied = Column(Boolean, default=False, nullable=False, index=True)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)

    @property
    def preview(self) -> str:
        return truncate_text(self.message or "", 100)
