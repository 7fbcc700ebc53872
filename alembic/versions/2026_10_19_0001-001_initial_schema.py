"""initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

All tables as defined in app/models/database_models.py:
about_profiles, skill_categories, skills, experiences,
project_types, projects, project_images, project_features, project_metrics, project_videos,
blog_categories, blog_tags, blog_posts, blog_post_category, blog_post_tag, blog_comments,
services, service_features, contact_messages.
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _slug():
    return [
        sa.Column("slug", sa.String(255), nullable=False, unique=True, index=True),
        sa.Column("slug_auto", sa.Boolean, server_default=sa.true(), nullable=False),
    ]


def _display_order():
    return sa.Column("display_order", sa.Integer, server_default="0", nullable=False)


def upgrade() -> None:
    # ── Enum types ────────────────────────────────────────────────────────
    project_status = sa.Enum("completed", "ongoing", name="project_status")
    post_status = sa.Enum("draft", "published", name="post_status")
    service_type = sa.Enum("consulting", "development", "research", "freelance", "hiring", name="service_type")
    pricing_model = sa.Enum("hourly", "project", "retainer", "custom", name="pricing_model")

    # ── about ─────────────────────────────────────────────────────────────
    op.create_table(
        "about_profiles",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("subtitle", sa.String(255), nullable=True),
        sa.Column("short_bio", sa.Text, nullable=False),
        sa.Column("long_bio", sa.Text, nullable=True),
        sa.Column("profile_image", sa.String(512), nullable=True),
        sa.Column("company", sa.String(255), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("years_of_experience", sa.Integer, nullable=True),
        sa.Column("university", sa.String(255), nullable=True),
        sa.Column("cgpa", sa.Float, nullable=True),
        sa.Column("academic_highlight", sa.String(255), nullable=True),
        sa.Column("resume_url", sa.String(512), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("social_links", sa.JSON, nullable=True),
        sa.Column("status", sa.String(255), server_default="Open to Opportunities", nullable=False),
        sa.Column("is_active", sa.Boolean, server_default=sa.true(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "skill_categories",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("icon", sa.String(100), nullable=True),
        sa.Column("color", sa.String(50), server_default="cyan", nullable=False),
        sa.Column("is_active", sa.Boolean, server_default=sa.true(), nullable=False),
        *_slug(),
        _display_order(),
        *_timestamps(),
    )

    op.create_table(
        "skills",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column(
            "skill_category_id", sa.Integer,
            sa.ForeignKey("skill_categories.id", ondelete="CASCADE"), nullable=False, index=True,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("icon", sa.String(100), nullable=True),
        sa.Column("tag", sa.String(100), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("is_featured", sa.Boolean, server_default=sa.false(), nullable=False),
        sa.Column("is_active", sa.Boolean, server_default=sa.true(), nullable=False),
        _display_order(),
        *_timestamps(),
    )

    op.create_table(
        "experiences",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("company", sa.String(255), nullable=False),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("type", sa.String(50), server_default="full-time", nullable=False),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=True),
        sa.Column("is_current", sa.Boolean, server_default=sa.false(), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("highlights", sa.JSON, nullable=True),
        sa.Column("is_active", sa.Boolean, server_default=sa.true(), nullable=False),
        _display_order(),
        *_timestamps(),
    )

    # ── projects ──────────────────────────────────────────────────────────
    op.create_table(
        "project_types",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("color", sa.String(50), server_default="cyan", nullable=False),
        sa.Column("icon", sa.String(100), nullable=True),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("is_active", sa.Boolean, server_default=sa.true(), nullable=False),
        *_slug(),
        _display_order(),
        *_timestamps(),
    )

    op.create_table(
        "projects",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("short_description", sa.String(500), nullable=False),
        sa.Column("detailed_description", sa.Text, nullable=True),
        sa.Column(
            "project_type_id", sa.Integer,
            sa.ForeignKey("project_types.id", ondelete="RESTRICT"), nullable=False, index=True,
        ),
        sa.Column("tech_stack", sa.JSON, nullable=True),
        sa.Column("tags", sa.JSON, nullable=True),
        sa.Column("thumbnail_image", sa.String(512), nullable=True),
        sa.Column("cover_image", sa.String(512), nullable=True),
        sa.Column("github_url", sa.String(500), nullable=True),
        sa.Column("live_url", sa.String(500), nullable=True),
        sa.Column("paper_url", sa.String(500), nullable=True),
        sa.Column("dataset_used", sa.String(255), nullable=True),
        sa.Column("role", sa.String(255), nullable=True),
        sa.Column("is_featured", sa.Boolean, server_default=sa.false(), nullable=False),
        sa.Column("status", project_status, server_default="completed", nullable=False),
        sa.Column("is_active", sa.Boolean, server_default=sa.true(), nullable=False),
        *_slug(),
        _display_order(),
        *_timestamps(),
    )

    op.create_table(
        "project_images",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("project_id", sa.Integer, sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("image_path", sa.String(512), nullable=False),
        sa.Column("caption", sa.String(255), nullable=True),
        _display_order(),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "project_features",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("project_id", sa.Integer, sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("icon", sa.String(100), nullable=True),
        _display_order(),
    )

    op.create_table(
        "project_metrics",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("project_id", sa.Integer, sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("value", sa.String(255), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        _display_order(),
    )

    op.create_table(
        "project_videos",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("project_id", sa.Integer, sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("video_url", sa.String(500), nullable=False),
        sa.Column("platform", sa.String(20), nullable=True),
        sa.Column("thumbnail", sa.String(512), nullable=True),
        _display_order(),
    )

    # ── blog ──────────────────────────────────────────────────────────────
    op.create_table(
        "blog_categories",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        *_slug(),
        _display_order(),
        *_timestamps(),
    )

    op.create_table(
        "blog_tags",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("name", sa.String(255), nullable=False),
        *_slug(),
        *_timestamps(),
    )

    op.create_table(
        "blog_posts",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("excerpt", sa.Text, nullable=True),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("cover_image", sa.String(512), nullable=True),
        sa.Column("author_name", sa.String(255), nullable=False),
        sa.Column("reading_time", sa.Integer, nullable=True),
        sa.Column("status", post_status, server_default="draft", nullable=False, index=True),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_featured", sa.Boolean, server_default=sa.false(), nullable=False),
        sa.Column("views_count", sa.Integer, server_default="0", nullable=False),
        sa.Column("meta_title", sa.String(255), nullable=True),
        sa.Column("meta_description", sa.Text, nullable=True),
        *_slug(),
        *_timestamps(),
    )

    op.create_table(
        "blog_post_category",
        sa.Column("blog_post_id", sa.Integer, sa.ForeignKey("blog_posts.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("blog_category_id", sa.Integer, sa.ForeignKey("blog_categories.id", ondelete="CASCADE"), primary_key=True),
    )

    op.create_table(
        "blog_post_tag",
        sa.Column("blog_post_id", sa.Integer, sa.ForeignKey("blog_posts.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("blog_tag_id", sa.Integer, sa.ForeignKey("blog_tags.id", ondelete="CASCADE"), primary_key=True),
    )

    op.create_table(
        "blog_comments",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("blog_post_id", sa.Integer, sa.ForeignKey("blog_posts.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("user_name", sa.String(255), nullable=False),
        sa.Column("user_email", sa.String(255), nullable=False),
        sa.Column("comment_body", sa.Text, nullable=False),
        sa.Column("is_approved", sa.Boolean, server_default=sa.false(), nullable=False, index=True),
        sa.Column("ip_address", sa.String(45), nullable=True, index=True),
        sa.Column("user_agent", sa.Text, nullable=True),
        *_timestamps(),
    )

    # ── services & contact ────────────────────────────────────────────────
    op.create_table(
        "services",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("short_description", sa.String(500), nullable=False),
        sa.Column("detailed_description", sa.Text, nullable=True),
        sa.Column("service_type", service_type, server_default="consulting", nullable=False),
        sa.Column("pricing_model", pricing_model, server_default="custom", nullable=False),
        sa.Column("price_label", sa.String(100), nullable=True),
        sa.Column("duration", sa.String(100), nullable=True),
        sa.Column("icon", sa.String(100), nullable=True),
        sa.Column("is_featured", sa.Boolean, server_default=sa.false(), nullable=False),
        sa.Column("is_active", sa.Boolean, server_default=sa.true(), nullable=False),
        *_slug(),
        _display_order(),
        *_timestamps(),
    )

    op.create_table(
        "service_features",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("service_id", sa.Integer, sa.ForeignKey("services.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("feature_text", sa.String(255), nullable=False),
        _display_order(),
    )

    op.create_table(
        "contact_messages",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("subject", sa.String(255), nullable=True),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("is_read", sa.Boolean, server_default=sa.false(), nullable=False, index=True),
        sa.Column("is_replied", sa.Boolean, server_default=sa.false(), nullable=False, index=True),
        sa.Column("ip_address", sa.String(45), nullable=True),
        sa.Column("user_agent", sa.Text, nullable=True),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("contact_messages")
    op.drop_table("service_features")
    op.drop_table("services")
    op.drop_table("blog_comments")
    op.drop_table("blog_post_tag")
    op.drop_table("blog_post_category")
    op.drop_table("blog_posts")
    op.drop_table("blog_tags")
    op.drop_table("blog_categories")
    op.drop_table("project_videos")
    op.drop_table("project_metrics")
    op.drop_table("project_features")
    op.drop_table("project_images")
    op.drop_table("projects")
    op.drop_table("project_types")
    op.drop_table("experiences")
    op.drop_table("skills")
    op.drop_table("skill_categories")
    op.drop_table("about_profiles")

    bind = op.get_bind()
    for name in ("pricing_model", "service_type", "post_status", "project_status"):
        sa.Enum(name=name).drop(bind, checkfirst=True)
