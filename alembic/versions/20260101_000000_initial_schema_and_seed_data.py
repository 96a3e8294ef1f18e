"""Initial schema and seed data for LockerRoom

Revision ID: 20260101_000000
Revises: None
Create Date: 2026-01-01 00:00:00.000000

This is the initial migration that creates all necessary tables and seeds default data
for the LockerRoom service. This includes:
- Accounts, schools, students, payment history and school applications
- Posts, announcements, engagement rows and the follow graph
- Notifications and role-targeted banners
- XEN Watch submissions, reviews, feedback and payment transactions
- Evaluation form templates, fields and scout evaluations
- Default system settings

Revision format: YYYYMMDD_HHMMSS_description

"""

from datetime import datetime
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20260101_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id(name: str = "id") -> sa.Column:
    return sa.Column(name, sa.String(32), nullable=False)


def upgrade() -> None:
    """Create all tables and seed initial data."""

    # Create schools table
    op.create_table(
        "schools",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("contact_email", sa.String(255), nullable=True),
        sa.Column("contact_phone", sa.String(64), nullable=True),
        sa.Column("profile_pic_url", sa.String(1024), nullable=True),
        sa.Column("payment_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("payment_frequency", sa.String(16), nullable=False),
        sa.Column("subscription_expires_at", sa.DateTime(), nullable=True),
        sa.Column("last_payment_date", sa.DateTime(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("max_students", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_schools_name", "name"),
        sa.Index("ix_schools_subscription_expires_at", "subscription_expires_at"),
        sa.Index("ix_schools_is_active", "is_active"),
    )

    # Create users table
    op.create_table(
        "users",
        _id(),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("role", sa.String(32), nullable=False),
        sa.Column("school_id", sa.String(32), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("profile_pic_url", sa.String(1024), nullable=True),
        sa.Column("is_frozen", sa.Boolean(), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["school_id"], ["schools.id"]),
        sa.Index("ix_users_email", "email", unique=True),
        sa.Index("ix_users_role", "role"),
        sa.Index("ix_users_school_id", "school_id"),
        sa.Index("ix_users_created_at", "created_at"),
    )

    # Create students table
    op.create_table(
        "students",
        _id(),
        sa.Column("user_id", sa.String(32), nullable=False),
        sa.Column("school_id", sa.String(32), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("sport", sa.String(64), nullable=True),
        sa.Column("position", sa.String(64), nullable=True),
        sa.Column("role_number", sa.String(16), nullable=True),
        sa.Column("grade", sa.String(32), nullable=True),
        sa.Column("gender", sa.String(16), nullable=True),
        sa.Column("height", sa.String(16), nullable=True),
        sa.Column("weight", sa.String(16), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("profile_pic_url", sa.String(1024), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["school_id"], ["schools.id"]),
        sa.Index("ix_students_user_id", "user_id", unique=True),
        sa.Index("ix_students_school_id", "school_id"),
        sa.Index("ix_students_created_at", "created_at"),
    )

    # Create school_payment_records table
    op.create_table(
        "school_payment_records",
        _id(),
        sa.Column("school_id", sa.String(32), nullable=False),
        sa.Column("payment_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("payment_frequency", sa.String(16), nullable=False),
        sa.Column("payment_type", sa.String(32), nullable=False),
        sa.Column("student_limit_before", sa.Integer(), nullable=True),
        sa.Column("student_limit_after", sa.Integer(), nullable=True),
        sa.Column("old_frequency", sa.String(16), nullable=True),
        sa.Column("new_frequency", sa.String(16), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("recorded_by", sa.String(32), nullable=False),
        sa.Column("recorded_at", sa.DateTime(), nullable=False),
        sa.Column("subscription_expires_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["school_id"], ["schools.id"]),
        sa.ForeignKeyConstraint(["recorded_by"], ["users.id"]),
        sa.Index("ix_school_payment_records_school_id", "school_id"),
        sa.Index("ix_school_payment_records_payment_type", "payment_type"),
        sa.Index("ix_school_payment_records_recorded_at", "recorded_at"),
    )

    # Create school_applications table
    op.create_table(
        "school_applications",
        _id(),
        sa.Column("school_name", sa.String(255), nullable=False),
        sa.Column("contact_name", sa.String(255), nullable=False),
        sa.Column("contact_email", sa.String(255), nullable=False),
        sa.Column("contact_phone", sa.String(64), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("expected_students", sa.Integer(), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("review_notes", sa.Text(), nullable=True),
        sa.Column("reviewed_by", sa.String(32), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(), nullable=True),
        sa.Column("school_id", sa.String(32), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["reviewed_by"], ["users.id"]),
        sa.ForeignKeyConstraint(["school_id"], ["schools.id"]),
        sa.Index("ix_school_applications_status", "status"),
        sa.Index("ix_school_applications_created_at", "created_at"),
    )

    # Create posts table (regular posts and announcements)
    op.create_table(
        "posts",
        _id(),
        sa.Column("author_id", sa.String(32), nullable=False),
        sa.Column("student_id", sa.String(32), nullable=True),
        sa.Column("school_id", sa.String(32), nullable=True),
        sa.Column("media_url", sa.String(1024), nullable=True),
        sa.Column("media_type", sa.String(16), nullable=True),
        sa.Column("caption", sa.Text(), nullable=True),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("type", sa.String(16), nullable=False),
        sa.Column("title", sa.String(255), nullable=True),
        sa.Column("scope", sa.String(16), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["student_id"], ["students.id"]),
        sa.ForeignKeyConstraint(["school_id"], ["schools.id"]),
        sa.Index("ix_posts_author_id", "author_id"),
        sa.Index("ix_posts_student_id", "student_id"),
        sa.Index("ix_posts_school_id", "school_id"),
        sa.Index("ix_posts_status", "status"),
        sa.Index("ix_posts_type", "type"),
        sa.Index("ix_posts_created_at", "created_at"),
    )

    # Create engagement tables (likes, views and saves are unique per user)
    for table, unique_name, stamp in (
        ("post_likes", "uq_post_likes_post_user", "created_at"),
        ("post_views", "uq_post_views_post_user", "viewed_at"),
        ("saved_posts", "uq_saved_posts_post_user", "created_at"),
    ):
        indexes = [
            sa.Index(f"ix_{table}_post_id", "post_id"),
            sa.Index(f"ix_{table}_user_id", "user_id"),
        ]
        if table == "saved_posts":
            indexes.append(sa.Index("ix_saved_posts_created_at", "created_at"))
        op.create_table(
            table,
            _id(),
            _id("post_id"),
            _id("user_id"),
            sa.Column(stamp, sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint("id"),
            sa.ForeignKeyConstraint(["post_id"], ["posts.id"]),
            sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
            sa.UniqueConstraint("post_id", "user_id", name=unique_name),
            *indexes,
        )

    # Create post_comments table
    op.create_table(
        "post_comments",
        _id(),
        _id("post_id"),
        _id("user_id"),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.Index("ix_post_comments_post_id", "post_id"),
        sa.Index("ix_post_comments_user_id", "user_id"),
        sa.Index("ix_post_comments_created_at", "created_at"),
    )

    # Create reported_posts table
    op.create_table(
        "reported_posts",
        _id(),
        _id("post_id"),
        _id("reporter_id"),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"]),
        sa.ForeignKeyConstraint(["reporter_id"], ["users.id"]),
        sa.Index("ix_reported_posts_post_id", "post_id"),
        sa.Index("ix_reported_posts_status", "status"),
    )

    # Create user_follows table
    op.create_table(
        "user_follows",
        _id(),
        _id("follower_id"),
        _id("following_id"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["follower_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["following_id"], ["users.id"]),
        sa.UniqueConstraint("follower_id", "following_id", name="uq_user_follows_pair"),
        sa.Index("ix_user_follows_follower_id", "follower_id"),
        sa.Index("ix_user_follows_following_id", "following_id"),
    )

    # Create notifications table
    op.create_table(
        "notifications",
        _id(),
        _id("user_id"),
        sa.Column("type", sa.String(64), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("entity_type", sa.String(32), nullable=True),
        sa.Column("entity_id", sa.String(32), nullable=True),
        sa.Column("related_user_id", sa.String(32), nullable=True),
        sa.Column("meta", sa.JSON(), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["related_user_id"], ["users.id"]),
        sa.Index("ix_notifications_user_id", "user_id"),
        sa.Index("ix_notifications_type", "type"),
        sa.Index("ix_notifications_is_read", "is_read"),
        sa.Index("ix_notifications_created_at", "created_at"),
    )

    # Create banners table
    op.create_table(
        "banners",
        _id(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("category", sa.String(32), nullable=False),
        sa.Column("target_roles", sa.JSON(), nullable=False),
        sa.Column("target_school_ids", sa.JSON(), nullable=True),
        sa.Column("start_date", sa.DateTime(), nullable=True),
        sa.Column("end_date", sa.DateTime(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("priority", sa.Integer(), nullable=False),
        _id("created_by"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"]),
        sa.Index("ix_banners_is_active", "is_active"),
    )

    # Create xen_watch_submissions table
    op.create_table(
        "xen_watch_submissions",
        _id(),
        _id("student_id"),
        sa.Column("school_id", sa.String(32), nullable=True),
        sa.Column("post_id", sa.String(32), nullable=True),
        sa.Column("media_url", sa.String(1024), nullable=False),
        sa.Column("caption", sa.Text(), nullable=True),
        sa.Column("amount_cents", sa.Integer(), nullable=False),
        sa.Column("currency", sa.String(8), nullable=False),
        sa.Column("payment_provider", sa.String(32), nullable=True),
        sa.Column("payment_intent_id", sa.String(128), nullable=True),
        sa.Column("paid_at", sa.DateTime(), nullable=True),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("selected_scout_id", sa.String(32), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["student_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["school_id"], ["schools.id"]),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"]),
        sa.ForeignKeyConstraint(["selected_scout_id"], ["users.id"]),
        sa.Index("ix_xen_watch_submissions_student_id", "student_id"),
        sa.Index("ix_xen_watch_submissions_status", "status"),
        sa.Index("ix_xen_watch_submissions_selected_scout_id", "selected_scout_id"),
        sa.Index("ix_xen_watch_submissions_created_at", "created_at"),
    )

    # Create xen_watch_reviews table
    op.create_table(
        "xen_watch_reviews",
        _id(),
        _id("submission_id"),
        _id("scout_id"),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("is_submitted", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["submission_id"], ["xen_watch_submissions.id"]),
        sa.ForeignKeyConstraint(["scout_id"], ["users.id"]),
        sa.UniqueConstraint("submission_id", "scout_id", name="uq_xen_watch_reviews_submission_scout"),
        sa.Index("ix_xen_watch_reviews_submission_id", "submission_id"),
        sa.Index("ix_xen_watch_reviews_scout_id", "scout_id"),
    )

    # Create xen_watch_feedback table (one consolidated message per submission)
    op.create_table(
        "xen_watch_feedback",
        _id(),
        _id("submission_id"),
        _id("admin_user_id"),
        sa.Column("final_rating", sa.Integer(), nullable=True),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("sent_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["submission_id"], ["xen_watch_submissions.id"]),
        sa.ForeignKeyConstraint(["admin_user_id"], ["users.id"]),
        sa.UniqueConstraint("submission_id"),
    )

    # Create payment_transactions table
    op.create_table(
        "payment_transactions",
        _id(),
        _id("user_id"),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("amount_cents", sa.Integer(), nullable=False),
        sa.Column("currency", sa.String(8), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("provider", sa.String(32), nullable=False),
        sa.Column("provider_transaction_id", sa.String(128), nullable=True),
        sa.Column("meta", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.Index("ix_payment_transactions_user_id", "user_id"),
        sa.Index("ix_payment_transactions_type", "type"),
        sa.Index("ix_payment_transactions_status", "status"),
        sa.Index("ix_payment_transactions_created_at", "created_at"),
    )

    # Create evaluation_form_templates table
    op.create_table(
        "evaluation_form_templates",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        _id("created_by"),
        sa.Column("published_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"]),
        sa.Index("ix_evaluation_form_templates_status", "status"),
    )

    # Create evaluation_form_fields table
    op.create_table(
        "evaluation_form_fields",
        _id(),
        _id("form_template_id"),
        sa.Column("field_type", sa.String(32), nullable=False),
        sa.Column("label", sa.String(255), nullable=False),
        sa.Column("placeholder", sa.String(255), nullable=True),
        sa.Column("help_text", sa.Text(), nullable=True),
        sa.Column("required", sa.Boolean(), nullable=False),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.Column("options", sa.JSON(), nullable=True),
        sa.Column("validation_rules", sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["form_template_id"], ["evaluation_form_templates.id"]),
        sa.Index("ix_evaluation_form_fields_form_template_id", "form_template_id"),
    )

    # Create evaluation_submissions table (student fields are a snapshot)
    op.create_table(
        "evaluation_submissions",
        _id(),
        _id("form_template_id"),
        _id("submitted_by"),
        sa.Column("student_id", sa.String(32), nullable=True),
        sa.Column("student_name", sa.String(255), nullable=True),
        sa.Column("student_sport", sa.String(64), nullable=True),
        sa.Column("student_position", sa.String(64), nullable=True),
        sa.Column("student_school_id", sa.String(32), nullable=True),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("submitted_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["form_template_id"], ["evaluation_form_templates.id"]),
        sa.ForeignKeyConstraint(["submitted_by"], ["users.id"]),
        sa.ForeignKeyConstraint(["student_id"], ["students.id"]),
        sa.Index("ix_evaluation_submissions_form_template_id", "form_template_id"),
        sa.Index("ix_evaluation_submissions_submitted_by", "submitted_by"),
        sa.Index("ix_evaluation_submissions_status", "status"),
    )

    # Create evaluation_submission_responses table
    op.create_table(
        "evaluation_submission_responses",
        _id(),
        _id("submission_id"),
        _id("field_id"),
        sa.Column("response_value", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["submission_id"], ["evaluation_submissions.id"]),
        sa.ForeignKeyConstraint(["field_id"], ["evaluation_form_fields.id"]),
        sa.UniqueConstraint("submission_id", "field_id", name="uq_evaluation_responses_submission_field"),
        sa.Index("ix_evaluation_submission_responses_submission_id", "submission_id"),
    )

    # Create system_settings table
    op.create_table(
        "system_settings",
        _id(),
        sa.Column("key", sa.String(128), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("category", sa.String(64), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("updated_by", sa.String(32), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["updated_by"], ["users.id"]),
        sa.Index("ix_system_settings_key", "key", unique=True),
    )

    # Seed default system settings
    now = datetime.utcnow().isoformat()
    default_settings = [
        {
            "id": "setting_xen_watch_price",
            "key": "xen_watch_price_cents",
            "value": "1000",
            "category": "payments",
            "description": "Price of a XEN Watch review in cents",
        },
        {
            "id": "setting_expiry_warning",
            "key": "subscription_expiry_warning_days",
            "value": "30",
            "category": "payments",
            "description": "Days before expiry that school subscriptions are flagged",
        },
    ]

    system_settings_columns = ["id", "key", "value", "category", "description", "updated_at"]

    for setting in default_settings:
        values = ", ".join(
            [
                f"'{setting['id']}'",
                f"'{setting['key']}'",
                f"'{setting['value']}'",
                f"'{setting['category']}'",
                f"'{setting['description']}'",
                f"'{now}'",
            ]
        )
        op.execute(f"INSERT INTO system_settings ({', '.join(system_settings_columns)}) " f"VALUES ({values})")


def downgrade() -> None:
    """Drop all tables created in upgrade."""
    op.drop_table("system_settings")
    op.drop_table("evaluation_submission_responses")
    op.drop_table("evaluation_submissions")
    op.drop_table("evaluation_form_fields")
    op.drop_table("evaluation_form_templates")
    op.drop_table("payment_transactions")
    op.drop_table("xen_watch_feedback")
    op.drop_table("xen_watch_reviews")
    op.drop_table("xen_watch_submissions")
    op.drop_table("banners")
    op.drop_table("notifications")
    op.drop_table("user_follows")
    op.drop_table("reported_posts")
    op.drop_table("post_comments")
    op.drop_table("saved_posts")
    op.drop_table("post_views")
    op.drop_table("post_likes")
    op.drop_table("posts")
    op.drop_table("school_applications")
    op.drop_table("school_payment_records")
    op.drop_table("students")
    op.drop_table("users")
    op.drop_table("schools")
