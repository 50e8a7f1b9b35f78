"""Initial schema: users, request workflow, nursery inventory, bed tasks.

Revision ID: 0001
Revises: (none)
Create Date: 2026-10-19
"""

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

from alembic import op
import sqlalchemy as sa

user_role = sa.Enum("ADMIN", "FIELD_WORKER", "CENRO", "NURSERY_STAFF", name="userrole")


def upgrade() -> None:
    # ── People ───────────────────────────────────────────────

    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", user_role, server_default="FIELD_WORKER"),
        sa.Column("phone", sa.String(20)),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index("ix_users_email", "users", ["email"])
    op.create_index("ix_users_role", "users", ["role"])

    op.create_table(
        "beneficiaries",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("address", sa.Text()),
        sa.Column("contact_number", sa.String(30)),
        sa.Column("email", sa.String(255)),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )

    op.create_table(
        "blacklist",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("beneficiary_id", sa.String(36), sa.ForeignKey("beneficiaries.id"),
                  nullable=False, unique=True),
        sa.Column("reason", sa.Text()),
        sa.Column("active", sa.Boolean(), server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )

    # ── Request workflow ─────────────────────────────────────

    op.create_table(
        "seedling_requests",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("request_code", sa.String(50), nullable=False, unique=True),
        sa.Column("beneficiary_id", sa.String(36), sa.ForeignKey("beneficiaries.id"), nullable=False),
        sa.Column("planting_site_address", sa.Text(), nullable=False),
        sa.Column("hectarage", sa.Float(), nullable=False),
        sa.Column("total_quantity", sa.Integer(), server_default="0"),
        sa.Column("status", sa.String(20), server_default="pending"),
        sa.Column("scheduled_release_date", sa.Date()),
        sa.Column("review_notes", sa.Text()),
        sa.Column("submitted_by", sa.String(255)),
        sa.Column("date_submitted", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index("ix_seedling_requests_request_code", "seedling_requests", ["request_code"])
    op.create_index("ix_seedling_requests_beneficiary_id", "seedling_requests", ["beneficiary_id"])
    op.create_index("ix_seedling_requests_status", "seedling_requests", ["status"])

    op.create_table(
        "request_species",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("request_id", sa.String(36), sa.ForeignKey("seedling_requests.id"), nullable=False),
        sa.Column("species_name", sa.String(255), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
    )
    op.create_index("ix_request_species_request_id", "request_species", ["request_id"])

    op.create_table(
        "releases",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("request_id", sa.String(36), sa.ForeignKey("seedling_requests.id"), nullable=False),
        sa.Column("released_by", sa.String(36), sa.ForeignKey("users.id")),
        sa.Column("quantity_released", sa.Integer(), nullable=False),
        sa.Column("notes", sa.Text()),
        sa.Column("release_date", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index("ix_releases_request_id", "releases", ["request_id"])

    op.create_table(
        "monitoring_sites",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("request_id", sa.String(36), sa.ForeignKey("seedling_requests.id"),
                  nullable=False, unique=True),
        sa.Column("gps_latitude", sa.Float()),
        sa.Column("gps_longitude", sa.Float()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )

    op.create_table(
        "monitoring_visits",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("site_id", sa.String(36), sa.ForeignKey("monitoring_sites.id"), nullable=False),
        sa.Column("scheduled_date", sa.Date(), nullable=False),
        sa.Column("attempted_messages", sa.Integer(), server_default="0"),
        sa.Column("beneficiary_confirmed", sa.Boolean(), server_default=sa.false()),
        sa.Column("visit_date", sa.Date()),
        sa.Column("result", sa.String(50)),
        sa.Column("notes", sa.Text()),
        sa.Column("blacklisted", sa.Boolean(), server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index("ix_monitoring_visits_site_id", "monitoring_visits", ["site_id"])
    op.create_index("ix_monitoring_visits_scheduled_date", "monitoring_visits", ["scheduled_date"])

    op.create_table(
        "sms_messages",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("to_number", sa.String(30), nullable=False),
        sa.Column("message_text", sa.Text(), nullable=False),
        sa.Column("status", sa.String(20), server_default="sent"),
        sa.Column("attempt", sa.Integer(), server_default="1"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )

    # ── Nursery inventory ────────────────────────────────────

    op.create_table(
        "locations",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("location_name", sa.String(255), nullable=False, unique=True),
        sa.Column("description", sa.Text()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )

    op.create_table(
        "batches",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("batch_code", sa.String(50), nullable=False, unique=True),
        sa.Column("source_location", sa.String(255), nullable=False),
        sa.Column("wildlings_count", sa.Integer(), nullable=False),
        sa.Column("date_received", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("status", sa.String(30), server_default="received"),
        sa.Column("notes", sa.Text()),
        sa.Column("person_in_charge", sa.String(36), sa.ForeignKey("users.id")),
        sa.Column("photo_url", sa.Text()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index("ix_batches_batch_code", "batches", ["batch_code"])
    op.create_index("ix_batches_date_received", "batches", ["date_received"])

    op.create_table(
        "beds",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("bed_name", sa.String(100), nullable=False),
        sa.Column("location_id", sa.String(36), sa.ForeignKey("locations.id"), nullable=False),
        sa.Column("species_category", sa.String(50), nullable=False),
        sa.Column("qr_code", sa.String(100), nullable=False, unique=True),
        sa.Column("in_charge", sa.String(36), sa.ForeignKey("users.id")),
        sa.Column("capacity", sa.Integer()),
        sa.Column("current_occupancy", sa.Integer(), server_default="0"),
        sa.Column("notes", sa.Text()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
        sa.UniqueConstraint("location_id", "bed_name", name="uq_beds_location_name"),
    )
    op.create_index("ix_beds_location_id", "beds", ["location_id"])
    op.create_index("ix_beds_qr_code", "beds", ["qr_code"])
    op.create_index("ix_beds_in_charge", "beds", ["in_charge"])

    op.create_table(
        "batch_bed_assignments",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("batch_id", sa.String(36), sa.ForeignKey("batches.id"), nullable=False),
        sa.Column("bed_id", sa.String(36), sa.ForeignKey("beds.id"), nullable=False),
        sa.Column("quantity_assigned", sa.Integer(), server_default="0"),
        sa.Column("assigned_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index("ix_batch_bed_assignments_batch_id", "batch_bed_assignments", ["batch_id"])
    op.create_index("ix_batch_bed_assignments_bed_id", "batch_bed_assignments", ["bed_id"])

    # ── Bed tasks ────────────────────────────────────────────

    op.create_table(
        "bed_tasks",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("task_name", sa.String(255), nullable=False),
        sa.Column("task_description", sa.Text()),
        sa.Column("is_default", sa.Boolean(), server_default=sa.true()),
        sa.Column("display_order", sa.Integer(), server_default="0"),
    )
    op.create_index("ix_bed_tasks_is_default", "bed_tasks", ["is_default"])

    op.create_table(
        "daily_task_completions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("bed_id", sa.String(36), sa.ForeignKey("beds.id"), nullable=False),
        sa.Column("task_id", sa.String(36), sa.ForeignKey("bed_tasks.id"), nullable=False),
        sa.Column("completed_by", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("completion_date", sa.Date(), nullable=False),
        sa.Column("completion_time", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("photo_url", sa.Text()),
        sa.Column("notes", sa.Text()),
        sa.Column("gps_latitude", sa.Float()),
        sa.Column("gps_longitude", sa.Float()),
        # At most one completion per bed, task and calendar day
        sa.UniqueConstraint("bed_id", "task_id", "completion_date", name="uq_task_completion_per_day"),
    )
    op.create_index("ix_daily_task_completions_bed_id", "daily_task_completions", ["bed_id"])
    op.create_index("ix_daily_task_completions_completion_date", "daily_task_completions", ["completion_date"])


def downgrade() -> None:
    for table in (
        "daily_task_completions",
        "bed_tasks",
        "batch_bed_assignments",
        "beds",
        "batches",
        "locations",
        "sms_messages",
        "monitoring_visits",
        "monitoring_sites",
        "releases",
        "request_species",
        "seedling_requests",
        "blacklist",
        "beneficiaries",
        "users",
    ):
        op.drop_table(table)
    user_role.drop(op.get_bind(), checkfirst=True)
