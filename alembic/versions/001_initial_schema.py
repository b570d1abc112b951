"""Initial schema: sick leaves, poortwachter milestones, absence statistics

Revision ID: 001
Revises:
Create Date: 2026-10-01 00:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Sick leaves table
    op.create_table(
        "sick_leaves",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("employee_id", sa.String(128), nullable=False),
        sa.Column("company_id", sa.String(128), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("reported_at", sa.DateTime(), nullable=False),
        sa.Column("reported_by", sa.String(200), nullable=False),
        sa.Column(
            "reported_via",
            sa.Enum("phone", "email", "app", "in_person"),
            nullable=False,
            server_default="app",
        ),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("actual_return_date", sa.Date(), nullable=True),
        sa.Column(
            "status",
            sa.Enum("active", "recovered", "partially_recovered", "long_term"),
            nullable=False,
            server_default="active",
        ),
        sa.Column("work_capacity_percentage", sa.SmallInteger(), nullable=False, server_default="0"),
        sa.Column("arbo_service_contacted", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("arbo_service_date", sa.Date(), nullable=True),
        sa.Column("arbo_advice", sa.Text(), nullable=True),
        sa.Column("poortwachter_active", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("wia_applied_date", sa.Date(), nullable=True),
        sa.Column("wia_decision", sa.Enum("approved", "rejected", "pending"), nullable=True),
        sa.Column("wia_percentage", sa.SmallInteger(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        mysql_charset="utf8mb4",
        mysql_collate="utf8mb4_unicode_ci",
    )
    op.create_index("ix_sick_leaves_user_id", "sick_leaves", ["user_id"])
    op.create_index("ix_sick_leaves_employee_id", "sick_leaves", ["employee_id"])
    op.create_index("ix_sick_leaves_company_id", "sick_leaves", ["company_id"])

    # Poortwachter milestones table (status is derived, not stored)
    op.create_table(
        "poortwachter_milestones",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("sick_leave_id", sa.Integer(), nullable=False),
        sa.Column("week_offset", sa.SmallInteger(), nullable=False),
        sa.Column("action", sa.String(255), nullable=False),
        sa.Column("due_date", sa.DateTime(), nullable=False),
        sa.Column("completed_date", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["sick_leave_id"], ["sick_leaves.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("sick_leave_id", "week_offset", name="uq_milestone_week"),
        mysql_charset="utf8mb4",
        mysql_collate="utf8mb4_unicode_ci",
    )

    # Absence statistics table
    op.create_table(
        "absence_statistics",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("employee_id", sa.String(128), nullable=False),
        sa.Column("company_id", sa.String(128), nullable=False),
        sa.Column("period", sa.Enum("month", "quarter", "year"), nullable=False),
        sa.Column("period_start", sa.Date(), nullable=False),
        sa.Column("period_end", sa.Date(), nullable=False),
        sa.Column("total_sick_days", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_sick_hours", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("absence_frequency", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("average_duration", sa.Float(), nullable=False, server_default="0"),
        sa.Column("absence_percentage", sa.Float(), nullable=False, server_default="0"),
        sa.Column("long_term_absence", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("chronic_absence", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("calculated_at", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "employee_id", "period", "period_start", name="uq_absence_stats_period"
        ),
        mysql_charset="utf8mb4",
        mysql_collate="utf8mb4_unicode_ci",
    )
    op.create_index("ix_absence_statistics_employee_id", "absence_statistics", ["employee_id"])
    op.create_index("ix_absence_statistics_company_id", "absence_statistics", ["company_id"])


def downgrade() -> None:
    op.drop_table("absence_statistics")
    op.drop_table("poortwachter_milestones")
    op.drop_table("sick_leaves")
