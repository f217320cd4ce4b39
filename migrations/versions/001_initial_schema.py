"""Initial schema: users, rides, booking requests and bookings.

Revision ID: 001
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ── users ─────────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("fullname", sa.String(120), nullable=False),
        sa.Column("email", sa.String(255), unique=True, nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(20), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )

    # ── rides ─────────────────────────────────────────────────────────
    op.create_table(
        "rides",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False
        ),
        sa.Column("type", sa.Enum("car", "bike", name="ridetype"), nullable=False),
        sa.Column("from", sa.String(255), nullable=False),
        sa.Column("to", sa.String(255), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("time", sa.String(5), nullable=False),
        sa.Column("seats", sa.Integer, nullable=False),
        sa.Column("price", sa.Float, nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("driver_name", sa.String(120), nullable=False),
        sa.Column("driver_phone", sa.String(20), nullable=False),
        sa.Column("driver_license", sa.String(64), nullable=False),
        sa.Column("vehicle_type", sa.String(64), nullable=False),
        sa.Column("vehicle_model", sa.String(120), nullable=False),
        sa.Column("vehicle_number", sa.String(32), nullable=False),
        sa.Column("vehicle_color", sa.String(32), nullable=False),
        sa.Column(
            "status",
            sa.Enum("active", "completed", "cancelled", name="ridestatus"),
            default="active",
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint("seats >= 0", name="ck_rides_seats_non_negative"),
    )
    op.create_index("idx_rides_status_date", "rides", ["status", "date"])
    op.create_index("idx_rides_user", "rides", ["user_id"])

    # ── booking_requests ──────────────────────────────────────────────
    op.create_table(
        "booking_requests",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "ride_id", sa.Integer, sa.ForeignKey("rides.id"), nullable=False
        ),
        sa.Column(
            "passenger_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False
        ),
        sa.Column("passenger_name", sa.String(120), nullable=False),
        sa.Column("passenger_phone", sa.String(20), nullable=False),
        sa.Column("passenger_email", sa.String(255), nullable=False),
        sa.Column("seats_booked", sa.Integer, default=1, nullable=False),
        sa.Column(
            "status",
            sa.Enum("pending", "accepted", "rejected", name="bookingrequeststatus"),
            default="pending",
            nullable=False,
        ),
        sa.Column("driver_message", sa.Text, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "idx_booking_requests_ride_status", "booking_requests", ["ride_id", "status"]
    )
    op.create_index(
        "idx_booking_requests_passenger", "booking_requests", ["passenger_id"]
    )

    # ── bookings ──────────────────────────────────────────────────────
    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "ride_id", sa.Integer, sa.ForeignKey("rides.id"), nullable=False
        ),
        sa.Column(
            "user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False
        ),
        sa.Column(
            "booking_request_id",
            sa.Integer,
            sa.ForeignKey("booking_requests.id"),
            unique=True,
            nullable=False,
        ),
        sa.Column("passenger_name", sa.String(120), nullable=False),
        sa.Column("passenger_phone", sa.String(20), nullable=False),
        sa.Column("passenger_email", sa.String(255), nullable=False),
        sa.Column("seats_booked", sa.Integer, nullable=False),
        sa.Column(
            "status",
            sa.Enum("pending", "confirmed", "cancelled", name="bookingstatus"),
            default="confirmed",
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index("idx_bookings_user", "bookings", ["user_id"])
    op.create_index("idx_bookings_ride", "bookings", ["ride_id"])


def downgrade() -> None:
    op.drop_table("bookings")
    op.drop_table("booking_requests")
    op.drop_table("rides")
    op.drop_table("users")
    op.execute("DROP TYPE IF EXISTS bookingstatus")
    op.execute("DROP TYPE IF EXISTS bookingrequeststatus")
    op.execute("DROP TYPE IF EXISTS ridestatus")
    op.execute("DROP TYPE IF EXISTS ridetype")
