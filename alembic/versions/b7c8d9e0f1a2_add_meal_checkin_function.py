"""add_meal_checkin_function

Revision ID: b7c8d9e0f1a2
Revises: a1b2c3d4e5f6
Create Date: 2025-10-24 00:00:00.000000

"""
from alembic import op


# revision identifiers, used by Alembic.
revision = 'b7c8d9e0f1a2'
down_revision = 'a1b2c3d4e5f6'
branch_labels = None
depends_on = None


def upgrade():
    # Postgres only; SQLite gets the same guarantee from a guarded json_set UPDATE
    if op.get_bind().dialect.name != 'postgresql':
        return

    # The UPDATE re-checks the WHERE clause after waiting on a concurrent
    # writer's row lock, so only one caller per (applicant, meal) gets a row
    op.execute("""
        CREATE OR REPLACE FUNCTION set_meal_checkin_if_absent(
            p_applicant_id integer,
            p_meal text,
            p_entry jsonb
        ) RETURNS boolean
        LANGUAGE plpgsql
        AS $$
        DECLARE
            affected integer;
        BEGIN
            UPDATE applicants
               SET meal_checkins = COALESCE(meal_checkins, '{}'::jsonb)
                                   || jsonb_build_object(p_meal, p_entry)
             WHERE id = p_applicant_id
               AND NOT (COALESCE(meal_checkins, '{}'::jsonb) ? p_meal);
            GET DIAGNOSTICS affected = ROW_COUNT;
            RETURN affected > 0;
        END;
        $$;
    """)


def downgrade():
    if op.get_bind().dialect.name != 'postgresql':
        return

    op.execute("DROP FUNCTION IF EXISTS set_meal_checkin_if_absent(integer, text, jsonb)")
