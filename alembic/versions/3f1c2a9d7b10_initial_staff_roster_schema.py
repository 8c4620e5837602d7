"""initial staff roster schema

Revision ID: 3f1c2a9d7b10
Revises: 
Create Date: 2026-10-19 11:40:02.118344

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('first_name', sa.String(), nullable=True),
        sa.Column('last_name', sa.String(), nullable=True),
        sa.Column('role_position', sa.String(), nullable=True),
        sa.Column('mav_id', sa.BigInteger(), nullable=True),
        sa.Column('w2w_employee_id', sa.String(), nullable=True),
        sa.Column('teams_id', sa.String(), nullable=True),
        sa.Column('status', sa.String(), nullable=True),
        sa.Column('phone_number', sa.String(), nullable=True),
        sa.Column('student_email', sa.String(), nullable=True),
        sa.Column('work_email', sa.String(), nullable=True),
        sa.Column('shirt_size', sa.String(), nullable=True),
        sa.Column('date_hired', sa.Date(), nullable=True),
        sa.Column('graduation_date', sa.Date(), nullable=True),
        sa.Column('birthday', sa.Date(), nullable=True),
        sa.Column('most_recent_raise_granted', sa.Date(), nullable=True),
        sa.Column('hourly_pay_rate', sa.Float(), nullable=True),
        sa.Column('dietary_restrictions', sa.Text(), nullable=True),
        sa.Column('favorite_plant', sa.String(), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('major', sa.String(), nullable=True),
        sa.Column('last_edited_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_by', sa.String(), nullable=True),
        sa.Column('has_a_second_job', sa.Boolean(), nullable=True),
        sa.Column('has_ssn', sa.Boolean(), nullable=True),
        sa.Column('key_request', sa.Boolean(), nullable=True),
        sa.Column('merits', sa.JSON(), nullable=False),
        sa.Column('demerits', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    # unique but nullable: several users may have no mavId
    op.create_index('ix_users_mav_id', 'users', ['mav_id'], unique=True)

    op.create_table(
        'evaluations',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('user_id', sa.String(length=32), nullable=False),
        sa.Column('year', sa.Integer(), nullable=True),
        sa.Column('evaluation_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('cycle_label', sa.String(), nullable=True),
        sa.Column('period_start', sa.DateTime(timezone=True), nullable=True),
        sa.Column('period_end', sa.DateTime(timezone=True), nullable=True),
        sa.Column('evaluator_name', sa.String(), nullable=False),
        sa.Column('evaluator_email', sa.String(), nullable=False),
        sa.Column('evaluator_id', sa.String(), nullable=True),
        sa.Column('items', sa.JSON(), nullable=False),
        sa.Column('employee_comments', sa.Text(), nullable=True),
        sa.Column('evaluator_comments', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_evaluations_user_id', 'evaluations', ['user_id'])

    op.create_table(
        'metrics',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('metric_type', sa.String(), nullable=False),
        sa.Column('comment', sa.Text(), nullable=False),
        sa.Column('added_by', sa.String(), nullable=False),
        sa.Column('user_id', sa.String(length=32), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_metrics_user_id', 'metrics', ['user_id'])


def downgrade() -> None:
    op.drop_index('ix_metrics_user_id', table_name='metrics')
    op.drop_table('metrics')
    op.drop_index('ix_evaluations_user_id', table_name='evaluations')
    op.drop_table('evaluations')
    op.drop_index('ix_users_mav_id', table_name='users')
    op.drop_table('users')
