"""create_worklink_schema

Revision ID: 3f1a9c2e7b10
Revises:
Create Date: 2026-10-19 09:12:44.118203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1a9c2e7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Principals
    op.create_table(
        'workers',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('skills', sa.JSON(), nullable=True),
        sa.Column('location', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_workers_id', 'workers', ['id'])
    op.create_index('ix_workers_email', 'workers', ['email'], unique=True)

    for table in ('startups', 'manufacturers'):
        op.create_table(
            table,
            sa.Column('id', sa.UUID(), nullable=False),
            sa.Column('company_name', sa.String(length=255), nullable=False),
            sa.Column('company_email', sa.String(length=255), nullable=False),
            sa.Column('work_sector', sa.String(length=100), nullable=False),
            sa.Column('location', sa.JSON(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index(f'ix_{table}_id', table, ['id'])
        op.create_index(f'ix_{table}_company_email', table, ['company_email'], unique=True)
        op.create_index(f'ix_{table}_work_sector', table, ['work_sector'])

    # Targets
    op.create_table(
        'gigs',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('skills_required', sa.JSON(), nullable=False),
        sa.Column('location', sa.JSON(), nullable=False),
        sa.Column('salary', sa.Float(), nullable=False),
        sa.Column('duration', sa.String(length=100), nullable=False),
        sa.Column('startup_id', sa.UUID(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['startup_id'], ['startups.id']),
    )
    op.create_index('ix_gigs_id', 'gigs', ['id'])
    op.create_index('ix_gigs_title', 'gigs', ['title'])
    op.create_index('ix_gigs_salary', 'gigs', ['salary'])
    op.create_index('ix_gigs_startup_id', 'gigs', ['startup_id'])
    op.create_index('ix_gigs_created_at', 'gigs', ['created_at'])

    op.create_table(
        'machines',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('type', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('location', sa.JSON(), nullable=False),
        sa.Column('available', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('manufacturer_id', sa.UUID(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['manufacturer_id'], ['manufacturers.id']),
    )
    op.create_index('ix_machines_id', 'machines', ['id'])
    op.create_index('ix_machines_type', 'machines', ['type'])
    op.create_index('ix_machines_available', 'machines', ['available'])
    op.create_index('ix_machines_manufacturer_id', 'machines', ['manufacturer_id'])
    op.create_index('ix_machines_created_at', 'machines', ['created_at'])

    # Application ledgers
    op.create_table(
        'gig_applications',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('gig_id', sa.UUID(), nullable=False),
        sa.Column('worker_id', sa.UUID(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('applied_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['gig_id'], ['gigs.id']),
        sa.ForeignKeyConstraint(['worker_id'], ['workers.id']),
        sa.UniqueConstraint('gig_id', 'worker_id', name='uq_gig_applications_gig_worker'),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name='check_gig_application_status'
        )
    )
    op.create_index('ix_gig_applications_id', 'gig_applications', ['id'])
    op.create_index('ix_gig_applications_gig_id', 'gig_applications', ['gig_id'])
    op.create_index('ix_gig_applications_worker_id', 'gig_applications', ['worker_id'])
    op.create_index('ix_gig_applications_status', 'gig_applications', ['status'])
    op.create_index('ix_gig_applications_applied_at', 'gig_applications', ['applied_at'])

    op.create_table(
        'machine_applications',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('machine_id', sa.UUID(), nullable=False),
        sa.Column('applicant_id', sa.UUID(), nullable=False),
        sa.Column('applicant_type', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('applied_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['machine_id'], ['machines.id']),
        sa.UniqueConstraint(
            'machine_id', 'applicant_id', 'applicant_type',
            name='uq_machine_applications_machine_applicant'
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name='check_machine_application_status'
        ),
        sa.CheckConstraint(
            "applicant_type IN ('worker', 'startup')",
            name='check_machine_application_applicant_type'
        )
    )
    op.create_index('ix_machine_applications_id', 'machine_applications', ['id'])
    op.create_index('ix_machine_applications_machine_id', 'machine_applications', ['machine_id'])
    op.create_index('ix_machine_applications_status', 'machine_applications', ['status'])
    op.create_index('ix_machine_applications_applied_at', 'machine_applications', ['applied_at'])
    op.create_index(
        'ix_machine_applications_applicant',
        'machine_applications',
        ['applicant_id', 'applicant_type']
    )


def downgrade() -> None:
    """Downgrade schema."""
    # Ledgers reference targets, targets reference principals
    op.drop_index('ix_machine_applications_applicant', 'machine_applications')
    op.drop_index('ix_machine_applications_applied_at', 'machine_applications')
    op.drop_index('ix_machine_applications_status', 'machine_applications')
    op.drop_index('ix_machine_applications_machine_id', 'machine_applications')
    op.drop_index('ix_machine_applications_id', 'machine_applications')
    op.drop_table('machine_applications')

    op.drop_index('ix_gig_applications_applied_at', 'gig_applications')
    op.drop_index('ix_gig_applications_status', 'gig_applications')
    op.drop_index('ix_gig_applications_worker_id', 'gig_applications')
    op.drop_index('ix_gig_applications_gig_id', 'gig_applications')
    op.drop_index('ix_gig_applications_id', 'gig_applications')
    op.drop_table('gig_applications')

    op.drop_index('ix_machines_created_at', 'machines')
    op.drop_index('ix_machines_manufacturer_id', 'machines')
    op.drop_index('ix_machines_available', 'machines')
    op.drop_index('ix_machines_type', 'machines')
    op.drop_index('ix_machines_id', 'machines')
    op.drop_table('machines')

    op.drop_index('ix_gigs_created_at', 'gigs')
    op.drop_index('ix_gigs_startup_id', 'gigs')
    op.drop_index('ix_gigs_salary', 'gigs')
    op.drop_index('ix_gigs_title', 'gigs')
    op.drop_index('ix_gigs_id', 'gigs')
    op.drop_table('gigs')

    for table in ('manufacturers', 'startups'):
        op.drop_index(f'ix_{table}_work_sector', table)
        op.drop_index(f'ix_{table}_company_email', table)
        op.drop_index(f'ix_{table}_id', table)
        op.drop_table(table)

    op.drop_index('ix_workers_email', 'workers')
    op.drop_index('ix_workers_id', 'workers')
    op.drop_table('workers')
