"""Create FDP portal tables"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'a3f9c2e1d4b7'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # Create fdp_events table
    op.create_table(
        'fdp_events',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('banner_image', sa.Text(), nullable=True),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('host_fee', sa.Numeric(10, 2), nullable=False),
        sa.Column('faculty_fee', sa.Numeric(10, 2), nullable=False),
        sa.Column('max_participants', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(50), nullable=False, server_default='upcoming'),
        sa.Column('joining_link', sa.Text(), nullable=True),
        sa.Column('community_link', sa.Text(), nullable=True),
        sa.Column('whatsapp_group_link', sa.Text(), nullable=True),
        sa.Column('feedback_form_link', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_fdp_events_status'), 'fdp_events', ['status'])

    # Create host_colleges table
    op.create_table(
        'host_colleges',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('fdp_id', sa.String(36), nullable=False),
        sa.Column('college_name', sa.String(255), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('website', sa.String(255), nullable=True),
        sa.Column('contact_person', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(20), nullable=False),
        sa.Column('whatsapp', sa.String(20), nullable=True),
        sa.Column('logo_url', sa.Text(), nullable=True),
        sa.Column('payment_status', sa.String(50), nullable=False, server_default='pending'),
        sa.Column('payment_id', sa.String(255), nullable=True),
        sa.Column('amount_paid', sa.Numeric(10, 2), nullable=True),
        sa.Column('registered_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['fdp_id'], ['fdp_events.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_host_colleges_fdp_id'), 'host_colleges', ['fdp_id'])

    # Create faculty_registrations table
    op.create_table(
        'faculty_registrations',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('fdp_id', sa.String(36), nullable=False),
        sa.Column('host_college_id', sa.String(36), nullable=True),
        sa.Column('registration_type', sa.String(50), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(20), nullable=False),
        sa.Column('whatsapp', sa.String(20), nullable=True),
        sa.Column('designation', sa.String(100), nullable=True),
        sa.Column('department', sa.String(100), nullable=True),
        sa.Column('institution', sa.String(255), nullable=False),
        sa.Column('payment_status', sa.String(50), nullable=False, server_default='pending'),
        sa.Column('payment_id', sa.String(255), nullable=True),
        sa.Column('amount_paid', sa.Numeric(10, 2), nullable=True),
        sa.Column('feedback_submitted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('certificate_generated', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('certificate_url', sa.Text(), nullable=True),
        sa.Column('registered_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['fdp_id'], ['fdp_events.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['host_college_id'], ['host_colleges.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_faculty_registrations_fdp_id'), 'faculty_registrations', ['fdp_id'])
    op.create_index(op.f('ix_faculty_registrations_host_college_id'), 'faculty_registrations', ['host_college_id'])

    # Create payments table
    op.create_table(
        'payments',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('order_id', sa.String(255), nullable=False),
        sa.Column('payment_id', sa.String(255), nullable=True),
        sa.Column('entity_type', sa.String(50), nullable=False),
        sa.Column('entity_id', sa.String(36), nullable=False),
        sa.Column('fdp_id', sa.String(36), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('currency', sa.String(10), nullable=False, server_default='INR'),
        sa.Column('status', sa.String(50), nullable=False, server_default='created'),
        sa.Column('payment_method', sa.String(50), nullable=True),
        sa.Column('payment_gateway', sa.String(50), nullable=False, server_default='cashfree'),
        sa.Column('gateway_response', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['fdp_id'], ['fdp_events.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_payments_order_id'), 'payments', ['order_id'], unique=True)
    op.create_index(op.f('ix_payments_entity_id'), 'payments', ['entity_id'])
    op.create_index(op.f('ix_payments_fdp_id'), 'payments', ['fdp_id'])

    # Create coupons table
    op.create_table(
        'coupons',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('code', sa.String(100), nullable=False),
        sa.Column('fdp_id', sa.String(36), nullable=True),
        sa.Column('discount_type', sa.String(50), nullable=False),
        sa.Column('discount_value', sa.Numeric(10, 2), nullable=False),
        sa.Column('max_uses', sa.Integer(), nullable=True),
        sa.Column('used_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('valid_from', sa.DateTime(), nullable=True),
        sa.Column('valid_until', sa.DateTime(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['fdp_id'], ['fdp_events.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_coupons_code'), 'coupons', ['code'], unique=True)

    # Create certificates table (at most one per faculty registration)
    op.create_table(
        'certificates',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('faculty_id', sa.String(36), nullable=False),
        sa.Column('fdp_id', sa.String(36), nullable=False),
        sa.Column('certificate_id', sa.String(100), nullable=False),
        sa.Column('certificate_url', sa.Text(), nullable=True),
        sa.Column('participant_name', sa.String(255), nullable=False),
        sa.Column('college_name', sa.String(255), nullable=True),
        sa.Column('fdp_title', sa.String(255), nullable=False),
        sa.Column('fdp_dates', sa.String(100), nullable=True),
        sa.Column('organiser_logo', sa.Text(), nullable=True),
        sa.Column('college_logo', sa.Text(), nullable=True),
        sa.Column('signature_image', sa.Text(), nullable=True),
        sa.Column('generated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['faculty_id'], ['faculty_registrations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['fdp_id'], ['fdp_events.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('faculty_id')
    )
    op.create_index(op.f('ix_certificates_certificate_id'), 'certificates', ['certificate_id'], unique=True)
    op.create_index(op.f('ix_certificates_fdp_id'), 'certificates', ['fdp_id'])

    # Create certificate_templates table
    op.create_table(
        'certificate_templates',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('html_template', sa.Text(), nullable=False),
        sa.Column('organiser_logo', sa.Text(), nullable=True),
        sa.Column('signature_image', sa.Text(), nullable=True),
        sa.Column('is_default', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    # Create communication_logs table
    op.create_table(
        'communication_logs',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('fdp_id', sa.String(36), nullable=True),
        sa.Column('recipient_type', sa.String(50), nullable=False),
        sa.Column('recipient_id', sa.String(36), nullable=True),
        sa.Column('channel', sa.String(50), nullable=False),
        sa.Column('message_type', sa.String(100), nullable=True),
        sa.Column('recipient', sa.String(255), nullable=False),
        sa.Column('subject', sa.Text(), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('status', sa.String(50), nullable=False, server_default='pending'),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('sent_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['fdp_id'], ['fdp_events.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_communication_logs_fdp_id'), 'communication_logs', ['fdp_id'])


def downgrade():
    op.drop_table('communication_logs')
    op.drop_table('certificate_templates')
    op.drop_table('certificates')
    op.drop_table('coupons')
    op.drop_table('payments')
    op.drop_table('faculty_registrations')
    op.drop_table('host_colleges')
    op.drop_table('fdp_events')
