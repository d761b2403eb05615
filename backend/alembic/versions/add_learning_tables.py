"""add learning topics, courses, course modules and lessons

Revision ID: add_learning_tables
Revises: create_users_and_drafts
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'add_learning_tables'
down_revision = 'create_users_and_drafts'
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        'learning_topics',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('context_area', sa.String(), nullable=True),
        sa.Column('difficulty', sa.String(), nullable=False, server_default='basic'),
        sa.Column('status', sa.String(), nullable=False, server_default='idea'),
        sa.Column('priority', sa.String(), nullable=False, server_default='medium'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_learning_topics_id'), 'learning_topics', ['id'], unique=False)
    op.create_index(op.f('ix_learning_topics_user_id'), 'learning_topics', ['user_id'], unique=False)

    op.create_table(
        'courses',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('learning_topic_id', sa.Integer(), sa.ForeignKey('learning_topics.id'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('short_summary', sa.Text(), nullable=False),
        sa.Column('difficulty', sa.String(), nullable=False),
        sa.Column('estimated_total_minutes', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(), nullable=False, server_default='active'),
        sa.Column('source_prompt', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_courses_id'), 'courses', ['id'], unique=False)
    op.create_index(op.f('ix_courses_learning_topic_id'), 'courses', ['learning_topic_id'], unique=False)

    op.create_table(
        'course_modules',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('course_id', sa.Integer(), sa.ForeignKey('courses.id'), nullable=False),
        sa.Column('order_index', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('summary', sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_course_modules_id'), 'course_modules', ['id'], unique=False)
    op.create_index(op.f('ix_course_modules_course_id'), 'course_modules', ['course_id'], unique=False)

    op.create_table(
        'course_lessons',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('module_id', sa.Integer(), sa.ForeignKey('course_modules.id'), nullable=False),
        sa.Column('order_index', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('objective', sa.Text(), nullable=False),
        sa.Column('key_points', sa.JSON(), nullable=False),
        sa.Column('estimated_minutes', sa.Integer(), nullable=False),
        sa.Column('practice_task', sa.Text(), nullable=False),
        sa.Column('quiz_question', sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_course_lessons_id'), 'course_lessons', ['id'], unique=False)
    op.create_index(op.f('ix_course_lessons_module_id'), 'course_lessons', ['module_id'], unique=False)

def downgrade():
    op.drop_index(op.f('ix_course_lessons_module_id'), table_name='course_lessons')
    op.drop_index(op.f('ix_course_lessons_id'), table_name='course_lessons')
    op.drop_table('course_lessons')
    op.drop_index(op.f('ix_course_modules_course_id'), table_name='course_modules')
    op.drop_index(op.f('ix_course_modules_id'), table_name='course_modules')
    op.drop_table('course_modules')
    op.drop_index(op.f('ix_courses_learning_topic_id'), table_name='courses')
    op.drop_index(op.f('ix_courses_id'), table_name='courses')
    op.drop_table('courses')
    op.drop_index(op.f('ix_learning_topics_user_id'), table_name='learning_topics')
    op.drop_index(op.f('ix_learning_topics_id'), table_name='learning_topics')
    op.drop_table('learning_topics')
