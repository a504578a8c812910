"""Create ComponentVault tables

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('NOW()')),
    ]


def upgrade() -> None:
    """마이그레이션 적용 (업그레이드)"""
    # Users 테이블 (ID = 외부 ID 공급자 UID)
    op.create_table(
        'users',
        sa.Column('id', sa.String(128), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('display_name', sa.String(100), nullable=True),
        sa.Column('username', sa.String(50), nullable=True),
        sa.Column('photo_url', sa.String(500), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('website', sa.String(255), nullable=True),
        sa.Column('location', sa.String(100), nullable=True),
        sa.Column('github', sa.String(100), nullable=True),
        sa.Column('twitter', sa.String(100), nullable=True),
        sa.Column('is_verified', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('badges', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('followers', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('following', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_components', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_likes', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_users'),
        sa.CheckConstraint('followers >= 0', name='ck_users_check_followers_non_negative'),
        sa.CheckConstraint('following >= 0', name='ck_users_check_following_non_negative'),
        sa.CheckConstraint('total_components >= 0', name='ck_users_check_total_components_non_negative'),
    )
    op.create_index('ix_users_email', 'users', ['email'])
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    # Components 테이블
    op.create_table(
        'components',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('code', sa.Text(), nullable=False),
        sa.Column('preview_image', sa.String(500), nullable=False),
        sa.Column('thumbnail_image', sa.String(500), nullable=True),
        sa.Column('category', sa.String(50), nullable=True),
        sa.Column('framework', sa.String(50), nullable=True),
        sa.Column('language', sa.String(50), nullable=True),
        sa.Column('styling', sa.String(50), nullable=True),
        sa.Column('source_type', sa.String(20), nullable=False, server_default='upload'),
        sa.Column('source_url', sa.String(500), nullable=True),
        sa.Column('tags', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('dependencies', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('version', sa.String(20), nullable=False, server_default='1.0.0'),
        sa.Column('accessibility_score', sa.Integer(), nullable=True),
        sa.Column('author_id', sa.String(128), nullable=False),
        sa.Column('author_name', sa.String(100), nullable=True),
        sa.Column('author_avatar', sa.String(500), nullable=True),
        sa.Column('is_public', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('is_featured', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('views', sa.Integer(), nullable=False, server_default='0'),
        # 레거시 문서는 downloads 없이 copies만 가질 수 있음
        sa.Column('downloads', sa.Integer(), nullable=True),
        sa.Column('copies', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('likes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('rating', sa.Float(), nullable=True),
        sa.Column('stats', postgresql.JSONB(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_components'),
        sa.ForeignKeyConstraint(['author_id'], ['users.id'], name='fk_components_author_id_users', ondelete='CASCADE'),
        sa.CheckConstraint('views >= 0', name='ck_components_check_views_non_negative'),
        sa.CheckConstraint('copies >= 0', name='ck_components_check_copies_non_negative'),
        sa.CheckConstraint('likes >= 0', name='ck_components_check_likes_non_negative'),
    )
    op.create_index('ix_components_category', 'components', ['category'])
    op.create_index('ix_components_framework', 'components', ['framework'])
    op.create_index('ix_components_author_id', 'components', ['author_id'])
    op.create_index('ix_components_is_public', 'components', ['is_public'])
    op.create_index('ix_components_likes', 'components', ['likes'])

    # Collections 테이블
    op.create_table(
        'collections',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('cover_image', sa.String(500), nullable=True),
        sa.Column('user_id', sa.String(128), nullable=False),
        sa.Column('user_name', sa.String(100), nullable=True),
        sa.Column('is_public', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('likes', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_collections'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_collections_user_id_users', ondelete='CASCADE'),
        sa.CheckConstraint('likes >= 0', name='ck_collections_check_collection_likes_non_negative'),
    )
    op.create_index('ix_collections_user_id', 'collections', ['user_id'])
    op.create_index('ix_collections_is_public', 'collections', ['is_public'])

    # 컬렉션 멤버십 (집합 의미, 추가 순서는 added_at)
    op.create_table(
        'collection_components',
        sa.Column('collection_id', sa.Uuid(), nullable=False),
        sa.Column('component_id', sa.Uuid(), nullable=False),
        sa.Column('added_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.PrimaryKeyConstraint('collection_id', 'component_id', name='pk_collection_components'),
        sa.ForeignKeyConstraint(['collection_id'], ['collections.id'], name='fk_collection_components_collection_id_collections', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['component_id'], ['components.id'], name='fk_collection_components_component_id_components', ondelete='CASCADE'),
    )
    op.create_index('ix_collection_components_component_id', 'collection_components', ['component_id'])

    # Favorites 테이블
    op.create_table(
        'favorites',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.String(128), nullable=False),
        sa.Column('component_id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.PrimaryKeyConstraint('id', name='pk_favorites'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_favorites_user_id_users', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['component_id'], ['components.id'], name='fk_favorites_component_id_components', ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'component_id', name='uq_user_component_favorite'),
        comment='사용자 즐겨찾기 (컴포넌트)',
    )
    op.create_index('ix_favorites_component_id', 'favorites', ['component_id'])

    # Follows 테이블
    op.create_table(
        'follows',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('follower_id', sa.String(128), nullable=False),
        sa.Column('following_id', sa.String(128), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.PrimaryKeyConstraint('id', name='pk_follows'),
        sa.ForeignKeyConstraint(['follower_id'], ['users.id'], name='fk_follows_follower_id_users', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['following_id'], ['users.id'], name='fk_follows_following_id_users', ondelete='CASCADE'),
        sa.UniqueConstraint('follower_id', 'following_id', name='uq_follower_following'),
        sa.CheckConstraint('follower_id != following_id', name='ck_follows_check_no_self_follow'),
    )
    op.create_index('ix_follows_following_id', 'follows', ['following_id'])

    # Reviews 테이블
    op.create_table(
        'reviews',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('component_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.String(128), nullable=False),
        sa.Column('user_name', sa.String(100), nullable=False),
        sa.Column('user_avatar', sa.String(500), nullable=True),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('comment', sa.Text(), nullable=False, server_default=''),
        sa.Column('helpful', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('not_helpful', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_reviews'),
        sa.ForeignKeyConstraint(['component_id'], ['components.id'], name='fk_reviews_component_id_components', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_reviews_user_id_users', ondelete='CASCADE'),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='ck_reviews_check_rating_range'),
        sa.CheckConstraint('helpful >= 0', name='ck_reviews_check_helpful_non_negative'),
        sa.CheckConstraint('not_helpful >= 0', name='ck_reviews_check_not_helpful_non_negative'),
        sa.UniqueConstraint('component_id', 'user_id', name='uq_review_component_user'),
    )
    op.create_index('ix_reviews_component_id', 'reviews', ['component_id'])
    op.create_index('ix_reviews_user_id', 'reviews', ['user_id'])

    # 리뷰 투표 (사용자당 리뷰 1표)
    op.create_table(
        'review_votes',
        sa.Column('review_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.String(128), nullable=False),
        sa.Column('action', sa.String(20), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('review_id', 'user_id', name='pk_review_votes'),
        sa.ForeignKeyConstraint(['review_id'], ['reviews.id'], name='fk_review_votes_review_id_reviews', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_review_votes_user_id_users', ondelete='CASCADE'),
        sa.CheckConstraint("action IN ('helpful', 'not_helpful')", name='ck_review_votes_check_vote_action'),
    )
    op.create_index('ix_review_votes_user_id', 'review_votes', ['user_id'])

    # Comments 테이블
    op.create_table(
        'comments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('component_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.String(128), nullable=False),
        sa.Column('user_name', sa.String(100), nullable=False),
        sa.Column('user_avatar', sa.String(500), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('likes', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_comments'),
        sa.ForeignKeyConstraint(['component_id'], ['components.id'], name='fk_comments_component_id_components', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_comments_user_id_users', ondelete='CASCADE'),
    )
    op.create_index('ix_comments_component_id', 'comments', ['component_id'])

    # 활동 로그
    op.create_table(
        'activities',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.String(128), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('target_id', sa.String(128), nullable=True),
        sa.Column('target_type', sa.String(20), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.PrimaryKeyConstraint('id', name='pk_activities'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_activities_user_id_users', ondelete='CASCADE'),
    )
    op.create_index('idx_activities_user_created', 'activities', ['user_id', 'created_at'])


def downgrade() -> None:
    """마이그레이션 되돌리기 (다운그레이드)"""
    op.drop_index('idx_activities_user_created', table_name='activities')
    op.drop_table('activities')
    op.drop_index('ix_comments_component_id', table_name='comments')
    op.drop_table('comments')
    op.drop_index('ix_review_votes_user_id', table_name='review_votes')
    op.drop_table('review_votes')
    op.drop_index('ix_reviews_user_id', table_name='reviews')
    op.drop_index('ix_reviews_component_id', table_name='reviews')
    op.drop_table('reviews')
    op.drop_index('ix_follows_following_id', table_name='follows')
    op.drop_table('follows')
    op.drop_index('ix_favorites_component_id', table_name='favorites')
    op.drop_table('favorites')
    op.drop_index('ix_collection_components_component_id', table_name='collection_components')
    op.drop_table('collection_components')
    op.drop_index('ix_collections_is_public', table_name='collections')
    op.drop_index('ix_collections_user_id', table_name='collections')
    op.drop_table('collections')
    op.drop_index('ix_components_likes', table_name='components')
    op.drop_index('ix_components_is_public', table_name='components')
    op.drop_index('ix_components_author_id', table_name='components')
    op.drop_index('ix_components_framework', table_name='components')
    op.drop_index('ix_components_category', table_name='components')
    op.drop_table('components')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
