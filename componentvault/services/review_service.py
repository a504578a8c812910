"""
리뷰 서비스

리뷰 작성, 조회(집계 포함) 및 도움돼요 투표 관련 비즈니스 로직을 처리합니다.
"""

import logging
import uuid
from typing import Any, Dict, List

from sqlalchemy import and_, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from componentvault.models.component import Component
from componentvault.models.review import Review
from componentvault.models.review_vote import ReviewVote, VoteAction
from componentvault.models.user import User
from componentvault.search.changes import (
    COMPONENTS_INDEX,
    ChangeOperation,
    record_change,
)
from componentvault.services.component_service import parse_component_id
from componentvault.services.counters import increment
from componentvault.utils.exceptions import (
    ComponentNotFoundException,
    NotFoundException,
    ValidationException,
)

logger = logging.getLogger(__name__)


class ReviewService:
    """리뷰 관련 비즈니스 로직을 처리하는 서비스"""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def list_reviews(self, component_id: str) -> Dict[str, Any]:
        """
        컴포넌트 리뷰 목록 (최신순) 및 집계

        Returns:
            {
                "reviews": [...],
                "aggregates": {
                    "total_reviews": int,
                    "average_rating": float,
                    "rating_breakdown": {"5": n, "4": n, "3": n, "2": n, "1": n},
                },
            }
        """
        try:
            key = parse_component_id(component_id)
        except ComponentNotFoundException:
            reviews: List[Review] = []
        else:
            result = await self.db.execute(
                select(Review)
                .where(Review.component_id == key)
                .order_by(Review.created_at.desc(), Review.id)
            )
            reviews = list(result.scalars().all())

        total_reviews = len(reviews)
        average_rating = (
            sum(review.rating for review in reviews) / total_reviews
            if total_reviews
            else 0
        )
        rating_breakdown = {
            str(star): sum(1 for review in reviews if review.rating == star)
            for star in (5, 4, 3, 2, 1)
        }

        return {
            "reviews": [review.to_dict() for review in reviews],
            "aggregates": {
                "total_reviews": total_reviews,
                "average_rating": average_rating,
                "rating_breakdown": rating_breakdown,
            },
        }

    async def create_review(
        self,
        user: User,
        component_id: str,
        rating: int,
        comment: str = "",
    ) -> Review:
        """
        리뷰 생성

        사용자당 컴포넌트당 하나만 작성할 수 있으며, 작성 후 컴포넌트 평균 평점을 다시 계산합니다.

        Raises:
            ValidationException: 별점 범위 오류 또는 중복 리뷰
            ComponentNotFoundException: 컴포넌트가 없는 경우
        """
        if rating < 1 or rating > 5:
            raise ValidationException("Rating must be between 1 and 5", field="rating")

        key = parse_component_id(component_id)
        exists = await self.db.execute(select(Component.id).where(Component.id == key))
        if exists.first() is None:
            raise ComponentNotFoundException(component_id)

        duplicate = await self.db.execute(
            select(Review.id).where(
                and_(Review.component_id == key, Review.user_id == user.id)
            )
        )
        if duplicate.first() is not None:
            raise ValidationException("User has already reviewed this component")

        review = Review(
            component_id=key,
            user_id=user.id,
            user_name=user.display_name or user.username or "Anonymous",
            user_avatar=user.photo_url,
            rating=rating,
            comment=comment or "",
            helpful=0,
            not_helpful=0,
        )
        try:
            async with self.db.begin_nested():
                self.db.add(review)
        except IntegrityError:
            raise ValidationException("User has already reviewed this component")

        await self._refresh_component_rating(key)
        return review

    async def _refresh_component_rating(self, component_id: uuid.UUID) -> None:
        """컴포넌트 rating = 리뷰 평균 (저장소에서 계산)"""
        average = (
            select(func.avg(Review.rating))
            .where(Review.component_id == component_id)
            .scalar_subquery()
        )
        await self.db.execute(
            update(Component)
            .where(Component.id == component_id)
            .values(rating=average)
            .execution_options(synchronize_session=False)
        )
        record_change(self.db, COMPONENTS_INDEX, component_id, ChangeOperation.UPDATE)

    async def vote(self, review_id: str, user_id: str, action: str) -> None:
        """
        리뷰 도움돼요/도움 안 돼요 투표

        Raises:
            ValidationException: 잘못된 액션이거나 이미 투표한 경우
            NotFoundException: 리뷰가 없는 경우
        """
        try:
            vote_action = VoteAction(action)
        except ValueError:
            raise ValidationException("Invalid action", field="action")

        try:
            key = uuid.UUID(str(review_id))
        except ValueError:
            raise NotFoundException(resource="리뷰", resource_id=review_id)

        exists = await self.db.execute(select(Review.id).where(Review.id == key))
        if exists.first() is None:
            raise NotFoundException(resource="리뷰", resource_id=review_id)

        duplicate = await self.db.execute(
            select(ReviewVote.review_id).where(
                and_(ReviewVote.review_id == key, ReviewVote.user_id == user_id)
            )
        )
        if duplicate.first() is not None:
            raise ValidationException("User has already voted on this review")

        try:
            async with self.db.begin_nested():
                self.db.add(
                    ReviewVote(review_id=key, user_id=user_id, action=vote_action.value)
                )
        except IntegrityError:
            raise ValidationException("User has already voted on this review")

        await increment(self.db, Review, key, vote_action.value)
