"""Downtime window repository implementation using SQLAlchemy.

This module implements the DowntimeWindowRepositoryInterface on top of an
async SQLAlchemy session (aiosqlite or asyncpg).
"""

from datetime import datetime

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities.downtime_window import AffectedClusterMatcher, DowntimeWindow
from src.domain.exceptions import (
    ExternalIdConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from src.domain.repositories.downtime_window_repository import (
    DowntimeWindowRepositoryInterface,
)
from src.infrastructure.database.models import DowntimeWindowModel


class DowntimeWindowRepository(DowntimeWindowRepositoryInterface):
    """SQLAlchemy implementation of DowntimeWindowRepositoryInterface.

    This repository handles mapping between domain DowntimeWindow entities
    and DowntimeWindowModel SQLAlchemy models. It never commits: the session
    owner decides the transaction boundary.
    """

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session
        """
        self._session = session

    async def get_by_id(self, window_id: str) -> DowntimeWindow | None:
        """Get downtime window by ID.

        Args:
            window_id: Window identifier

        Returns:
            DowntimeWindow entity if found, None otherwise
        """
        model = await self._session.get(DowntimeWindowModel, window_id)
        return self._to_entity(model) if model else None

    async def get_by_external_id(self, external_id: str) -> DowntimeWindow | None:
        """Get downtime window by external ID.

        Args:
            external_id: External reference; empty values never match

        Returns:
            DowntimeWindow entity if found, None otherwise
        """
        if not external_id:
            return None

        stmt = select(DowntimeWindowModel).where(
            DowntimeWindowModel.external_id == external_id
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        return self._to_entity(model) if model else None

    async def add(self, window: DowntimeWindow) -> DowntimeWindow:
        """Insert a new downtime window.

        Args:
            window: DowntimeWindow entity with an assigned ID

        Returns:
            Stored DowntimeWindow entity

        Raises:
            ValidationError: If a window with the same ID already exists
            ExternalIdConflictError: If the external ID is already stored
        """
        existing = await self._session.get(DowntimeWindowModel, window.id)
        if existing:
            raise ValidationError(f"downtime window '{window.id}' already exists")

        model = self._to_model(window)
        self._session.add(model)
        await self._flush(window)
        await self._session.refresh(model)

        return self._to_entity(model)

    async def replace(self, window: DowntimeWindow) -> DowntimeWindow:
        """Replace all fields of an existing downtime window.

        Args:
            window: DowntimeWindow entity with updated fields

        Returns:
            Updated DowntimeWindow entity

        Raises:
            NotFoundError: If the window does not exist
            ExternalIdConflictError: If the external ID is used by another window
        """
        model = await self._session.get(DowntimeWindowModel, window.id)
        if not model:
            raise NotFoundError(f"downtime window '{window.id}' not found")

        model.start_time = window.start_time
        model.end_time = window.end_time
        model.title = window.title
        model.description = window.description
        model.external_id = window.external_id or None
        model.external_link = window.external_link
        model.affects = [matcher.to_dict() for matcher in window.affects]

        await self._flush(window)
        await self._session.refresh(model)

        return self._to_entity(model)

    async def list_overlapping(
        self, from_: datetime, to: datetime
    ) -> list[DowntimeWindow]:
        """List downtime windows overlapping [from_, to).

        Args:
            from_: Interval start (inclusive)
            to: Interval end (exclusive)

        Returns:
            List of DowntimeWindow entities ordered by start time, then ID
        """
        stmt = (
            select(DowntimeWindowModel)
            .where(
                or_(
                    DowntimeWindowModel.end_time.is_(None),
                    DowntimeWindowModel.end_time > from_,
                ),
                DowntimeWindowModel.start_time < to,
            )
            .order_by(DowntimeWindowModel.start_time, DowntimeWindowModel.id)
        )
        result = await self._session.execute(stmt)
        models = result.scalars().all()

        return [self._to_entity(model) for model in models]

    async def _flush(self, window: DowntimeWindow) -> None:
        """Flush pending changes, mapping unique violations to conflicts."""
        try:
            await self._session.flush()
        except IntegrityError as e:
            raise ExternalIdConflictError(
                f"external ID '{window.external_id}' is already used by another "
                "downtime window"
            ) from e

    @staticmethod
    def _to_entity(model: DowntimeWindowModel) -> DowntimeWindow:
        """Convert SQLAlchemy model to domain entity.

        Args:
            model: DowntimeWindowModel instance

        Returns:
            DowntimeWindow domain entity

        Raises:
            InternalError: If the stored matcher list cannot be decoded
        """
        try:
            affects = [AffectedClusterMatcher(dict(m)) for m in model.affects or []]
        except (TypeError, ValueError) as e:
            raise InternalError(
                f"stored matchers of downtime window '{model.id}' are corrupt"
            ) from e

        return DowntimeWindow(
            id=model.id,
            start_time=model.start_time,
            end_time=model.end_time,
            title=model.title,
            description=model.description,
            external_id=model.external_id or "",
            external_link=model.external_link,
            affects=affects,
        )

    @staticmethod
    def _to_model(window: DowntimeWindow) -> DowntimeWindowModel:
        """Convert domain entity to SQLAlchemy model.

        Args:
            window: DowntimeWindow domain entity

        Returns:
            DowntimeWindowModel instance
        """
        return DowntimeWindowModel(
            id=window.id,
            start_time=window.start_time,
            end_time=window.end_time,
            title=window.title,
            description=window.description,
            external_id=window.external_id or None,
            external_link=window.external_link,
            affects=[matcher.to_dict() for matcher in window.affects],
        )
