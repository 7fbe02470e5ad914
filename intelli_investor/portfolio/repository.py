"""SQLAlchemy persistence for portfolios and their embedded lots."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, Index, String, Text, create_engine, delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from intelli_investor.portfolio.errors import ConflictError, NotFoundError
from intelli_investor.portfolio.models import InvestmentLot, Portfolio
from intelli_investor.portfolio.valuation import apply_totals

LOGGER = logging.getLogger(__name__)

Base = declarative_base()


class PortfolioRecord(Base):
    """Portfolio row; lots live in the ``investments`` JSON column."""

    __tablename__ = "portfolios"

    id = Column(String(32), primary_key=True)
    owner_id = Column(String(255), nullable=False, index=True)
    name = Column(String(50), nullable=False)
    description = Column(Text)
    investments = Column(JSON, nullable=False, default=list)
    total_cost = Column(Float, nullable=False, default=0.0)
    total_value = Column(Float, nullable=False, default=0.0)
    is_default = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


# At most one default portfolio per owner, enforced by the database.
Index(
    "uq_portfolios_owner_default",
    PortfolioRecord.owner_id,
    unique=True,
    sqlite_where=PortfolioRecord.is_default.is_(True),
    postgresql_where=PortfolioRecord.is_default.is_(True),
)


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored as UTC.
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _to_portfolio(record: PortfolioRecord) -> Portfolio:
    return Portfolio(
        id=record.id,
        owner_id=record.owner_id,
        name=record.name,
        description=record.description,
        investments=[InvestmentLot.from_dict(item) for item in (record.investments or [])],
        is_default=bool(record.is_default),
        total_cost=float(record.total_cost or 0.0),
        total_value=float(record.total_value or 0.0),
        created_at=_aware(record.created_at),
        updated_at=_aware(record.updated_at),
    )


def _copy_to_record(portfolio: Portfolio, record: PortfolioRecord) -> None:
    record.owner_id = portfolio.owner_id
    record.name = portfolio.name
    record.description = portfolio.description
    record.investments = [lot.to_dict() for lot in portfolio.investments]
    record.total_cost = portfolio.total_cost
    record.total_value = portfolio.total_value
    record.is_default = portfolio.is_default
    record.created_at = portfolio.created_at
    record.updated_at = portfolio.updated_at


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    if database_url.startswith("sqlite"):
        kwargs: dict[str, object] = {"connect_args": {"check_same_thread": False}}
        if database_url in {"sqlite://", "sqlite:///:memory:"}:
            kwargs["poolclass"] = StaticPool
        engine = create_engine(database_url, **kwargs)
    else:
        engine = create_engine(database_url, pool_pre_ping=True)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, expire_on_commit=False)


class PortfolioRepository:
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    @classmethod
    def from_url(cls, database_url: str) -> "PortfolioRepository":
        return cls(create_session_factory(database_url))

    def get(self, portfolio_id: str, owner_id: str) -> Portfolio:
        with self._session_factory() as session:
            record = session.scalar(
                select(PortfolioRecord).where(
                    PortfolioRecord.id == portfolio_id,
                    PortfolioRecord.owner_id == owner_id,
                )
            )
            if record is None:
                raise NotFoundError("Portfolio", portfolio_id)
            return _to_portfolio(record)

    def list_for_owner(self, owner_id: str) -> list[Portfolio]:
        with self._session_factory() as session:
            records = session.scalars(
                select(PortfolioRecord)
                .where(PortfolioRecord.owner_id == owner_id)
                .order_by(PortfolioRecord.created_at)
            ).all()
            return [_to_portfolio(record) for record in records]

    def save(self, portfolio: Portfolio) -> Portfolio:
        """Recompute aggregates and persist in one transaction.

        When the portfolio is flagged default, the owner's other default
        portfolios are cleared in the same transaction so there is never a
        committed state with two defaults.
        """
        try:
            with self._session_factory.begin() as session:
                apply_totals(portfolio)
                if portfolio.is_default:
                    session.execute(
                        update(PortfolioRecord)
                        .where(
                            PortfolioRecord.owner_id == portfolio.owner_id,
                            PortfolioRecord.id != portfolio.id,
                            PortfolioRecord.is_default.is_(True),
                        )
                        .values(is_default=False)
                    )
                record = session.get(PortfolioRecord, portfolio.id)
                if record is None:
                    record = PortfolioRecord(id=portfolio.id)
                    session.add(record)
                elif record.owner_id != portfolio.owner_id:
                    raise NotFoundError("Portfolio", portfolio.id)
                _copy_to_record(portfolio, record)
        except IntegrityError as error:
            LOGGER.warning("portfolio commit rejected: id=%s owner=%s", portfolio.id, portfolio.owner_id)
            raise ConflictError("Another default portfolio was saved at the same time. Retry the request.") from error
        LOGGER.info(
            "portfolio committed: id=%s owner=%s lots=%s total_cost=%.2f total_value=%.2f default=%s",
            portfolio.id,
            portfolio.owner_id,
            len(portfolio.investments),
            portfolio.total_cost,
            portfolio.total_value,
            portfolio.is_default,
        )
        return portfolio

    def delete(self, portfolio_id: str, owner_id: str) -> None:
        with self._session_factory.begin() as session:
            result = session.execute(
                delete(PortfolioRecord).where(
                    PortfolioRecord.id == portfolio_id,
                    PortfolioRecord.owner_id == owner_id,
                )
            )
            if not result.rowcount:
                raise NotFoundError("Portfolio", portfolio_id)
        LOGGER.info("portfolio deleted: id=%s owner=%s", portfolio_id, owner_id)
