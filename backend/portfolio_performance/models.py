# backend/portfolio_performance/models.py
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import String, Date, DateTime, ForeignKey, Numeric, UniqueConstraint, Boolean, Float, Integer, Index
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class PortfolioValuation(Base):
    """
    Daily total value of the portfolio.

    One row per date. Written by the valuation process (outside this
    service); read by the analytics engine to build portfolio returns.
    """
    __tablename__ = "portfolio_valuations"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    date: Mapped[date] = mapped_column(Date, unique=True, index=True)
    total_value: Mapped[Decimal] = mapped_column(Numeric(18, 8))


class BenchmarkIndex(Base):
    """
    A market index the portfolio can be compared with (e.g. MERVAL, ^SPX).

    Inactive benchmarks are kept for history but skipped by the periodic
    metrics update.
    """
    __tablename__ = "benchmark_indices"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    symbol: Mapped[str] = mapped_column(String(20), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(100))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default="1")

    prices: Mapped[list["BenchmarkPrice"]] = relationship(back_populates="benchmark")


class BenchmarkPrice(Base):
    """Daily closing price of a benchmark index."""
    __tablename__ = "benchmark_prices"
    __table_args__ = (
        UniqueConstraint('benchmark_id', 'date', name='uq_benchmark_date'),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    benchmark_id: Mapped[int] = mapped_column(ForeignKey("benchmark_indices.id"), index=True)
    date: Mapped[date] = mapped_column(Date, index=True)
    close_price: Mapped[Decimal] = mapped_column(Numeric(18, 8))

    benchmark: Mapped["BenchmarkIndex"] = relationship(back_populates="prices")


class RiskFreeRateRecord(Base):
    """
    Risk-free rate observation for a country (rates in percent).

    The rate in force on a date is the latest row with recorded_date on or
    before it.
    """
    __tablename__ = "risk_free_rates"
    __table_args__ = (
        UniqueConstraint('country', 'recorded_date', name='uq_country_recorded_date'),
        Index('ix_risk_free_rates_country_date', 'country', 'recorded_date'),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    country: Mapped[str] = mapped_column(String(3))
    recorded_date: Mapped[date] = mapped_column(Date)
    annual_rate: Mapped[Decimal] = mapped_column(Numeric(10, 4))
    daily_rate: Mapped[Decimal] = mapped_column(Numeric(10, 6))


class PerformanceMetricsRecord(Base):
    """
    Persisted analytics result.

    Keyed by (calculation_date, benchmark_id). benchmark_id is NULL for
    standalone portfolio metrics; NULLs never collide in a unique
    constraint, so the repository enforces the key on upsert.
    """
    __tablename__ = "performance_metrics"
    __table_args__ = (
        UniqueConstraint('calculation_date', 'benchmark_id', name='uq_metrics_date_benchmark'),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    calculation_date: Mapped[date] = mapped_column(Date, index=True)
    benchmark_id: Mapped[int | None] = mapped_column(ForeignKey("benchmark_indices.id"), nullable=True)
    period_days: Mapped[int] = mapped_column(Integer)

    # Returns: portfolio/benchmark as total-return fractions, excess in %
    portfolio_return: Mapped[float] = mapped_column(Float)
    benchmark_return: Mapped[float | None] = mapped_column(Float, nullable=True)
    excess_return: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Risk (percent)
    portfolio_volatility: Mapped[float] = mapped_column(Float)
    benchmark_volatility: Mapped[float | None] = mapped_column(Float, nullable=True)
    max_drawdown: Mapped[float] = mapped_column(Float)
    tracking_error: Mapped[float] = mapped_column(Float)
    var_95: Mapped[float] = mapped_column(Float)
    var_99: Mapped[float] = mapped_column(Float)

    # Ratios
    sharpe_ratio: Mapped[float] = mapped_column(Float)
    sortino_ratio: Mapped[float] = mapped_column(Float)
    calmar_ratio: Mapped[float] = mapped_column(Float)
    information_ratio: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Benchmark regression
    alpha: Mapped[float | None] = mapped_column(Float, nullable=True)
    beta: Mapped[float | None] = mapped_column(Float, nullable=True)
    r_squared: Mapped[float | None] = mapped_column(Float, nullable=True)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
