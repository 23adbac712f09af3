"""Sample data generators for demos and tests."""

from coop_reports.generators.portfolio import PaymentBehavior, PortfolioGenerator

__all__ = ["PaymentBehavior", "PortfolioGenerator"]
