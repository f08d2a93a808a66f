# backend/portfolio_performance/services/__init__.py
"""
Service layer for the analytics API.

Services:
- Have NO knowledge of HTTP (no HTTPException, no status codes)
- Raise domain-specific exceptions (see exceptions.py)
- Receive their data collaborators through the constructor

Architecture:
    services/
    ├── __init__.py                  # This file
    ├── exceptions.py                # Domain exceptions
    ├── constants.py                 # Calculation conventions
    ├── protocols.py                 # Collaborator interfaces
    ├── repositories.py              # SQLAlchemy collaborator implementations
    └── analytics/                   # Calculators and PerformanceAnalysisEngine

Import from the submodules directly; this package does not re-export them
because config.py depends on services.constants.
"""
