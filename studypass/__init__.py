"""
StudyPass — Pass Points & Tiers for a Study-Partner Network
============================================================
Awards Pass Points for study sessions, reviews and milestones, places
every member in a Tier (Beginner → Master) and a Level, and exposes the
result to the web front-end over a small REST API.

Package layout::

    studypass/
    ├── __main__.py        # CLI: tiers, progress, serve
    ├── config.py          # YAML → typed Python config
    ├── constants.py       # Tier display styles, level size
    ├── engine/
    │   ├── tiers.py       # Tier table + tier lookup (pure)
    │   ├── rewards.py     # Award reasons, amounts, award evaluation (pure)
    │   └── progress.py    # Levels + progress for UI display (pure)
    ├── database/
    │   ├── engine.py      # SQLAlchemy engine + async helper
    │   └── models.py      # profiles, point_awards, notifications
    ├── services/
    │   └── pass_points_service.py  # Apply awards + session stats
    └── api/
        ├── main.py        # FastAPI app
        ├── deps.py        # Engine / session / admin JWT dependencies
        └── routes/        # Public + admin REST endpoints
"""

__version__ = "0.1.0"
