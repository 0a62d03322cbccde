"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Project is the aggregate root; milestones are owned, donations/NFTs reference it

Design Decisions:
    - One file per entity
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from app.models.project import Project  # noqa: F401
from app.models.milestone import Milestone  # noqa: F401
from app.models.donation import Donation  # noqa: F401
from app.models.nft import NFT  # noqa: F401
from app.models.application import FundraiserApplication  # noqa: F401
