from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from rosterapp.models.base import Base


class Map(Base):
    __tablename__ = "maps"

    # Slug such as "bank" or "clubhouse"; also used as the image folder name
    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # images: one path per floor, ground floor first
    images: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    # template: {"assignments": [...]}, copied into every new game plan
    template: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
