from uuid import UUID

from sqlalchemy import JSON, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.config.table_names import TableNames
from src.models.base import Base, TimeStamp


class ActivityLog(Base, TimeStamp):
    __tablename__ = TableNames.ACTIVITY_LOGS.value

    user_id: Mapped[UUID | None] = mapped_column(
        ForeignKey(f"{TableNames.USERS.value}.uuid", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    action: Mapped[str] = mapped_column(String(255), nullable=False)
    details: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    status: Mapped[int] = mapped_column(Integer, nullable=False, default=200)

    def __repr__(self) -> str:
        return f"<ActivityLog {self.action} status={self.status}>"
