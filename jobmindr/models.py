"""
SQLAlchemy ORM models: JobApplication and User.
"""

from datetime import date
from sqlalchemy import String, Date
from sqlalchemy.orm import Mapped, mapped_column
from .database import Base


class JobApplication(Base):
    """
    One tracked job application.
    application_number is the user-facing reference (10 chars, A-Z0-9),
    generated by the storage layer at insert time.
    """
    __tablename__ = "job_applications"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    application_number: Mapped[str] = mapped_column(String(10), unique=True, nullable=False)
    job_title: Mapped[str] = mapped_column(String(40), nullable=False)
    company_name: Mapped[str] = mapped_column(String(40), nullable=False)
    date_applied: Mapped[date] = mapped_column(Date, nullable=False)
    application_status: Mapped[str] = mapped_column(String(15), nullable=False)  # see schemas.ApplicationStatus
    employment_type: Mapped[str | None] = mapped_column(String(15), nullable=True)
    contact_email: Mapped[str | None] = mapped_column(String(40), nullable=True)
    application_closing_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    def __repr__(self) -> str:
        return f"<JobApplication {self.id} {self.application_number} {self.company_name!r}>"


class User(Base):
    """
    Email/password pairs. The login stub never reads or writes this table.
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
