from sqlalchemy import Column, DateTime, Integer, Numeric, String, Text, func

from database import Base


class SocialSupportApplication(Base):
    __tablename__ = "applications"

    id = Column(String(64), primary_key=True, index=True)
    status = Column(String(32), nullable=False, default="draft", index=True)
    current_step = Column(Integer, nullable=False, default=1)

    # Step 1: personal information
    name = Column(String(255), nullable=True)
    national_id = Column(String(64), nullable=True)
    date_of_birth = Column(String(32), nullable=True)
    gender = Column(String(32), nullable=True)
    address = Column(Text, nullable=True)
    city = Column(String(128), nullable=True)
    state = Column(String(128), nullable=True)
    country = Column(String(128), nullable=True)
    phone = Column(String(64), nullable=True)
    email = Column(String(255), nullable=True)

    # Step 2: family & financial
    marital_status = Column(String(32), nullable=True)
    dependents = Column(Integer, nullable=True)
    employment_status = Column(String(32), nullable=True)
    monthly_income = Column(Numeric(14, 2), nullable=True)
    housing_status = Column(String(32), nullable=True)

    # Step 3: situation descriptions
    financial_situation = Column(Text, nullable=True)
    employment_circumstances = Column(Text, nullable=True)
    reason_for_applying = Column(Text, nullable=True)

    submitted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
