from sqlalchemy import Column, Integer, String, DateTime, Index, CheckConstraint, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from sqlalchemy.orm import validates
from database import Base

# ==============================================================================
# COLUMN TYPES
# ==============================================================================

# JSONB on PostgreSQL, plain JSON text elsewhere (SQLite in tests)
SpecialtiesType = JSON().with_variant(JSONB(), "postgresql")

PHONE_NUMBER_LENGTH = 10


# ==============================================================================
# ADVOCATE MODEL
# ==============================================================================

class Advocate(Base):
    """
    Advocate model representing one directory entry.

    Records are only ever created by bulk seeding and removed by a whole-table
    reset, so there is no update path and no updated_at column.

    Attributes:
        id (int): Primary key, assigned by the store
        first_name (str): Given name
        last_name (str): Family name
        city (str): City of practice
        degree (str): Credential abbreviation (MD, PhD, LCSW, ...)
        specialties (list[str]): Ordered list of specialties, may be empty
        years_of_experience (int): Non-negative years in practice
        phone_number (str): 10 digit phone number kept as text so leading
            zeros survive
        created_at (datetime): Timestamp when the record was inserted
    """

    __tablename__ = "advocates"

    # ==============================================================================
    # COLUMNS
    # ==============================================================================

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    first_name = Column(String(255), nullable=False, comment="Advocate's first name")
    last_name = Column(String(255), nullable=False, comment="Advocate's last name")
    city = Column(String(255), nullable=False, comment="City of practice")
    degree = Column(String(50), nullable=False, comment="Credential abbreviation")

    specialties = Column(
        SpecialtiesType,
        nullable=False,
        default=list,
        comment="Ordered list of specialty names"
    )

    years_of_experience = Column(
        Integer,
        nullable=False,
        comment="Years in practice"
    )

    phone_number = Column(
        String(PHONE_NUMBER_LENGTH),
        nullable=False,
        comment="10 digit phone number stored as text"
    )

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="Timestamp when advocate was created"
    )

    # ==============================================================================
    # INDEXES AND CONSTRAINTS
    # ==============================================================================

    __table_args__ = (
        # Sortable columns
        Index('idx_advocate_last_name', 'last_name'),
        Index('idx_advocate_first_name', 'first_name'),
        Index('idx_advocate_city', 'city'),
        Index('idx_advocate_degree', 'degree'),
        Index('idx_advocate_experience', 'years_of_experience'),

        CheckConstraint(
            "years_of_experience >= 0",
            name='check_experience_non_negative'
        ),
    )

    # ==============================================================================
    # VALIDATION
    # ==============================================================================

    @validates('first_name', 'last_name')
    def validate_name(self, key, value):
        """Names are trimmed and must not be empty."""
        if not value or not value.strip():
            raise ValueError(f"{key} cannot be empty")
        return value.strip()

    @validates('years_of_experience')
    def validate_years_of_experience(self, key, years):
        if years is None or years < 0:
            raise ValueError("Years of experience must be a non-negative integer")
        return years

    @validates('phone_number')
    def validate_phone_number(self, key, phone_number):
        """
        Normalize the phone number to fixed-width text.

        Integers are accepted for compatibility with numeric seed data and
        zero-padded back to 10 digits.

        Raises:
            ValueError: If the value is not exactly 10 digits
        """
        if isinstance(phone_number, int):
            phone_number = str(phone_number).zfill(PHONE_NUMBER_LENGTH)

        phone_number = str(phone_number).strip()

        if len(phone_number) != PHONE_NUMBER_LENGTH or not phone_number.isdigit():
            raise ValueError(
                f"Phone number must be exactly {PHONE_NUMBER_LENGTH} digits. "
                f"Got: '{phone_number}'"
            )

        return phone_number

    @validates('specialties')
    def validate_specialties(self, key, specialties):
        if specialties is None:
            return []
        return [str(specialty) for specialty in specialties]

    # ==============================================================================
    # METHODS
    # ==============================================================================

    def __repr__(self):
        return (
            f"<Advocate(id={self.id}, name='{self.first_name} {self.last_name}', "
            f"city='{self.city}', degree='{self.degree}')>"
        )
