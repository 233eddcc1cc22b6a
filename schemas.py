from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

# ==============================================================================
# ADVOCATE SCHEMAS
# ==============================================================================


class AdvocateBase(BaseModel):
    """
    Fields shared by every advocate representation.

    Python attributes are snake_case; the JSON wire format is camelCase.
    """
    first_name: str = Field(..., alias="firstName", description="Advocate's first name")
    last_name: str = Field(..., alias="lastName", description="Advocate's last name")
    city: str = Field(..., description="City of practice")
    degree: str = Field(..., description="Credential abbreviation")
    specialties: list[str] = Field(default_factory=list, description="Ordered list of specialties")
    years_of_experience: int = Field(..., ge=0, alias="yearsOfExperience", description="Years in practice")
    phone_number: str = Field(..., alias="phoneNumber", description="10 digit phone number")

    class Config:
        """Pydantic configuration"""
        from_attributes = True  # Allows conversion from SQLAlchemy models
        populate_by_name = True  # Accept snake_case names as well as aliases


class AdvocateCreate(AdvocateBase):
    """
    Schema for one seed record.
    Seed data is trusted, so no further validation happens here.
    """


class Advocate(AdvocateBase):
    """
    Complete advocate schema with database-generated fields.
    Used for API responses.
    """
    id: int = Field(..., description="Advocate ID (auto-generated)")
    created_at: Optional[datetime] = Field(None, alias="createdAt", description="Timestamp when advocate was created")


# ==============================================================================
# LIST RESPONSE SCHEMAS
# ==============================================================================


class Pagination(BaseModel):
    """
    Pagination metadata derived from the total count and the normalized
    page/pageSize of the request.
    """
    page: int = Field(1, ge=1)
    page_size: int = Field(10, ge=1, alias="pageSize")
    total_count: int = Field(0, ge=0, alias="totalCount")
    total_pages: int = Field(0, ge=0, alias="totalPages")
    has_next_page: bool = Field(False, alias="hasNextPage")
    has_previous_page: bool = Field(False, alias="hasPreviousPage")

    class Config:
        populate_by_name = True


class AdvocateList(BaseModel):
    """
    Schema for paginated advocate list response.
    """
    data: list[Advocate]
    pagination: Pagination


# ==============================================================================
# FACET SCHEMAS
# ==============================================================================


class CityList(BaseModel):
    cities: list[str]


class DegreeList(BaseModel):
    degrees: list[str]


class SpecialtyList(BaseModel):
    specialties: list[str]


# ==============================================================================
# ADMINISTRATIVE SCHEMAS
# ==============================================================================


class SeedLargeRequest(BaseModel):
    """
    Optional body for the large seed endpoint.
    Range checking happens in the route so out-of-range counts return 400.
    """
    count: Optional[int] = Field(None, description="Number of advocates to generate (1-100,000)")


class MessageResponse(BaseModel):
    """
    Generic success response for administrative actions.
    """
    success: bool = True
    message: str


class SeedResponse(MessageResponse):
    advocates: list[Advocate]


class SeedLargeResponse(MessageResponse):
    count: int


class ErrorResponse(BaseModel):
    """
    Error response schema.
    """
    error: str
    details: Optional[str] = None


# ==============================================================================
# HEALTH CHECK SCHEMA
# ==============================================================================


class HealthCheck(BaseModel):
    """
    Schema for health check response.
    """
    status: str = Field(..., description="Overall health status (healthy/unhealthy)")
    timestamp: float = Field(..., description="Unix timestamp of health check")
    checks: dict = Field(..., description="Individual component health checks")


# ==============================================================================
# EXAMPLES FOR API DOCUMENTATION
# ==============================================================================

EXAMPLE_ADVOCATE = {
    "id": 9,
    "firstName": "Laura",
    "lastName": "Clark",
    "city": "San Francisco",
    "degree": "MD",
    "specialties": ["Bipolar", "LGBTQ"],
    "yearsOfExperience": 6,
    "phoneNumber": "5551234567",
    "createdAt": "2024-01-15T10:30:00Z"
}

EXAMPLE_ADVOCATE_LIST = {
    "data": [EXAMPLE_ADVOCATE],
    "pagination": {
        "page": 1,
        "pageSize": 10,
        "totalCount": 1,
        "totalPages": 1,
        "hasNextPage": False,
        "hasPreviousPage": False
    }
}
