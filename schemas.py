"""
Database Schemas for Vismoh

Each document model corresponds to a MongoDB collection.
Collection name = lowercase class name. The *Payload / *Input / *Update
classes are request bodies.
"""
from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

Role = Literal["Athlete", "Coach", "Sponsor"]
ConnectionStatus = Literal["pending", "accepted", "rejected"]


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# Users and roles
class Profile(BaseModel):
    authId: str
    firstName: str
    lastName: str
    dob: Optional[str] = None
    role: Role
    email: EmailStr
    phone: Optional[str] = None
    bloodGroup: Optional[str] = None
    address: Optional[str] = None
    country: Optional[str] = None
    gender: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    isVerified: bool = False
    createdAt: str = Field(default_factory=utcnow_iso)


class Athlete(Profile):
    role: Literal["Athlete"] = "Athlete"
    sport: str
    position: str
    experienceLevel: str


class Coach(Profile):
    role: Literal["Coach"] = "Coach"
    sport: str


class Sponsor(Profile):
    role: Literal["Sponsor"] = "Sponsor"
    sponsorshipType: Optional[str] = None
    companyName: Optional[str] = None


class SignupPayload(BaseModel):
    firstName: str
    lastName: str
    dob: Optional[str] = None
    role: Role
    email: EmailStr
    phone: Optional[str] = None
    password: str = Field(..., min_length=6)
    sport: Optional[str] = None
    position: Optional[str] = None
    experienceLevel: Optional[str] = None
    bloodGroup: Optional[str] = None
    address: Optional[str] = None
    country: Optional[str] = None
    gender: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    sponsorshipType: Optional[str] = None
    companyName: Optional[str] = None

    @model_validator(mode="after")
    def check_role_fields(self):
        if self.role == "Athlete" and not (self.sport and self.position and self.experienceLevel):
            raise ValueError("Sport, position, and experience level are required for Athlete")
        if self.role == "Coach" and not self.sport:
            raise ValueError("Sport is required for Coach")
        return self


class LoginPayload(BaseModel):
    email: EmailStr
    password: str


# Connections
class Connection(BaseModel):
    senderId: str
    receiverId: str
    senderRole: Role
    receiverRole: Role
    status: ConnectionStatus = "pending"
    timestamp: str = Field(default_factory=utcnow_iso)


class ConnectionRequestPayload(BaseModel):
    senderId: str = Field(..., min_length=1)
    senderRole: Role
    receiverId: str = Field(..., min_length=1)
    receiverRole: Role


class ConnectionActionPayload(BaseModel):
    senderId: str = Field(..., min_length=1)
    receiverId: str = Field(..., min_length=1)
    action: Literal["accept", "reject"]


# Athlete records
class PerformanceInput(BaseModel):
    total_matches: int = Field(..., ge=0)
    wins: int = Field(..., ge=0)
    losses: int = Field(..., ge=0)
    practice_sessions_per_week: int = Field(..., ge=0)

    @model_validator(mode="after")
    def check_match_counts(self):
        if self.wins + self.losses > self.total_matches:
            raise ValueError("wins + losses cannot exceed total_matches")
        return self


class PerformanceUpdate(BaseModel):
    total_matches: Optional[int] = Field(None, ge=0)
    wins: Optional[int] = Field(None, ge=0)
    losses: Optional[int] = Field(None, ge=0)
    practice_sessions_per_week: Optional[int] = Field(None, ge=0)


class Performance(PerformanceInput):
    win_rate: float
    performance_status: Literal["Poor Form", "Average Performance", "Good Form"]


class HealthcareInput(BaseModel):
    injury_history: List[dict] = Field(default_factory=list)
    hydration_level: float = Field(..., gt=0)
    sleep_hours: float = Field(..., gt=0)
    height: float = Field(..., gt=0, description="Height in cm")
    weight: float = Field(..., gt=0, description="Weight in kg")


class HealthcareUpdate(BaseModel):
    injury_history: List[dict] = Field(default_factory=list)
    hydration_level: Optional[float] = Field(None, gt=0)
    sleep_hours: Optional[float] = Field(None, gt=0)
    height: Optional[float] = Field(None, gt=0)
    weight: Optional[float] = Field(None, gt=0)


class Healthcare(HealthcareInput):
    bmi: float


class Meal(BaseModel):
    meal: str = Field(..., min_length=1)
    items: List[str]


class DietaryPlan(BaseModel):
    calories_per_day: float = Field(..., gt=0)
    protein_intake: str
    carbs_intake: str
    fats_intake: str
    meal_plan: List[Meal] = Field(..., min_length=1)

    @field_validator("protein_intake", "carbs_intake", "fats_intake")
    @classmethod
    def not_blank(cls, value: str, info):
        if not value.strip():
            raise ValueError(f"Invalid {info.field_name}")
        return value


class DietaryPayload(BaseModel):
    dietaryPlan: DietaryPlan


class DietaryPlanUpdate(BaseModel):
    calories_per_day: Optional[float] = Field(None, gt=0)
    protein_intake: Optional[str] = None
    carbs_intake: Optional[str] = None
    fats_intake: Optional[str] = None
    meal_plan: Optional[List[Meal]] = Field(None, min_length=1)


class DietaryUpdatePayload(BaseModel):
    dietaryPlan: DietaryPlanUpdate


# Directory
class LeaderboardPayload(BaseModel):
    userId: Optional[str] = None


# AI
class ChatbotPayload(BaseModel):
    userId: str = Field(..., min_length=1)
    question: str = Field(..., min_length=1)


# Messages
class Message(BaseModel):
    chatId: str
    senderId: str
    receiverId: str
    message: str
    timestamp: int


class MessagePayload(BaseModel):
    senderId: str = Field(..., min_length=1)
    receiverId: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)


# Verification
class Certificate(BaseModel):
    name: str
    url: str
    publicId: Optional[str] = None
    format: Optional[str] = None


class IdVerification(BaseModel):
    idType: Literal["aadhar"] = "aadhar"
    aadharNumber: str
    certificates: List[Certificate] = Field(default_factory=list)
    certificatesVerification: List[dict] = Field(default_factory=list)
    verificationStatus: Literal["pending", "verified", "rejected"] = "verified"
    verificationMethod: str = "ai-assisted"
    experienceYears: Optional[int] = None
    teamAffiliation: Optional[str] = None
    licenseNumber: Optional[str] = None
    companyRegistrationNumber: Optional[str] = None
    createdAt: str = Field(default_factory=utcnow_iso)
    updatedAt: str = Field(default_factory=utcnow_iso)


class Verification(BaseModel):
    userId: str
    role: Role
    idVerification: IdVerification


# Uploads
class RolePayload(BaseModel):
    role: str
