"""
Source aggregate models.

The source document is a list of deeply nested organization records written in
camelCase. Every nested section is a frozen pydantic model so that optional
fields are explicit (``None``) and lists default to empty. Models accept both
the camelCase source keys and snake_case names.
"""
from __future__ import annotations

from typing import Any, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SourceModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class Location(SourceModel):
    country: Optional[str] = None
    region: Optional[str] = None
    city: Optional[str] = None
    address: Optional[str] = None
    coordinates: Optional[Tuple[float, float]] = Field(
        None, description="[latitude, longitude]"
    )
    timezone: Optional[str] = None
    nearest_airport: Optional[str] = None


class Duration(SourceModel):
    """Program length in weeks."""

    min: Optional[int] = None
    max: Optional[int] = None


class ProgramCost(SourceModel):
    amount: Optional[float] = None
    currency: Optional[str] = None
    period: Optional[str] = None
    includes: List[str] = Field(default_factory=list)
    excludes: List[str] = Field(default_factory=list)


class ProgramSchedule(SourceModel):
    hours_per_day: Optional[float] = None
    days_per_week: Optional[int] = None
    start_dates: List[str] = Field(default_factory=list)
    seasonality: Optional[str] = None


class ProgramRecord(SourceModel):
    id: Optional[str] = None
    title: str
    description: Optional[str] = None
    typical_day: List[str] = Field(default_factory=list)
    duration: Duration = Field(default_factory=Duration)
    cost: ProgramCost = Field(default_factory=ProgramCost)
    schedule: ProgramSchedule = Field(default_factory=ProgramSchedule)
    animal_types: List[str] = Field(default_factory=list)
    activities: List[str] = Field(default_factory=list)
    learning_outcomes: List[str] = Field(default_factory=list)
    requirements: List[str] = Field(default_factory=list)
    highlights: List[str] = Field(default_factory=list)


class AnimalCareRecord(SourceModel):
    animal_type: str
    species: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    conservation_status: Optional[str] = None
    care_activities: List[str] = Field(default_factory=list)
    current_animals: Optional[int] = None
    success_stories: List[str] = Field(default_factory=list)
    image: Optional[str] = None


class AccommodationRecord(SourceModel):
    provided: Optional[bool] = None
    type: Optional[str] = None
    description: Optional[str] = None
    amenities: List[str] = Field(default_factory=list)


class MealsRecord(SourceModel):
    provided: Optional[bool] = None
    type: Optional[str] = None
    dietary_options: List[str] = Field(default_factory=list)
    description: Optional[str] = None


class TransportationRecord(SourceModel):
    airport_pickup: Optional[bool] = None
    local_transport: Optional[bool] = None
    description: Optional[str] = None


class InternetAccessRecord(SourceModel):
    available: Optional[bool] = None
    quality: Optional[str] = None
    description: Optional[str] = None


class AgeRequirementRecord(SourceModel):
    min: Optional[int] = None
    max: Optional[int] = None


class SkillRequirementsRecord(SourceModel):
    required: List[str] = Field(default_factory=list)
    preferred: List[str] = Field(default_factory=list)
    training: List[str] = Field(default_factory=list)


class HealthRequirementsRecord(SourceModel):
    vaccinations: List[str] = Field(default_factory=list)
    medical_clearance: Optional[bool] = None
    insurance: Optional[bool] = None
    physical_fitness: Optional[str] = None


class GalleryImage(SourceModel):
    id: Optional[str] = None
    type: str = "image"
    url: str
    thumbnail: Optional[str] = None
    caption: Optional[str] = None
    alt_text: Optional[str] = None
    credit: Optional[str] = None


class GalleryRecord(SourceModel):
    images: List[GalleryImage] = Field(default_factory=list)
    videos: List[GalleryImage] = Field(default_factory=list)


class StatisticsRecord(SourceModel):
    volunteers_hosted: Optional[int] = None
    years_operating: Optional[int] = None
    animals_rescued: Optional[int] = None
    conservation_impact: Optional[str] = None


class ApplicationStepRecord(SourceModel):
    step: int
    title: str
    description: Optional[str] = None
    time_required: Optional[str] = None
    documents: List[str] = Field(default_factory=list)


class ApplicationFee(SourceModel):
    amount: Optional[float] = None
    currency: Optional[str] = None
    refundable: Optional[bool] = None


class ApplicationProcessRecord(SourceModel):
    steps: List[ApplicationStepRecord] = Field(default_factory=list)
    processing_time: Optional[str] = None
    requirements: List[str] = Field(default_factory=list)
    fee: Optional[ApplicationFee] = None


class OrganizationRecord(SourceModel):
    """
    One organization aggregate as it appears in the source document.
    """

    id: Optional[str] = None
    name: str
    slug: str
    tagline: Optional[str] = None
    mission: Optional[str] = None
    logo: Optional[str] = None
    hero_image: Optional[str] = None
    website: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    year_founded: Optional[int] = None
    verified: Optional[bool] = None
    certifications: List[str] = Field(default_factory=list)
    location: Location = Field(default_factory=Location)
    programs: List[ProgramRecord] = Field(default_factory=list)
    animal_types: List[AnimalCareRecord] = Field(default_factory=list)
    accommodation: AccommodationRecord = Field(default_factory=AccommodationRecord)
    meals: MealsRecord = Field(default_factory=MealsRecord)
    languages: List[str] = Field(default_factory=list)
    transportation: TransportationRecord = Field(default_factory=TransportationRecord)
    internet_access: InternetAccessRecord = Field(default_factory=InternetAccessRecord)
    age_requirement: AgeRequirementRecord = Field(default_factory=AgeRequirementRecord)
    skill_requirements: SkillRequirementsRecord = Field(
        default_factory=SkillRequirementsRecord
    )
    health_requirements: HealthRequirementsRecord = Field(
        default_factory=HealthRequirementsRecord
    )
    gallery: GalleryRecord = Field(default_factory=GalleryRecord)
    statistics: StatisticsRecord = Field(default_factory=StatisticsRecord)
    application_process: Optional[ApplicationProcessRecord] = None
    last_updated: Optional[str] = None
    status: Optional[str] = None
    featured: Optional[bool] = None
    tags: List[str] = Field(default_factory=list)


class TestimonialRecord(SourceModel):
    """A volunteer quote, migrated independently of the organization aggregates."""

    __test__ = False

    id: Optional[str] = None
    name: str
    location: Optional[str] = None
    organization_id: Optional[str] = None
    organization_name: Optional[str] = None
    quote: str
    avatar: Optional[str] = None


class SourceDocument(SourceModel):
    organizations: List[OrganizationRecord] = Field(default_factory=list)
    testimonials: List[TestimonialRecord] = Field(default_factory=list)


class SourceEnvelope(SourceModel):
    """
    Outer shape of a source document. Records are kept raw and validated one
    at a time, so a malformed record fails on its own.
    """

    organizations: List[Any] = Field(default_factory=list)
    testimonials: List[Any] = Field(default_factory=list)


# A record as served by a source reader: already built, or raw JSON.
OrganizationSource = Union[OrganizationRecord, Mapping[str, Any]]
TestimonialSource = Union[TestimonialRecord, Mapping[str, Any]]


__all__ = [
    "AccommodationRecord",
    "AgeRequirementRecord",
    "AnimalCareRecord",
    "ApplicationFee",
    "ApplicationProcessRecord",
    "ApplicationStepRecord",
    "Duration",
    "GalleryImage",
    "GalleryRecord",
    "HealthRequirementsRecord",
    "InternetAccessRecord",
    "Location",
    "MealsRecord",
    "OrganizationRecord",
    "ProgramCost",
    "ProgramRecord",
    "ProgramSchedule",
    "SkillRequirementsRecord",
    "OrganizationSource",
    "SourceDocument",
    "SourceEnvelope",
    "StatisticsRecord",
    "TestimonialRecord",
    "TestimonialSource",
    "TransportationRecord",
]
