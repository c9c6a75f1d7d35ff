from dataclasses import dataclass
from typing import Any, ClassVar, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


TravelMode = Literal["transit", "walking", "driving"]

RESOURCE_PATHS: dict[str, str] = {
    "transit": "Routes/Transit",
    "walking": "Routes/Walking",
    "driving": "Routes/Driving",
}


@dataclass
class RouteRequest:
    """A single two-waypoint route lookup."""

    start_location: str
    end_location: str
    mode: TravelMode

    @property
    def resource_path(self) -> str:
        return RESOURCE_PATHS[self.mode]


class RouteOptions(BaseModel):
    """Query parameters shared by every travel mode"""

    model_config = ConfigDict(frozen=True)

    mode: ClassVar[TravelMode]

    optimize: Literal["time", "distance", "timeWithTraffic"] = "time"
    distance_unit: Literal["mi", "km"] = "mi"
    output_type: Literal["json"] = "json"  # responses are always parsed as JSON

    def query_params(self) -> dict[str, Any]:
        return {
            "o": self.output_type,
            "optmz": self.optimize,
            "du": self.distance_unit,
        }


class TransitOptions(RouteOptions):
    mode: ClassVar[TravelMode] = "transit"

    travel_time: Optional[str] = None  # "M/D/YYYY H:M:S" in UTC, filled by the client
    time_type: Literal["Departure", "Arrival", "LastAvailable"] = "Departure"
    max_solution_count: int = 3

    def query_params(self) -> dict[str, Any]:
        params = super().query_params()
        params["dt"] = self.travel_time
        params["tt"] = self.time_type
        params["maxSolutions"] = self.max_solution_count
        return params


class WalkingOptions(RouteOptions):
    mode: ClassVar[TravelMode] = "walking"

    optimize: Literal["time", "distance", "timeWithTraffic"] = "distance"


class DrivingOptions(RouteOptions):
    mode: ClassVar[TravelMode] = "driving"


class ErrorDetail(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status_code: Optional[int] = Field(default=None, alias="statusCode")
    body: Any = None


class ErrorEnvelope(BaseModel):
    """Schema for failed route lookups: {"error": {"statusCode": ..., "body": ...}}"""

    error: ErrorDetail

    @classmethod
    def from_response(cls, status_code: Optional[int], body: Any) -> "ErrorEnvelope":
        return cls(error=ErrorDetail(status_code=status_code, body=body))

    @property
    def status_code(self) -> Optional[int]:
        return self.error.status_code

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)

    def __getitem__(self, key: str) -> Any:
        # envelope["error"]["statusCode"] reads the same as the plain dict
        return self.to_dict()[key]
