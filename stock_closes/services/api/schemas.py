"""Response models for the closes API."""

from pydantic import BaseModel, ConfigDict, Field

from stock_closes.core.types import ClosesResult


class ClosesResponse(BaseModel):
    """JSON body returned for a trailing-window request."""

    model_config = ConfigDict(populate_by_name=True)

    stock: str
    data: list[float]
    average_close: float = Field(alias="averageClose")

    @classmethod
    def from_result(cls, result: ClosesResult) -> "ClosesResponse":
        return cls(
            stock=result.symbol,
            data=list(result.daily_closes),
            average_close=result.average_close,
        )
