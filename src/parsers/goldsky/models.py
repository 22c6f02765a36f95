from typing import Any

from pydantic import BaseModel

LATEST_CURVES_QUERY = """
  query LatestCurves($first: Int!) {
    curves(first: $first, orderBy: createdAt, orderDirection: desc) {
      id
      createdAt
      token
      name
      symbol
      uri
      creator
      graduated
      lastPriceUsd
      lastPriceEth
      totalVolumeEth
      tradeCount
      lastTradeAt
    }
  }
"""


class GraphQLError(BaseModel):
    message: str = ""

    model_config = {"extra": "ignore"}


class CurvesData(BaseModel):
    # Kept raw so one bad record can be dropped without failing the page
    curves: list[Any] = []

    model_config = {"extra": "ignore"}


class CurvesResponse(BaseModel):
    data: CurvesData | None = None
    errors: list[GraphQLError] | None = None

    model_config = {"extra": "ignore"}
