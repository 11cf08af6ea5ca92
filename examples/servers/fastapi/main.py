import os

from dotenv import load_dotenv
from fastapi import FastAPI
from pydantic import BaseModel

from x402.http import FacilitatorConfig, HTTPFacilitatorClient, PaymentOption
from x402.http.middleware.fastapi import PaymentMiddlewareASGI
from x402.http.types import RouteConfig
from x402.schemas import AssetAmount, Network
from x402.server import x402ResourceServer

from x402_multiversx import MULTIVERSX_DEVNET_CAIP2
from x402_multiversx.exact import ExactMultiversXServerScheme

load_dotenv()

# Config
PAY_TO = os.getenv("MULTIVERSX_ADDRESS")
NETWORK: Network = MULTIVERSX_DEVNET_CAIP2
FACILITATOR_URL = os.getenv("FACILITATOR_URL", "http://localhost:8080")

if not PAY_TO:
    raise ValueError("MULTIVERSX_ADDRESS required")


# Response schemas
class WeatherReport(BaseModel):
    weather: str
    temperature: int


class WeatherResponse(BaseModel):
    report: WeatherReport


class PremiumContentResponse(BaseModel):
    content: str


# App
app = FastAPI()


# x402 Middleware
facilitator = HTTPFacilitatorClient(FacilitatorConfig(url=FACILITATOR_URL))
server = x402ResourceServer(facilitator)
server.register(NETWORK, ExactMultiversXServerScheme())

routes = {
    # $0.01 in devnet USDC
    "GET /weather": RouteConfig(
        accepts=[PaymentOption(scheme="exact", pay_to=PAY_TO, price="$0.01", network=NETWORK)],
        mime_type="application/json",
        description="Weather report",
    ),
    # 0.001 EGLD, tagged with a resource id
    "GET /premium/*": RouteConfig(
        accepts=[
            PaymentOption(
                scheme="exact",
                pay_to=PAY_TO,
                price=AssetAmount(
                    amount="1000000000000000",
                    asset="EGLD",
                    extra={"decimals": 18, "resourceId": "premium-content"},
                ),
                network=NETWORK,
            )
        ],
        mime_type="application/json",
        description="Premium content",
    ),
}
app.add_middleware(PaymentMiddlewareASGI, routes=routes, server=server)


# Routes
@app.get("/health")
async def health_check() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/weather")
async def get_weather() -> WeatherResponse:
    return WeatherResponse(report=WeatherReport(weather="sunny", temperature=70))


@app.get("/premium/content")
async def get_premium_content() -> PremiumContentResponse:
    return PremiumContentResponse(content="This is premium content")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=4021)
