"""x402 MultiversX Facilitator Example.

FastAPI-based facilitator service that verifies MultiversX payments by
simulating them on a gateway and settles them by broadcasting the signed
transaction. The facilitator holds no keys: payers sign and pay their own gas.

Environment:
    MULTIVERSX_API_URL: Gateway URL (default: public devnet gateway)
    MULTIVERSX_NETWORK: CAIP-2 network to serve (default: multiversx:D)
    PORT: Listen port (default: 8080)

Run with: uvicorn main:app --port 8080
"""

import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from x402 import x402Facilitator
from x402.schemas import PaymentRequirements, parse_payment_payload

from x402_multiversx import MULTIVERSX_DEVNET_CAIP2, GatewayClient
from x402_multiversx.constants import FALLBACK_GATEWAY_DEVNET
from x402_multiversx.exact import register_exact_multiversx_facilitator

# Load environment variables
load_dotenv()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("facilitator")

# Configuration
PORT = int(os.environ.get("PORT", "8080"))
GATEWAY_URL = os.environ.get("MULTIVERSX_API_URL", FALLBACK_GATEWAY_DEVNET)
NETWORK = os.environ.get("MULTIVERSX_NETWORK", MULTIVERSX_DEVNET_CAIP2)


# Async hook functions for the facilitator
async def after_verify_hook(ctx):
    logger.info("After verify: %s", ctx.result)


async def after_settle_hook(ctx):
    logger.info("After settle: %s", ctx.result)


async def settle_failure_hook(ctx):
    logger.warning("Settle failure: %s", ctx.error)


# The gateway both simulates (verify) and broadcasts (settle)
gateway = GatewayClient(GATEWAY_URL)

facilitator = (
    x402Facilitator()
    .on_after_verify(after_verify_hook)
    .on_after_settle(after_settle_hook)
    .on_settle_failure(settle_failure_hook)
)
register_exact_multiversx_facilitator(facilitator, gateway, NETWORK, broadcaster=gateway)
logger.info("MultiversX facilitator for %s using gateway %s", NETWORK, GATEWAY_URL)


# Pydantic models for request/response
class VerifyRequest(BaseModel):
    """Verify endpoint request body."""

    paymentPayload: dict
    paymentRequirements: dict


class SettleRequest(BaseModel):
    """Settle endpoint request body."""

    paymentPayload: dict
    paymentRequirements: dict


# Initialize FastAPI app
app = FastAPI(
    title="x402 MultiversX Facilitator",
    description="Verifies and settles x402 payments on MultiversX",
    version="2.0.0",
)


@app.post("/verify")
async def verify(request: VerifyRequest):
    """Verify a payment against requirements.

    Returns:
        VerifyResponse with isValid and payer (if valid) or invalidReason.
    """
    try:
        payload = parse_payment_payload(request.paymentPayload)
        requirements = PaymentRequirements.model_validate(request.paymentRequirements)

        response = await facilitator.verify(payload, requirements)

        return {
            "isValid": response.is_valid,
            "payer": response.payer,
            "invalidReason": response.invalid_reason,
            "invalidMessage": response.invalid_message,
        }
    except Exception as e:
        logger.exception("Verify error")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/settle")
async def settle(request: SettleRequest):
    """Settle a payment on-chain.

    Returns:
        SettleResponse with success, transaction, network, and payer.
    """
    try:
        payload = parse_payment_payload(request.paymentPayload)
        requirements = PaymentRequirements.model_validate(request.paymentRequirements)

        response = await facilitator.settle(payload, requirements)

        return {
            "success": response.success,
            "transaction": response.transaction,
            "network": response.network,
            "payer": response.payer,
            "errorReason": response.error_reason,
        }
    except Exception as e:
        logger.exception("Settle error")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/supported")
async def supported():
    """Get supported payment kinds."""
    response = facilitator.get_supported()
    return {
        "kinds": [
            {
                "x402Version": k.x402_version,
                "scheme": k.scheme,
                "network": k.network,
                "extra": k.extra,
            }
            for k in response.kinds
        ],
        "extensions": response.extensions,
        "signers": response.signers,
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=PORT)
