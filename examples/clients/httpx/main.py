"""x402 httpx client example - pays MultiversX-protected endpoints automatically."""

import asyncio
import os
import sys

from dotenv import load_dotenv

from x402 import x402Client
from x402.http import x402HTTPClient
from x402.http.clients import x402HttpxClient

from x402_multiversx import MultiversXSigner
from x402_multiversx.exact import register_exact_multiversx_client

# Load environment variables
load_dotenv()


def validate_environment() -> tuple[str, str, str]:
    """Validate required environment variables.

    Returns:
        Tuple of (pem, base_url, endpoint_path).

    Raises:
        SystemExit: If required environment variables are missing.
    """
    pem = os.getenv("MULTIVERSX_PEM")
    base_url = os.getenv("RESOURCE_SERVER_URL")
    endpoint_path = os.getenv("ENDPOINT_PATH")

    missing = [
        name
        for name, value in (
            ("MULTIVERSX_PEM", pem),
            ("RESOURCE_SERVER_URL", base_url),
            ("ENDPOINT_PATH", endpoint_path),
        )
        if not value
    ]
    if missing:
        print(f"Error: Missing required environment variables: {', '.join(missing)}")
        sys.exit(1)

    return pem, base_url, endpoint_path


async def main() -> None:
    """Main entry point demonstrating httpx with x402 payments."""
    pem, base_url, endpoint_path = validate_environment()

    # MULTIVERSX_PEM may be the PEM text or a path to the wallet file
    signer = MultiversXSigner.from_pem(pem)

    client = x402Client()
    register_exact_multiversx_client(client, signer)
    print(f"Initialized MultiversX account: {signer.address}")

    http_client = x402HTTPClient(client)

    url = f"{base_url}{endpoint_path}"
    print(f"Making request to: {url}\n")

    async with x402HttpxClient(client) as http:
        response = await http.get(url)
        await response.aread()

        print(f"Response status: {response.status_code}")
        print(f"Response body: {response.text}")

        if response.is_success:
            try:
                settle_response = http_client.get_payment_settle_response(
                    lambda name: response.headers.get(name)
                )
                print(f"\nPayment response: {settle_response.model_dump_json(indent=2)}")
            except ValueError:
                print("\nNo payment response header found")
        else:
            print(f"\nRequest failed (status: {response.status_code})")


if __name__ == "__main__":
    asyncio.run(main())
