"""
Smoke test a running TxLens server.
Run: python scripts/analyze_tx.py [network] [tx_hash] [base_url]
"""

import asyncio
import sys

import httpx

BASE_URL = "http://localhost:8080"

EXAMPLES = {
    "ethereum-mainnet": "0xabc123",
    "bitcoin-mainnet": "f4184fc596403b9d638783cf57adfe4c75c605f6356fbc91338530e9831e9e16",
}


async def analyze(network: str, tx_hash: str, base_url: str = BASE_URL) -> bool:
    """Post one analysis request and print the outcome."""
    print(f"\n{'=' * 60}")
    print(f"Network: {network}")
    print(f"TX Hash: {tx_hash}")
    print(f"{'=' * 60}\n")

    async with httpx.AsyncClient(timeout=60.0) as client:
        try:
            response = await client.post(
                f"{base_url}/analyze_tx",
                json={"network": network, "tx_hash": tx_hash},
            )
        except httpx.HTTPError as e:
            print(f"Request failed: {e}")
            return False

    print(f"Status Code: {response.status_code}")
    data = response.json()

    if response.status_code == 200:
        print(f"  - Type:       {data['tx_type']}")
        print(f"  - Protocol:   {data.get('protocol') or '-'}")
        print(f"  - Risk Score: {data['risk_score']:.2f}")
        for reason in data["risk_reasons"]:
            print(f"    * {reason}")
        print(f"\n{data['natural_language_explanation']}")
        return True

    detail = data.get("detail")
    if isinstance(detail, dict):
        retry = " (retryable)" if detail.get("retryable") else ""
        print(f"  - {detail['stage']} failed [{detail['code']}]{retry}: {detail['message']}")
    else:
        print(f"  - Error: {detail}")
    return False


if __name__ == "__main__":
    network = sys.argv[1] if len(sys.argv) > 1 else "ethereum-mainnet"
    tx_hash = sys.argv[2] if len(sys.argv) > 2 else EXAMPLES.get(network, "0xabc123")
    base_url = sys.argv[3] if len(sys.argv) > 3 else BASE_URL

    ok = asyncio.run(analyze(network, tx_hash, base_url))
    sys.exit(0 if ok else 1)
