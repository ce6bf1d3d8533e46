"""
Example: NFT and Distributor Overview

Fetches the grouped NFT catalogue and, on mainnet, the on-chain contract and
gas-fee distributor details, then prints a balance twice to show the cache.
"""

import asyncio
import sys

from dotenv import load_dotenv

load_dotenv()

from vscache import ExplorerCacheService, VSCacheError  # noqa: E402
from vscache.core.logging import configure_logging  # noqa: E402


async def main(address: str):
    print("=== vscache NFT Overview ===\n")
    configure_logging(level="WARNING")

    service = ExplorerCacheService()
    try:
        print(f"Network: {service.get_network()['network']}")
        service.set_network("mainnet")

        nft_info = await service.get_nft_info()
        print(f"\n--- {nft_info['message']} ---")
        for group in nft_info["data"]:
            print(f"  {group['name']} ({group['symbol']}): supply {group['totalSupply']}, holders {group['holders']}")

        for detail in nft_info.get("distributorDetails", []):
            status = f"error: {detail['error']}" if detail["error"] else "ok"
            print(
                f"  {detail['name']}: per token {detail['perTokenEarnings']}, "
                f"type total {detail['totalTypeEarnings']} [{status}]"
            )
        if "error" in nft_info:
            print(f"  Enrichment failed: {nft_info['error']}")

        print("\n--- Balance (second call served from cache) ---")
        for _ in range(2):
            balance = await service.get_balance(address)
            print(f"  {balance['balance']} VSG [{balance['source']}]")
    except VSCacheError as e:
        print(f"Request failed: {e}")
    finally:
        await service.close()


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "0x0000000000000000000000000000000000000000"))
