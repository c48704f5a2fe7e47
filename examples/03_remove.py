"""
Remove content by hash, alias or URL
"""
import asyncio
from pinme import PinmeClient, InvalidInput, RemoteError, NetworkError


async def main():
    async with PinmeClient() as pinme:
        for raw in [
            "bafybeigthbkdv2ufll47r7e7f5z4c3vubyggxwotl52parmy3d3abt6ztu",
            "https://3abt6ztu.pinit.eth.limo",
            "not a valid hash!!",
        ]:
            try:
                target = await pinme.remove(raw)
                print(f"Removed {target.kind.value}: {target.value}")
            except InvalidInput as e:
                print(f"Skipped: {e}")
            except (RemoteError, NetworkError) as e:
                print(f"Failed: {e}")
                if e.hint:
                    print(f"  {e.hint}")


if __name__ == "__main__":
    asyncio.run(main())
