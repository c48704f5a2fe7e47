"""
Upload a file or a directory to IPFS
"""
import asyncio
from pinme import PinmeClient, SizeLimitExceeded


async def main():
    async with PinmeClient() as pinme:
        
        # Single file
        outcome = await pinme.upload("report.pdf")
        print(f"CID: {outcome.content_hash}")
        
        # Whole directory (one request, hierarchy kept in the part names)
        outcome = await pinme.upload("./dist")
        print(f"CID: {outcome.content_hash}")
        if outcome.short_alias:
            print(f"ENS URL: {pinme.alias_url(outcome.short_alias)}")
        
        # Preview link (needs IPFS_PREVIEW_URL and SECRET_KEY)
        if pinme.config.preview_url:
            print(f"Preview: {pinme.preview_url(outcome.content_hash)}")
        
        # Limits are checked before anything is sent
        try:
            await pinme.upload("huge-video.mkv")
        except SizeLimitExceeded as e:
            print(f"Too large: {e.size} > {e.limit} bytes")


if __name__ == "__main__":
    asyncio.run(main())
