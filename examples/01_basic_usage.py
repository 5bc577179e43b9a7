# examples/01_basic_usage.py
"""
Базовое использование ApiManager: GET, POST и upload.
"""

import asyncio

from api_manager import ApiManager, ApiManagerConfig, DataRequest, UploadRequest


async def main():
    config = ApiManagerConfig(base_url="https://jsonplaceholder.typicode.com", allow_logs=True)

    async with ApiManager(config) as manager:
        print("\n=== GET ===")
        status, data = await manager.request(DataRequest("/posts/1"))
        print(f"Status: {status}")
        print(f"Body: {data[:80] if data else data}")

        print("\n=== POST (JSON) ===")
        outcome = await manager.request(DataRequest(
            "/posts",
            "POST",
            parameters={"title": "Test Post", "body": "This is a test", "userId": 1},
        ))
        print(f"Status: {outcome.status}")
        print(f"Created: {outcome.json()}")

        print("\n=== Upload ===")
        outcome = await manager.upload(UploadRequest(
            url="https://httpbin.org/put",
            data=b"hello world" * 1000,
            file_name="hello.txt",
            mime_type="text/plain",
            progress_handler=lambda fraction: print(f"  {fraction:.0%}"),
        ))
        print(f"Status: {outcome.status}")


if __name__ == "__main__":
    asyncio.run(main())
