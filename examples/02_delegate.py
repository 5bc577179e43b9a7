# examples/02_delegate.py
"""
Делегат: токен в заголовках, refresh при 401 и ограничение числа повторов.
"""

import asyncio

from api_manager import ApiManager, ApiManagerConfig, ApiManagerDelegate, DataRequest, Headers


class SessionDelegate(ApiManagerDelegate):
    max_retries = 2

    def __init__(self):
        self.token = "expired"
        self.attempts = 0

    def added_headers(self):
        return Headers({"Authorization": f"Bearer {self.token}"})

    async def should_retry_request(self, request, status_code):
        # ApiManager не ограничивает повторы, это делает делегат
        if status_code in (401, 503) and self.attempts < self.max_retries:
            self.attempts += 1
            if status_code == 401:
                self.token = await self.refresh_token()
            return True
        self.attempts = 0
        return False

    def on_status(self, url, status_code):
        print(f"  {status_code} {url}")

    async def refresh_token(self):
        await asyncio.sleep(0.1)
        return "fresh"


async def main():
    delegate = SessionDelegate()
    config = ApiManagerConfig.create(base_url="https://httpbin.org", timeout=10)

    async with ApiManager(config, delegate=delegate) as manager:
        outcome = await manager.request(DataRequest("/status/401"))
        print(f"Final status: {outcome.status}")

        outcome = await manager.request(DataRequest("/bearer"))
        print(f"Bearer check: {outcome.status} {outcome.json()}")


if __name__ == "__main__":
    asyncio.run(main())
