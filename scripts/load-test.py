#!/usr/bin/env python3
"""
시뮬레이터 부하 테스트 스크립트
사용법: python load-test.py [ENDPOINT_URL] [REQUEST_COUNT] [CONCURRENT]
"""

import asyncio
import aiohttp
import sys
import time

# 기본값
ENDPOINT_URL = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8080/index"
TOTAL_REQUESTS = int(sys.argv[2]) if len(sys.argv) > 2 else 100
CONCURRENT = int(sys.argv[3]) if len(sys.argv) > 3 else 20


async def send_request(session, url, request_id):
    """단일 요청 전송"""
    try:
        start_time = time.time()
        async with session.get(url) as response:
            status = response.status
            if status == 200 and response.content_type == "application/json":
                data = await response.json()
                elapsed = time.time() - start_time
                return {
                    "success": True,
                    "status": status,
                    "elapsed": elapsed,
                    "actual_delay": float(data.get("actualDelay", 0)),
                    "callouts": len(data.get("callouts", [])),
                    "config": data.get("config", False),
                }
            else:
                await response.read()
                return {
                    "success": False,
                    "status": status,
                    "elapsed": time.time() - start_time,
                }
    except aiohttp.ClientError as e:
        return {
            "success": False,
            "error": str(e),
            "elapsed": 0,
        }


def percentile(values, fraction):
    if not values:
        return 0
    ordered = sorted(values)
    return ordered[min(len(ordered) - 1, int(len(ordered) * fraction))]


async def run_load_test():
    """부하 테스트 실행"""
    print("🚀 부하 테스트 시작")
    print("━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━")
    print(f"📍 Endpoint URL: {ENDPOINT_URL}")
    print(f"📊 총 요청 수: {TOTAL_REQUESTS}")
    print(f"⚡ 동시 요청 수: {CONCURRENT}")
    print("━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━")
    print()

    start_time = time.time()

    # 세마포어로 동시 요청 수 제한
    semaphore = asyncio.Semaphore(CONCURRENT)

    async def bounded_request(session, url, request_id):
        async with semaphore:
            return await send_request(session, url, request_id)

    async with aiohttp.ClientSession() as session:
        tasks = [
            bounded_request(session, ENDPOINT_URL, i)
            for i in range(TOTAL_REQUESTS)
        ]

        print("🔥 부하 발생 중...")
        print()

        results = await asyncio.gather(*tasks)

    total_time = time.time() - start_time
    ok = [r for r in results if r.get("success")]
    error_count = len(results) - len(ok)
    latencies = [r["elapsed"] for r in ok]
    reported = [r["actual_delay"] for r in ok]
    bad_config = sum(1 for r in ok if not r.get("config"))

    avg_elapsed = sum(latencies) / len(latencies) if latencies else 0
    avg_reported = sum(reported) / len(reported) if reported else 0
    rps = TOTAL_REQUESTS / total_time if total_time > 0 else 0

    # 결과 출력
    print("━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━")
    print("📈 테스트 결과")
    print("━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━")
    print(f"✅ 성공: {len(ok)}")
    print(f"❌ 실패: {error_count}")
    print(f"⏱️  총 소요 시간: {total_time:.2f}초")
    print(f"📊 평균 응답 시간: {avg_elapsed*1000:.2f}ms (p95 {percentile(latencies, 0.95)*1000:.2f}ms)")
    print(f"🕒 서버가 보고한 평균 actualDelay: {avg_reported*1000:.2f}ms")
    print(f"🚀 초당 요청 수 (RPS): {rps:.2f}")
    if bad_config:
        print(f"⚠️  config=false 응답: {bad_config}")
    print("━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━")


if __name__ == "__main__":
    asyncio.run(run_load_test())
