"""Live test: stream synthetic sock readings to a running server and print pushed alerts."""

import asyncio
import json
import time

import websockets


HOST = "localhost:8000"
SUBJECT = "demo-wearer"
READING_URI = f"ws://{HOST}/ws/reading/{SUBJECT}"
ALERTS_URI = f"ws://{HOST}/ws/alerts/{SUBJECT}"


async def alert_listener(ready_event: asyncio.Event):
    """Connect to /ws/alerts and print every alert the server pushes."""
    async with websockets.connect(ALERTS_URI) as ws:
        print("[ALERTS] Connected, waiting for alerts...\n")
        ready_event.set()

        while True:
            data = json.loads(await ws.recv())
            zone = f" @ {data['affectedZone']}" if data.get("affectedZone") else ""
            print("-" * 70)
            print(f"[ALERT] {data['severity'].upper()} {data['type']}{zone}: {data['title']}")
            print(f"        {data['message']}")
            if data.get("action"):
                print(f"        -> {data['action']}")
            print("-" * 70)


def build_reading(step: int, start: float) -> dict:
    """Nominal walking reading that heats the ball of the foot over time."""
    ball_temp = 32.0 + step * 0.6
    ball_pressure = 60.0 + (40.0 if step == 6 else 0.0) + step * 3
    return {
        "schema": "footguard.reading-compact/v1",
        "ts": start + step * 2,
        "temp": [32.0, round(ball_temp, 1), 31.8, 31.5],
        "pres": [55.0, round(ball_pressure, 1), 20.0, 35.0],
        "spo2": 97.0 - (step * 0.9 if step > 8 else 0),
        "hr": 78 + step,
        "acc": [0.4, 0.3, 9.6],
        "gyr": [2.0, 1.0, 0.5],
        "steps": 1000 + step * 3,
        "batt": max(5, 30 - step * 2),
        "activity": "walking",
    }


async def send_readings(count: int = 12):
    """Send *count* readings, one every half second, and print the acks."""
    start = time.time()
    async with websockets.connect(READING_URI) as ws:
        for step in range(count):
            await ws.send(json.dumps(build_reading(step, start)))
            resp = json.loads(await ws.recv())
            if resp["status"] != "accepted":
                print(f"[READING] #{step} rejected: {resp.get('reason')}")
                continue
            print(
                f"[READING] #{step} score={resp['overallScore']} "
                f"level={resp['riskLevel']} alerts={len(resp['alerts'])}"
            )
            await asyncio.sleep(0.5)


async def main():
    print("Connecting to alert stream...")
    ready = asyncio.Event()

    listener_task = asyncio.create_task(alert_listener(ready))
    await ready.wait()

    print("\nStreaming readings...\n")
    await send_readings()

    # Give the last pushes time to arrive
    await asyncio.sleep(2)

    listener_task.cancel()
    print("\nDone!")


if __name__ == "__main__":
    asyncio.run(main())
