#!/usr/bin/env python3
"""
Hive sensor client: publishes readings to the server's /ws endpoint.

Readings are simulated by default. With --microphone, sound_value is the
dominant frequency of the laptop microphone (needs the ``microphone`` extra).
"""
import argparse
import asyncio
import json
import random
import sys
from datetime import datetime, timezone
from typing import Optional

import websockets


class SimulatedHive:
    """Random walk around typical brood-nest conditions"""

    def __init__(self, seed: Optional[int] = None):
        self.random = random.Random(seed)
        self.temperature = 34.5
        self.humidity = 60.0
        self.sound_value = 220.0

    def next_sound_value(self) -> float:
        # Mostly activity buzz, with occasional excursions into other bands
        if self.random.random() < 0.05:
            return self.random.uniform(300, 900)
        self.sound_value = min(max(self.sound_value + self.random.gauss(0, 15), 60), 290)
        return self.sound_value

    def read(self) -> dict:
        self.temperature = min(max(self.temperature + self.random.gauss(0, 0.1), 30), 38)
        self.humidity = min(max(self.humidity + self.random.gauss(0, 0.5), 40), 80)
        return {
            "temperature": round(self.temperature, 2),
            "humidity": round(self.humidity, 1),
            "sound_value": round(self.next_sound_value(), 1),
        }


class MicrophoneHive(SimulatedHive):
    """Simulated temperature/humidity, sound from the microphone's dominant frequency"""

    CHUNK = 4096
    RATE = 44100

    def __init__(self, seed: Optional[int] = None):
        super().__init__(seed)
        import numpy as np
        import pyaudio

        self.np = np
        self.audio = pyaudio.PyAudio()
        self.stream = self.audio.open(
            format=pyaudio.paInt16,
            channels=1,
            rate=self.RATE,
            input=True,
            frames_per_buffer=self.CHUNK
        )
        print("✅ Microphone started")
        print(f"   Sample rate: {self.RATE} Hz")

    def next_sound_value(self) -> float:
        np = self.np
        raw = self.stream.read(self.CHUNK, exception_on_overflow=False)
        samples = np.frombuffer(raw, dtype=np.int16).astype(np.float32)
        spectrum = np.abs(np.fft.rfft(samples * np.hanning(len(samples))))
        spectrum[0] = 0.0
        freqs = np.fft.rfftfreq(len(samples), d=1.0 / self.RATE)
        return float(freqs[int(np.argmax(spectrum))])

    def close(self):
        self.stream.stop_stream()
        self.stream.close()
        self.audio.terminate()


async def publish(url: str, hive: SimulatedHive, interval: float, count: Optional[int] = None):
    """Send one reading per interval and print the server's acks"""
    print(f"🔌 Connecting to {url}...")
    async with websockets.connect(url) as websocket:
        welcome = await websocket.recv()
        print(f"✅ Connected: {welcome}\n")

        sent = 0
        while count is None or sent < count:
            reading = hive.read()
            reading["created_at"] = datetime.now(timezone.utc).isoformat()
            await websocket.send(json.dumps(reading))

            ack = json.loads(await websocket.recv())
            while ack.get("type") == "heartbeat":
                ack = json.loads(await websocket.recv())
            sent += 1
            print(f"📤 #{sent} T={reading['temperature']}°C H={reading['humidity']}% "
                  f"S={reading['sound_value']}Hz → {ack.get('status')}")
            await asyncio.sleep(interval)


def main():
    parser = argparse.ArgumentParser(
        description="Publish hive readings to the telemetry server via WebSocket"
    )
    parser.add_argument(
        "--url", "-u",
        type=str,
        default="ws://localhost:8000/ws",
        help="WebSocket server URL (default: ws://localhost:8000/ws)"
    )
    parser.add_argument("--interval", "-i", type=float, default=2.0, help="Seconds between readings")
    parser.add_argument("--count", "-n", type=int, default=None, help="Stop after N readings")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for simulated values")
    parser.add_argument("--microphone", action="store_true", help="Derive sound_value from the microphone")

    args = parser.parse_args()

    if not args.url.startswith(('ws://', 'wss://')):
        print("⚠️  URL must start with ws:// or wss://")
        print(f"   You provided: {args.url}")
        sys.exit(1)

    hive = MicrophoneHive(args.seed) if args.microphone else SimulatedHive(args.seed)
    try:
        asyncio.run(publish(args.url, hive, args.interval, args.count))
    except KeyboardInterrupt:
        print("\n⏹️  Stopping...")
    except (OSError, websockets.exceptions.WebSocketException) as e:
        print(f"❌ Connection error: {type(e).__name__}: {e}")
        sys.exit(1)
    finally:
        if isinstance(hive, MicrophoneHive):
            hive.close()


if __name__ == "__main__":
    main()
